"""Theme colors, marker styling and color utilities for the UI."""

from __future__ import annotations

from dataclasses import dataclass

from codemaster.core.dictionary import DictionaryStatus
from codemaster.ui.models import EntryHints, Section


class HomeColors:
    """Light sidebar palette."""

    BG = "#f4f6f8"
    SIDEBAR_BG = "#ffffff"
    MAP_BG = "#e8eef2"
    MAP_GRID = "#d3dde4"

    PRIMARY = "#2c3e50"
    ACCENT = "#3498db"

    TEXT_PRIMARY = "#2c3e50"
    TEXT_SECONDARY = "#555555"
    TEXT_MUTED = "#888888"

    PROGRESS_TRACK = "#eeeeee"
    PROGRESS_FILL = "#3498db"
    PROGRESS_COMPLETE = "#2ecc71"

    DANGER = "#e74c3c"


class MarkerColors:
    DEFAULT = "#888888"
    MASTERED = "#2ecc71"
    REVIEW = "#f39c12"
    CURRENT = "#e74c3c"
    LEARNING = "#3498db"
    DONE = "#2ecc71"
    HIGHLIGHT = "#f1c40f"
    STATUS_NEW = "#dddddd"


STATUS_COLORS = {
    DictionaryStatus.NEW: MarkerColors.STATUS_NEW,
    DictionaryStatus.LEARNING: MarkerColors.LEARNING,
    DictionaryStatus.DONE: MarkerColors.DONE,
}


@dataclass(frozen=True)
class MarkerStyle:
    color: str
    fill_color: str
    opacity: float
    radius: int
    weight: int
    visible: bool = True


def marker_style(hints: EntryHints, section: Section, show_mastered: bool = True) -> MarkerStyle:
    """Derive a map marker's look from its render hints."""
    color = MarkerColors.DEFAULT
    opacity = 0.5
    radius = 5
    weight = 1

    if section is Section.GAME:
        if hints.is_mastered:
            color = MarkerColors.MASTERED
        elif hints.is_review:
            color = MarkerColors.REVIEW

        if hints.is_current:
            color = MarkerColors.CURRENT
            opacity = 1.0
            radius = 8
            weight = 3
        visible = show_mastered or not hints.is_mastered
        return MarkerStyle(color, color, opacity, radius, weight, visible)

    if hints.dictionary_status is DictionaryStatus.LEARNING:
        color = MarkerColors.LEARNING
        opacity = 0.8
    elif hints.dictionary_status is DictionaryStatus.DONE:
        color = MarkerColors.DONE
        opacity = 0.8

    if hints.is_highlighted:
        color = MarkerColors.HIGHLIGHT
        opacity = 1.0
        radius = 9
        weight = 4
    return MarkerStyle(color, color, opacity, radius, weight)


def status_text_color(status: DictionaryStatus) -> str:
    return "#333333" if status is DictionaryStatus.NEW else "white"


def blend_hex(a: str, b: str, t: float) -> str:
    """Blend two #RRGGBB colors. t=0 -> a, t=1 -> b."""
    try:
        a = a.strip()
        b = b.strip()
        if not (a.startswith("#") and b.startswith("#") and len(a) == 7 and len(b) == 7):
            return a
        t = max(0.0, min(1.0, float(t)))
        ar, ag, ab = int(a[1:3], 16), int(a[3:5], 16), int(a[5:7], 16)
        br, bg, bb = int(b[1:3], 16), int(b[3:5], 16), int(b[5:7], 16)
        r = int(ar + (br - ar) * t)
        g = int(ag + (bg - ag) * t)
        bl = int(ab + (bb - ab) * t)
        return f"#{r:02X}{g:02X}{bl:02X}"
    except ValueError:
        return a
