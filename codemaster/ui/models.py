"""Data models used by the UI."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from codemaster.core.catalog import Entry
from codemaster.core.dictionary import DictionaryStatus, DictionaryTracker
from codemaster.core.quiz import QuizDirection, QuizEngine

HIDDEN = "???"


class Section(str, Enum):
    GAME = "GAME"
    DICTIONARY = "DICTIONARY"


@dataclass
class EntryHints:
    """Render hints for one map marker; the view derives colours from these."""

    entry: Entry
    is_mastered: bool
    is_review: bool
    is_current: bool
    dictionary_status: DictionaryStatus
    is_highlighted: bool = False


def build_entry_hints(
    engine: QuizEngine,
    tracker: DictionaryTracker,
    section: Section,
    highlight_code: Optional[str] = None,
) -> list[EntryHints]:
    current = engine.current_question
    hints = []
    for entry in engine.catalog:
        hints.append(
            EntryHints(
                entry=entry,
                is_mastered=engine.is_mastered(entry.code),
                is_review=engine.is_review(entry.code),
                is_current=(
                    section is Section.GAME and current is not None and current.code == entry.code
                ),
                dictionary_status=tracker.status(entry.code),
                is_highlighted=highlight_code is not None and highlight_code == entry.code,
            )
        )
    return hints


def popup_lines(hints: EntryHints, section: Section, direction: QuizDirection) -> tuple[str, str]:
    """Marker tooltip as (title, subtitle), hiding the half the quiz asks for."""
    entry = hints.entry
    if section is Section.DICTIONARY or hints.is_mastered:
        return entry.place, entry.code
    if direction is QuizDirection.PLACE_TO_CODE:
        return entry.place, HIDDEN
    return HIDDEN, entry.code
