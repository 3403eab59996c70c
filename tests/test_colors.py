"""Tests for codemaster.ui.colors – marker styling and color blending."""

from __future__ import annotations

import pytest

from codemaster.core.catalog import Entry
from codemaster.core.dictionary import DictionaryStatus
from codemaster.ui.colors import (
    STATUS_COLORS,
    HomeColors,
    MarkerColors,
    blend_hex,
    marker_style,
    status_text_color,
)
from codemaster.ui.models import EntryHints, Section

ENTRY = Entry("0117", "Bristol", 51.45, -2.58)


def _hints(**overrides) -> EntryHints:
    values = dict(
        entry=ENTRY,
        is_mastered=False,
        is_review=False,
        is_current=False,
        dictionary_status=DictionaryStatus.NEW,
        is_highlighted=False,
    )
    values.update(overrides)
    return EntryHints(**values)


# ===========================================================================
# Palette constants
# ===========================================================================

class TestPalette:
    def test_primary_is_hex(self):
        assert HomeColors.PRIMARY.startswith("#")
        assert len(HomeColors.PRIMARY) == 7

    def test_every_status_has_color(self):
        assert set(STATUS_COLORS) == set(DictionaryStatus)

    def test_status_text_color(self):
        assert status_text_color(DictionaryStatus.NEW) == "#333333"
        assert status_text_color(DictionaryStatus.DONE) == "white"


# ===========================================================================
# marker_style – game section
# ===========================================================================

class TestGameMarkers:
    def test_default_grey(self):
        s = marker_style(_hints(), Section.GAME)
        assert s.color == MarkerColors.DEFAULT
        assert s.opacity == 0.5
        assert s.radius == 5
        assert s.visible

    def test_mastered_green(self):
        assert marker_style(_hints(is_mastered=True), Section.GAME).color == MarkerColors.MASTERED

    def test_review_orange(self):
        assert marker_style(_hints(is_review=True), Section.GAME).color == MarkerColors.REVIEW

    def test_mastered_beats_review(self):
        s = marker_style(_hints(is_mastered=True, is_review=True), Section.GAME)
        assert s.color == MarkerColors.MASTERED

    def test_current_red_and_large(self):
        s = marker_style(_hints(is_current=True, is_mastered=True), Section.GAME)
        assert s.color == MarkerColors.CURRENT
        assert s.radius == 8
        assert s.weight == 3
        assert s.opacity == 1.0

    def test_hidden_mastered(self):
        assert not marker_style(_hints(is_mastered=True), Section.GAME, show_mastered=False).visible

    def test_hide_setting_keeps_unmastered(self):
        assert marker_style(_hints(is_review=True), Section.GAME, show_mastered=False).visible

    def test_dictionary_status_ignored_in_game(self):
        s = marker_style(_hints(dictionary_status=DictionaryStatus.DONE), Section.GAME)
        assert s.color == MarkerColors.DEFAULT


# ===========================================================================
# marker_style – dictionary section
# ===========================================================================

class TestDictionaryMarkers:
    def test_learning_blue(self):
        s = marker_style(_hints(dictionary_status=DictionaryStatus.LEARNING), Section.DICTIONARY)
        assert s.color == MarkerColors.LEARNING
        assert s.opacity == 0.8

    def test_done_green(self):
        s = marker_style(_hints(dictionary_status=DictionaryStatus.DONE), Section.DICTIONARY)
        assert s.color == MarkerColors.DONE

    def test_highlight_yellow(self):
        s = marker_style(_hints(is_highlighted=True, dictionary_status=DictionaryStatus.DONE), Section.DICTIONARY)
        assert s.color == MarkerColors.HIGHLIGHT
        assert s.radius == 9
        assert s.weight == 4

    def test_mastered_always_visible(self):
        s = marker_style(_hints(is_mastered=True), Section.DICTIONARY, show_mastered=False)
        assert s.visible
        assert s.color == MarkerColors.DEFAULT


# ===========================================================================
# blend_hex
# ===========================================================================

class TestBlendHex:
    def test_t_zero_returns_a(self):
        assert blend_hex("#FF0000", "#0000FF", 0.0) == "#FF0000"

    def test_t_one_returns_b(self):
        assert blend_hex("#FF0000", "#0000FF", 1.0) == "#0000FF"

    def test_clamps_t(self):
        assert blend_hex("#000000", "#FFFFFF", 5.0) == "#FFFFFF"

    @pytest.mark.parametrize("bad", ["red", "#FFF", "#GGGGGG"])
    def test_invalid_returns_a(self, bad: str):
        assert blend_hex(bad, "#000000", 0.5) == bad
