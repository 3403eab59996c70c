"""Tests for codemaster.ui.models – render hints and marker popups."""

from __future__ import annotations

import random
from pathlib import Path

import pytest

from codemaster.core.catalog import Entry, build_catalog
from codemaster.core.dictionary import DictionaryStatus, DictionaryTracker
from codemaster.core.progress import ProgressStore
from codemaster.core.quiz import QuizDirection, QuizEngine
from codemaster.ui.models import HIDDEN, EntryHints, Section, build_entry_hints, popup_lines

ABERDEEN = Entry("01224", "Aberdeen", 57.15, -2.09)
BRISTOL = Entry("0117", "Bristol", 51.45, -2.58)


@pytest.fixture()
def store(tmp_path: Path) -> ProgressStore:
    return ProgressStore(tmp_path / "progress.json")


@pytest.fixture()
def engine(store: ProgressStore) -> QuizEngine:
    return QuizEngine(build_catalog([ABERDEEN, BRISTOL]), store, lambda ms, cb: None, rng=random.Random(0))


# ===========================================================================
# build_entry_hints
# ===========================================================================

class TestBuildEntryHints:
    def test_one_hint_per_entry(self, engine: QuizEngine, store: ProgressStore):
        hints = build_entry_hints(engine, DictionaryTracker(store), Section.GAME)
        assert [h.entry for h in hints] == [ABERDEEN, BRISTOL]

    def test_flags(self, engine: QuizEngine, store: ProgressStore):
        tracker = DictionaryTracker(store)
        tracker.cycle_status("0117")
        engine.select_next_question(ABERDEEN)
        engine.submit("0000")
        engine.evaluate_answer(BRISTOL, "0117")

        hints = {h.entry.code: h for h in build_entry_hints(engine, tracker, Section.GAME, "0117")}
        assert hints["01224"].is_current
        assert hints["01224"].is_review
        assert not hints["01224"].is_mastered
        assert hints["0117"].is_mastered
        assert hints["0117"].dictionary_status is DictionaryStatus.LEARNING
        assert hints["0117"].is_highlighted
        assert not hints["01224"].is_highlighted

    def test_no_current_in_dictionary_section(self, engine: QuizEngine, store: ProgressStore):
        engine.select_next_question(ABERDEEN)
        hints = build_entry_hints(engine, DictionaryTracker(store), Section.DICTIONARY)
        assert not any(h.is_current for h in hints)


# ===========================================================================
# popup_lines
# ===========================================================================

class TestPopupLines:
    def _hints(self, mastered: bool) -> EntryHints:
        return EntryHints(
            entry=BRISTOL,
            is_mastered=mastered,
            is_review=False,
            is_current=False,
            dictionary_status=DictionaryStatus.NEW,
        )

    def test_dictionary_shows_both(self):
        assert popup_lines(self._hints(False), Section.DICTIONARY, QuizDirection.PLACE_TO_CODE) == ("Bristol", "0117")

    def test_mastered_shows_both(self):
        assert popup_lines(self._hints(True), Section.GAME, QuizDirection.CODE_TO_PLACE) == ("Bristol", "0117")

    def test_hides_code(self):
        assert popup_lines(self._hints(False), Section.GAME, QuizDirection.PLACE_TO_CODE) == ("Bristol", HIDDEN)

    def test_hides_place(self):
        assert popup_lines(self._hints(False), Section.GAME, QuizDirection.CODE_TO_PLACE) == (HIDDEN, "0117")
