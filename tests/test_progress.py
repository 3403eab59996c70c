"""Tests for codemaster.core.progress – durable key/value progress store."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from codemaster.core.catalog import Entry, build_catalog
from codemaster.core.progress import (
    AUTO_ADVANCE_KEY,
    DICT_STATUS_KEY,
    DIRECTION_KEY,
    MASTERED_KEY,
    MISTAKES_KEY,
    REVIEW_KEY,
    SHOW_MASTERED_KEY,
    ProgressStore,
)
from codemaster.core.quiz import QuizEngine


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture()
def progress_file(tmp_path: Path) -> Path:
    return tmp_path / "progress.json"


@pytest.fixture()
def store(progress_file: Path) -> ProgressStore:
    """ProgressStore backed by a temp file so tests don't touch ~/.codemaster."""
    return ProgressStore(progress_file)


def _write_raw(path: Path, values: dict) -> None:
    path.write_text(json.dumps(values), encoding="utf-8")


# ---------------------------------------------------------------------------
# Fresh store defaults
# ---------------------------------------------------------------------------

class TestDefaults:
    def test_empty_sets(self, store: ProgressStore):
        assert store.mastered() == []
        assert store.review() == []

    def test_zero_mistakes(self, store: ProgressStore):
        assert store.mistakes() == 0

    def test_empty_dictionary_status(self, store: ProgressStore):
        assert store.dictionary_status() == {}

    def test_settings_defaults(self, store: ProgressStore):
        assert store.direction() == "placeToCode"
        assert store.auto_advance() is True
        assert store.show_mastered() is True

    def test_load_absent_key(self, store: ProgressStore):
        assert store.load("nothing") is None

    def test_default_location_honours_home(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("CODEMASTER_HOME", str(tmp_path / "home"))
        s = ProgressStore()
        assert s.file_path == tmp_path / "home" / "progress.json"


# ---------------------------------------------------------------------------
# Write-through
# ---------------------------------------------------------------------------

class TestWriteThrough:
    def test_set_mastered_persists(self, store: ProgressStore, progress_file: Path):
        store.set_mastered(["0117", "0118"])
        raw = json.loads(progress_file.read_text(encoding="utf-8"))
        assert json.loads(raw[MASTERED_KEY]) == ["0117", "0118"]

    def test_values_survive_reload(self, store: ProgressStore, progress_file: Path):
        store.set_mastered(["0117"])
        store.set_review(["0118"])
        store.set_mistakes(4)
        store.set_dictionary_status({"0117": 2})
        store.set_direction("codeToPlace")
        store.set_auto_advance(False)
        store.set_show_mastered(False)

        reloaded = ProgressStore(progress_file)
        assert reloaded.mastered() == ["0117"]
        assert reloaded.review() == ["0118"]
        assert reloaded.mistakes() == 4
        assert reloaded.dictionary_status() == {"0117": 2}
        assert reloaded.direction() == "codeToPlace"
        assert reloaded.auto_advance() is False
        assert reloaded.show_mastered() is False

    def test_save_without_key_flushes(self, store: ProgressStore, progress_file: Path):
        store.save()
        assert json.loads(progress_file.read_text(encoding="utf-8")) == {}

    def test_remove(self, store: ProgressStore):
        store.save("k", [1])
        store.remove("k")
        assert store.load("k") is None


# ---------------------------------------------------------------------------
# reset_game
# ---------------------------------------------------------------------------

class TestResetGame:
    def test_clears_game_keys_only(self, store: ProgressStore, progress_file: Path):
        store.set_mastered(["0117"])
        store.set_review(["0118"])
        store.set_mistakes(3)
        store.set_dictionary_status({"0117": 1})
        store.set_auto_advance(False)

        store.reset_game()

        assert store.mastered() == []
        assert store.review() == []
        assert store.mistakes() == 0
        assert store.dictionary_status() == {"0117": 1}
        assert store.auto_advance() is False
        raw = json.loads(progress_file.read_text(encoding="utf-8"))
        assert MASTERED_KEY not in raw
        assert DICT_STATUS_KEY in raw


# ---------------------------------------------------------------------------
# Corrupt and odd-shaped values
# ---------------------------------------------------------------------------

class TestLoadEdgeCases:
    def test_corrupt_file(self, progress_file: Path):
        progress_file.write_text("NOT VALID JSON", encoding="utf-8")
        s = ProgressStore(progress_file)
        assert s.mastered() == []
        assert s.auto_advance() is True

    def test_file_not_an_object(self, progress_file: Path):
        progress_file.write_text("[1, 2]", encoding="utf-8")
        assert ProgressStore(progress_file).mistakes() == 0

    def test_corrupt_single_key(self, progress_file: Path):
        _write_raw(progress_file, {MASTERED_KEY: "[not json", REVIEW_KEY: '["0117"]'})
        s = ProgressStore(progress_file)
        assert s.mastered() == []
        assert s.review() == ["0117"]

    def test_mistakes_as_string(self, progress_file: Path):
        _write_raw(progress_file, {MISTAKES_KEY: '"7"'})
        assert ProgressStore(progress_file).mistakes() == 7

    def test_mistakes_as_bare_number_text(self, progress_file: Path):
        _write_raw(progress_file, {MISTAKES_KEY: "12"})
        assert ProgressStore(progress_file).mistakes() == 12

    def test_mistakes_with_non_ascii_digit(self, progress_file: Path):
        _write_raw(progress_file, {MISTAKES_KEY: json.dumps("\u00b2")})
        assert ProgressStore(progress_file).mistakes() == 0

    def test_engine_starts_with_non_ascii_digit_mistakes(self, progress_file: Path):
        _write_raw(progress_file, {MISTAKES_KEY: json.dumps("\u00b2")})
        catalog = build_catalog([Entry("0117", "Bristol", 51.45, -2.58)])
        engine = QuizEngine(catalog, ProgressStore(progress_file), lambda ms, cb: None)
        assert engine.mistakes == 0

    def test_negative_mistakes(self, progress_file: Path):
        _write_raw(progress_file, {MISTAKES_KEY: "-3"})
        assert ProgressStore(progress_file).mistakes() == 0

    def test_mastered_not_list(self, progress_file: Path):
        _write_raw(progress_file, {MASTERED_KEY: '{"a": 1}'})
        assert ProgressStore(progress_file).mastered() == []

    def test_mastered_deduplicated(self, progress_file: Path):
        _write_raw(progress_file, {MASTERED_KEY: '["0117", "0117", 5, "0118"]'})
        assert ProgressStore(progress_file).mastered() == ["0117", "0118"]

    def test_dictionary_status_out_of_range(self, progress_file: Path):
        _write_raw(progress_file, {DICT_STATUS_KEY: '{"0117": 1, "0118": 7, "0119": "x", "0120": true}'})
        assert ProgressStore(progress_file).dictionary_status() == {"0117": 1}

    def test_flags_wrong_type(self, progress_file: Path):
        _write_raw(progress_file, {AUTO_ADVANCE_KEY: '"yes"', SHOW_MASTERED_KEY: "0"})
        s = ProgressStore(progress_file)
        assert s.auto_advance() is True
        assert s.show_mastered() is True

    def test_direction_wrong_type(self, progress_file: Path):
        _write_raw(progress_file, {DIRECTION_KEY: "42"})
        assert ProgressStore(progress_file).direction() == "placeToCode"
