from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from codemaster.core.config import progress_home

logger = logging.getLogger(__name__)

MASTERED_KEY = "uk_codes_mastered"
REVIEW_KEY = "uk_codes_review"
MISTAKES_KEY = "uk_codes_mistakes"
DICT_STATUS_KEY = "uk_codes_dict_status"
DIRECTION_KEY = "uk_codes_mode"
AUTO_ADVANCE_KEY = "uk_codes_auto_next"
SHOW_MASTERED_KEY = "uk_codes_show_dots"

DEFAULT_DIRECTION = "placeToCode"

_MISSING = object()


class ProgressStore:
    """Durable key/value store for quiz and dictionary progress.

    File: ~/.codemaster/progress.json, a JSON object mapping each key to the
    JSON text of its value. A value that cannot be decoded is treated as
    absent. Every setter writes through to disk immediately.
    """

    def __init__(self, file_path: Optional[Path] = None) -> None:
        self._file_path = file_path or progress_home() / "progress.json"
        self._file_path.parent.mkdir(parents=True, exist_ok=True)
        self._values: Dict[str, str] = self._read_file()

    @property
    def file_path(self) -> Path:
        return self._file_path

    # ---- raw key/value interface ----
    def load(self, key: str) -> Any:
        """Return the decoded value for key, or None when absent or corrupt."""
        value = self._decode(key)
        return None if value is _MISSING else value

    def save(self, key: Optional[str] = None, value: Any = None) -> None:
        """Store value under key and write through; with no key just flush to disk."""
        if key is not None:
            self._values[key] = json.dumps(value)
        self._write_file()

    def remove(self, key: str) -> None:
        if self._values.pop(key, None) is not None:
            self._write_file()

    def _decode(self, key: str) -> Any:
        raw = self._values.get(key)
        if raw is None:
            return _MISSING
        try:
            return json.loads(raw)
        except (TypeError, ValueError) as e:
            logger.warning("Ignoring unreadable value for %s: %s", key, e)
            return _MISSING

    # ---- game progress ----
    def mastered(self) -> List[str]:
        return self._code_list(MASTERED_KEY)

    def set_mastered(self, codes: List[str]) -> None:
        self.save(MASTERED_KEY, list(codes))

    def review(self) -> List[str]:
        return self._code_list(REVIEW_KEY)

    def set_review(self, codes: List[str]) -> None:
        self.save(REVIEW_KEY, list(codes))

    def mistakes(self) -> int:
        value = self.load(MISTAKES_KEY)
        # older saves hold the counter as a string
        if isinstance(value, str):
            try:
                value = int(value.strip())
            except ValueError:
                return 0
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            return 0
        return value

    def set_mistakes(self, count: int) -> None:
        self.save(MISTAKES_KEY, max(0, int(count)))

    def reset_game(self) -> None:
        """Clear mastered, review and mistakes. Dictionary status and settings stay."""
        for key in (MASTERED_KEY, REVIEW_KEY, MISTAKES_KEY):
            self._values.pop(key, None)
        self._write_file()

    # ---- dictionary ----
    def dictionary_status(self) -> Dict[str, int]:
        value = self.load(DICT_STATUS_KEY)
        if not isinstance(value, dict):
            return {}
        cleaned: Dict[str, int] = {}
        for code, status in value.items():
            if isinstance(status, bool) or not isinstance(status, int):
                continue
            if 0 <= status <= 2:
                cleaned[str(code)] = status
        return cleaned

    def set_dictionary_status(self, statuses: Dict[str, int]) -> None:
        self.save(DICT_STATUS_KEY, dict(statuses))

    # ---- settings ----
    def direction(self) -> str:
        value = self.load(DIRECTION_KEY)
        return value if isinstance(value, str) and value else DEFAULT_DIRECTION

    def set_direction(self, direction: str) -> None:
        self.save(DIRECTION_KEY, direction)

    def auto_advance(self) -> bool:
        return self._flag(AUTO_ADVANCE_KEY)

    def set_auto_advance(self, enabled: bool) -> None:
        self.save(AUTO_ADVANCE_KEY, bool(enabled))

    def show_mastered(self) -> bool:
        return self._flag(SHOW_MASTERED_KEY)

    def set_show_mastered(self, enabled: bool) -> None:
        self.save(SHOW_MASTERED_KEY, bool(enabled))

    # ---- helpers ----
    def _code_list(self, key: str) -> List[str]:
        value = self.load(key)
        if not isinstance(value, list):
            return []
        seen: set[str] = set()
        codes: List[str] = []
        for item in value:
            if isinstance(item, str) and item and item not in seen:
                seen.add(item)
                codes.append(item)
        return codes

    def _flag(self, key: str, default: bool = True) -> bool:
        value = self.load(key)
        return value if isinstance(value, bool) else default

    def _read_file(self) -> Dict[str, str]:
        if not self._file_path.exists():
            return {}
        try:
            payload = json.loads(self._file_path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as e:
            logger.warning("Could not load progress from %s: %s", self._file_path, e)
            return {}
        if not isinstance(payload, dict):
            logger.warning("Ignoring progress file %s: expected a JSON object", self._file_path)
            return {}
        return {str(k): v for k, v in payload.items() if isinstance(v, str)}

    def _write_file(self) -> None:
        self._file_path.parent.mkdir(parents=True, exist_ok=True)
        try:
            self._file_path.write_text(json.dumps(self._values, indent=2, sort_keys=True), encoding="utf-8")
        except OSError as e:
            logger.warning("Could not save progress to %s: %s", self._file_path, e)
