from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Sequence

import pandas as pd

logger = logging.getLogger(__name__)

CODE_COLUMN = "Phone Code"
PLACE_COLUMN = "Area"
LATITUDE_COLUMN = "Latitude"
LONGITUDE_COLUMN = "Longitude"
REQUIRED_COLUMNS = (CODE_COLUMN, PLACE_COLUMN, LATITUDE_COLUMN, LONGITUDE_COLUMN)

_WHITESPACE = re.compile(r"\s+")


@dataclass(frozen=True)
class Entry:
    code: str
    place: str
    latitude: float
    longitude: float


def normalize_code(raw: str) -> str:
    """Strip whitespace and make sure the code carries its leading zero."""
    code = _WHITESPACE.sub("", str(raw))
    if code and not code.startswith("0"):
        code = "0" + code
    return code


class Catalog(Sequence[Entry]):
    """Immutable, deduplicated list of entries sorted by place name."""

    def __init__(self, entries: Iterable[Entry]) -> None:
        self._entries: tuple[Entry, ...] = tuple(entries)
        self._by_code: Dict[str, Entry] = {e.code: e for e in self._entries}

    def __len__(self) -> int:
        return len(self._entries)

    def __getitem__(self, index):  # type: ignore[override]
        return self._entries[index]

    def __iter__(self) -> Iterator[Entry]:
        return iter(self._entries)

    def __contains__(self, item: object) -> bool:
        if isinstance(item, Entry):
            return self._by_code.get(item.code) == item
        return item in self._by_code

    def get(self, code: str) -> Optional[Entry]:
        return self._by_code.get(code)

    def codes(self) -> List[str]:
        return [e.code for e in self._entries]


def build_catalog(entries: Iterable[Entry]) -> Catalog:
    """Collapse duplicate codes (first occurrence wins) and sort by place."""
    seen: set[str] = set()
    unique: List[Entry] = []
    for entry in entries:
        if entry.code in seen:
            continue
        seen.add(entry.code)
        unique.append(entry)
    unique.sort(key=lambda e: (e.place.casefold(), e.place, e.code))
    return Catalog(unique)


def load_catalog(path: Path) -> Catalog:
    if not path.exists():
        raise FileNotFoundError(f"Catalog file not found: {path}")

    df = pd.read_csv(path, dtype=str, skip_blank_lines=True, keep_default_na=False)
    df.columns = [str(c).strip() for c in df.columns]
    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"{path.name}: missing columns {', '.join(missing)}")

    total = len(df)
    df = df[list(REQUIRED_COLUMNS)].copy()
    df[CODE_COLUMN] = df[CODE_COLUMN].map(normalize_code)
    df[PLACE_COLUMN] = df[PLACE_COLUMN].str.strip()
    df[LATITUDE_COLUMN] = pd.to_numeric(df[LATITUDE_COLUMN].str.strip(), errors="coerce")
    df[LONGITUDE_COLUMN] = pd.to_numeric(df[LONGITUDE_COLUMN].str.strip(), errors="coerce")
    df = df[df[CODE_COLUMN] != ""]
    df = df.dropna(subset=[LATITUDE_COLUMN, LONGITUDE_COLUMN])
    dropped = total - len(df)

    before_dedup = len(df)
    df = df.drop_duplicates(subset=[CODE_COLUMN], keep="first")
    duplicates = before_dedup - len(df)

    catalog = build_catalog(
        Entry(
            code=row[CODE_COLUMN],
            place=row[PLACE_COLUMN],
            latitude=float(row[LATITUDE_COLUMN]),
            longitude=float(row[LONGITUDE_COLUMN]),
        )
        for row in df.to_dict("records")
    )
    logger.info(
        "Loaded %d entries from %s (%d incomplete rows dropped, %d duplicate codes collapsed)",
        len(catalog),
        path.name,
        dropped,
        duplicates,
    )
    return catalog
