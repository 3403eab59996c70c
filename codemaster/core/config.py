from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

import yaml

DATA_DIR = Path(__file__).resolve().parent.parent / "data"
CONFIG_PATH = DATA_DIR / "config.yaml"


@dataclass(frozen=True)
class AppConfig:
    title: str = "Code Master"
    data_file: str = "uk_codes.csv"
    auto_advance_delay_ms: int = 1000
    focus_zoom: int = 10
    map_center: Tuple[float, float] = (54.0, -2.5)
    data_credit_url: str = ""

    @property
    def data_path(self) -> Path:
        """Catalog CSV, honouring the CODEMASTER_DATA override."""
        override = os.environ.get("CODEMASTER_DATA")
        if override:
            return Path(override).expanduser()
        path = Path(self.data_file)
        return path if path.is_absolute() else DATA_DIR / path


def progress_home() -> Path:
    """Directory holding progress.json (~/.codemaster unless CODEMASTER_HOME is set)."""
    override = os.environ.get("CODEMASTER_HOME")
    if override:
        return Path(override).expanduser()
    return Path.home() / ".codemaster"


def load_config(path: Optional[Path] = None) -> AppConfig:
    config_path = path or CONFIG_PATH
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    raw = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    if raw is None:
        return AppConfig()
    if not isinstance(raw, dict):
        raise ValueError(f"{config_path.name}: expected a YAML mapping")

    defaults = AppConfig()

    title = raw.get("title", defaults.title)
    if not isinstance(title, str) or not title.strip():
        raise ValueError(f"{config_path.name}: 'title' must be a non-empty string")

    data_file = raw.get("data_file", defaults.data_file)
    if not isinstance(data_file, str) or not data_file.strip():
        raise ValueError(f"{config_path.name}: 'data_file' must be a non-empty string")

    delay = raw.get("auto_advance_delay_ms", defaults.auto_advance_delay_ms)
    if isinstance(delay, bool) or not isinstance(delay, int) or delay < 0:
        raise ValueError(f"{config_path.name}: 'auto_advance_delay_ms' must be a non-negative integer")

    zoom = raw.get("focus_zoom", defaults.focus_zoom)
    if isinstance(zoom, bool) or not isinstance(zoom, (int, float)) or zoom <= 0:
        raise ValueError(f"{config_path.name}: 'focus_zoom' must be a positive number")

    center = raw.get("map_center", list(defaults.map_center))
    if not isinstance(center, (list, tuple)) or len(center) != 2:
        raise ValueError(f"{config_path.name}: 'map_center' must be [latitude, longitude]")
    try:
        map_center = (float(center[0]), float(center[1]))
    except (TypeError, ValueError):
        raise ValueError(f"{config_path.name}: 'map_center' must be numeric") from None

    credit = raw.get("data_credit_url", defaults.data_credit_url) or ""

    return AppConfig(
        title=title.strip(),
        data_file=data_file.strip(),
        auto_advance_delay_ms=delay,
        focus_zoom=zoom,
        map_center=map_center,
        data_credit_url=str(credit),
    )
