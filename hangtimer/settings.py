"""Application settings with JSON persistence.

Settings are stored at:
    ~/Library/Application Support/HangTimer/settings.json

Set ``HANGTIMER_HOME`` to keep settings, the history database and the
cached cue sounds somewhere else.

Usage::

    settings = load_settings()
    settings.sound_volume = 50
    save_settings(settings)
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, asdict, fields
from pathlib import Path

logger = logging.getLogger(__name__)


def _app_support_dir() -> Path:
    override = os.environ.get("HANGTIMER_HOME")
    if override:
        return Path(override).expanduser()
    return Path.home() / "Library" / "Application Support" / "HangTimer"


APP_SUPPORT_DIR = _app_support_dir()
SETTINGS_PATH = APP_SUPPORT_DIR / "settings.json"

# field name → (low, high), same limits as the settings dialog
_RANGES: dict[str, tuple[int, int]] = {
    "prepare_seconds": (1, 60),
    "sound_volume": (0, 100),
}


@dataclass
class Settings:
    """All user-configurable preferences."""

    # ── timer ─────────────────────────────────────────────────────────
    prepare_seconds: int = 5               # "get ready" countdown

    # ── audio ─────────────────────────────────────────────────────────
    sound_enabled: bool = True
    sound_volume: int = 30                 # 0-100

    # ── window ────────────────────────────────────────────────────────
    window_x: int | None = None
    window_y: int | None = None
    window_width: int = 480
    window_height: int = 760

    def __post_init__(self) -> None:
        for name, (low, high) in _RANGES.items():
            value = getattr(self, name)
            if isinstance(value, int):
                setattr(self, name, max(low, min(value, high)))


def _has_type_of(value: object, default: object) -> bool:
    if isinstance(default, bool):
        return isinstance(value, bool)
    is_int = isinstance(value, int) and not isinstance(value, bool)
    if default is None:
        return value is None or is_int
    return is_int


def _checked(data: dict) -> dict:
    """Drop wrongly typed values; out-of-range numbers are clamped by ``Settings``."""
    defaults = Settings()
    checked = {}
    for f in fields(Settings):
        if f.name not in data:
            continue
        value = data[f.name]
        if not _has_type_of(value, getattr(defaults, f.name)):
            logger.warning("Ignoring invalid setting %s=%r", f.name, value)
            continue
        if f.name in _RANGES:
            low, high = _RANGES[f.name]
            if not low <= value <= high:
                logger.warning(
                    "Setting %s=%r out of range %d-%d", f.name, value, low, high,
                )
        checked[f.name] = value
    return checked


def load_settings() -> Settings:
    """Load settings from disk, falling back to defaults."""
    try:
        if SETTINGS_PATH.exists():
            data = json.loads(SETTINGS_PATH.read_text(encoding="utf-8"))
            # Only keys that exist in the dataclass, with usable values
            return Settings(**_checked(data))
    except (OSError, ValueError, TypeError, AttributeError) as exc:
        logger.warning("Ignoring unreadable settings file %s: %s", SETTINGS_PATH, exc)
    return Settings()


def save_settings(settings: Settings) -> None:
    """Write settings to disk as JSON."""
    SETTINGS_PATH.parent.mkdir(parents=True, exist_ok=True)
    SETTINGS_PATH.write_text(
        json.dumps(asdict(settings), indent=2) + "\n",
        encoding="utf-8",
    )
