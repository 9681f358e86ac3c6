"""Application settings with JSON persistence.

Settings are stored at:
    ~/Library/Application Support/CountDown/settings.json

Usage::

    settings = load_settings()
    settings.completion_sound = "Gentle"
    save_settings(settings)
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, asdict, fields
from pathlib import Path


logger = logging.getLogger(__name__)

APP_SUPPORT_DIR = Path.home() / "Library" / "Application Support" / "CountDown"
SETTINGS_PATH = APP_SUPPORT_DIR / "settings.json"


@dataclass
class Settings:
    """All user-configurable preferences."""

    # ── audio ─────────────────────────────────────────────────────────
    completion_sound: str = "Bell"
    sound_enabled: bool = True
    sound_volume: int = 70                 # 0-100

    # ── notifications ─────────────────────────────────────────────────
    notifications_enabled: bool = True

    # ── window ────────────────────────────────────────────────────────
    always_on_top: bool = True
    show_in_menu_bar: bool = True
    background_opacity: float = 0.9        # 0.0-1.0
    window_x: int | None = None
    window_y: int | None = None
    window_width: int = 360
    window_height: int = 260


_DEFAULTS = Settings()


def _value_fits(name: str, value: object) -> bool:
    """True if *value* has the JSON type the field *name* expects."""
    default = getattr(_DEFAULTS, name)
    if default is None:
        # window position: int or unset
        return value is None or (isinstance(value, int) and not isinstance(value, bool))
    if isinstance(default, bool):
        return isinstance(value, bool)
    if isinstance(default, float):
        return isinstance(value, (int, float)) and not isinstance(value, bool)
    if isinstance(default, int):
        return isinstance(value, int) and not isinstance(value, bool)
    return isinstance(value, type(default))


def load_settings() -> Settings:
    """Load settings from disk, falling back to defaults.

    Unknown keys are ignored.  A value of the wrong type is dropped with a
    warning, so that field keeps its default.
    """
    if not SETTINGS_PATH.exists():
        return Settings()
    try:
        data = json.loads(SETTINGS_PATH.read_text(encoding="utf-8"))
        # Only use keys that exist in the dataclass
        valid_keys = {f.name for f in fields(Settings)}
        filtered = {}
        for key, value in data.items():
            if key not in valid_keys:
                continue
            if not _value_fits(key, value):
                logger.warning("Ignoring setting %s=%r: wrong type", key, value)
                continue
            filtered[key] = value
        return Settings(**filtered)
    except (OSError, ValueError, TypeError, AttributeError) as exc:
        logger.warning("Ignoring unreadable settings file %s: %s", SETTINGS_PATH, exc)
        return Settings()


def save_settings(settings: Settings) -> None:
    """Write settings to disk as JSON."""
    APP_SUPPORT_DIR.mkdir(parents=True, exist_ok=True)
    SETTINGS_PATH.write_text(
        json.dumps(asdict(settings), indent=2) + "\n",
        encoding="utf-8",
    )
