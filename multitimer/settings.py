"""Application settings with JSON persistence.

Settings are stored at:
    ~/.config/MultiTimer/settings.json

Set ``MULTITIMER_HOME`` to keep settings, sounds and the usage database
somewhere else.

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


def _app_dir() -> Path:
    override = os.environ.get("MULTITIMER_HOME")
    if override:
        return Path(override).expanduser()
    return Path.home() / ".config" / "MultiTimer"


APP_DIR = _app_dir()
SETTINGS_PATH = APP_DIR / "settings.json"


@dataclass
class Settings:
    """All user-configurable preferences."""

    # ── timer ─────────────────────────────────────────────────────────
    last_mode: str = "stopwatch"          # stopwatch | countdown | pomodoro
    countdown_hours: int = 0
    countdown_minutes: int = 0
    countdown_seconds: int = 0
    focus_minutes: int = 25
    short_break_minutes: int = 5
    long_break_minutes: int = 15
    sessions_before_long_break: int = 4
    tick_interval_ms: int = 50

    # ── audio ─────────────────────────────────────────────────────────
    sound_enabled: bool = True
    sound_volume: int = 70                 # 0-100

    # ── notifications ─────────────────────────────────────────────────
    notifications_enabled: bool = True

    # ── window ────────────────────────────────────────────────────────
    window_x: int | None = None
    window_y: int | None = None
    window_width: int = 480
    window_height: int = 640


def _fits(value: object, default: object) -> bool:
    """Does *value* have the same JSON type as the field's *default*?"""
    if isinstance(default, bool):
        return isinstance(value, bool)
    if isinstance(default, int) or default is None:
        # None defaults are the optional window coordinates
        if value is None:
            return default is None
        return isinstance(value, int) and not isinstance(value, bool)
    return isinstance(value, type(default))


def _drop_mistyped(data: dict) -> dict:
    defaults = asdict(Settings())
    kept = {}
    for key, value in data.items():
        if _fits(value, defaults[key]):
            kept[key] = value
        else:
            logger.warning("Ignoring setting %s=%r (wrong type)", key, value)
    return kept


def load_settings() -> Settings:
    """Load settings from disk, falling back to defaults."""
    try:
        if SETTINGS_PATH.exists():
            data = json.loads(SETTINGS_PATH.read_text(encoding="utf-8"))
            # Only use keys that exist in the dataclass
            valid_keys = {f.name for f in fields(Settings)}
            filtered = {k: v for k, v in data.items() if k in valid_keys}
            return Settings(**_drop_mistyped(filtered))
    except (OSError, ValueError, TypeError, AttributeError) as exc:
        logger.warning("Ignoring unreadable settings at %s: %s", SETTINGS_PATH, exc)
    return Settings()


def save_settings(settings: Settings) -> None:
    """Write settings to disk as JSON."""
    APP_DIR.mkdir(parents=True, exist_ok=True)
    SETTINGS_PATH.write_text(
        json.dumps(asdict(settings), indent=2) + "\n",
        encoding="utf-8",
    )
