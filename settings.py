"""JSON-based settings persistence for the appointment calendar."""

import json
import logging
import os

logger = logging.getLogger(__name__)

_SETTINGS_PATH = os.environ.get(
    "APPOINTMENT_CALENDAR_SETTINGS",
    os.path.join(os.path.expanduser("~"), ".appointment-calendar-settings.json"),
)

_VIEWS = ("day", "week", "month")
VISIBLE_LIMIT_RANGE = (1, 10)

_DEFAULTS = {
    "visible_limit": 3,
    "default_view": "month",
    "appointments_path": None,
    "window_width": None,
    "window_height": None,
}


def load_settings(path: str | None = None) -> dict:
    """Load settings from disk, returning defaults for missing or invalid keys."""
    path = path or _SETTINGS_PATH
    settings = dict(_DEFAULTS)
    try:
        with open(path, "r", encoding="utf-8") as f:
            stored = json.load(f)
    except FileNotFoundError:
        return settings
    except (json.JSONDecodeError, UnicodeDecodeError, OSError) as exc:
        logger.warning("Ignoring unreadable settings file %s: %s", path, exc)
        return settings
    if not isinstance(stored, dict):
        logger.warning("Ignoring settings file %s: not a JSON object", path)
        return settings

    lo, hi = VISIBLE_LIMIT_RANGE
    limit = stored.get("visible_limit")
    if isinstance(limit, int) and not isinstance(limit, bool) and lo <= limit <= hi:
        settings["visible_limit"] = limit
    if stored.get("default_view") in _VIEWS:
        settings["default_view"] = stored["default_view"]
    if isinstance(stored.get("appointments_path"), str):
        settings["appointments_path"] = stored["appointments_path"]
    for key in ("window_width", "window_height"):
        if isinstance(stored.get(key), int) and not isinstance(stored[key], bool):
            settings[key] = stored[key]
    return settings


def save_settings(settings: dict, path: str | None = None) -> None:
    """Persist settings to disk."""
    path = path or _SETTINGS_PATH
    with open(path, "w", encoding="utf-8") as f:
        json.dump(settings, f, indent=2)
    logger.debug("Saved settings to %s", path)
