"""JSON-based settings persistence for the month calendar."""

import json
import logging
import os
from datetime import date

from calendar_logic import MODES
from messages import LOCALES
from month_view import MonthOptions

logger = logging.getLogger(__name__)

_SETTINGS_PATH = os.path.join(os.path.expanduser("~"), ".mini-calendar-settings.json")

_DEFAULTS = {
    "mode": "range",
    "allow_same_day": False,
    "first_day_of_week": 0,
    "lazy_render": True,
    "locale": "en-US",
    "show_mark": True,
    "show_month_title": True,
    "show_subtitle": True,
    "color": None,
    "row_height": 40,
    "window_width": None,
    "window_height": None,
}

_BOOL_KEYS = ("allow_same_day", "lazy_render", "show_mark", "show_month_title", "show_subtitle")


def load_settings() -> dict:
    """Load settings from disk, returning defaults for missing or invalid keys."""
    settings = dict(_DEFAULTS)
    try:
        with open(_SETTINGS_PATH, "r", encoding="utf-8") as f:
            stored = json.load(f)
    except FileNotFoundError:
        return settings
    except (json.JSONDecodeError, OSError) as e:
        logger.warning("Ignoring unreadable settings file %s: %s", _SETTINGS_PATH, e)
        return settings
    if not isinstance(stored, dict):
        logger.warning("Ignoring settings file %s: not a JSON object", _SETTINGS_PATH)
        return settings

    if stored.get("mode") in MODES:
        settings["mode"] = stored["mode"]
    if stored.get("locale") in LOCALES:
        settings["locale"] = stored["locale"]
    for key in _BOOL_KEYS:
        if key in stored and isinstance(stored[key], bool):
            settings[key] = stored[key]
    fdow = stored.get("first_day_of_week")
    if isinstance(fdow, int) and not isinstance(fdow, bool) and 0 <= fdow <= 6:
        settings["first_day_of_week"] = fdow
    color = stored.get("color")
    if isinstance(color, str) and len(color) == 7 and color.startswith("#"):
        settings["color"] = color
    for key in ("row_height", "window_width", "window_height"):
        if key in stored and isinstance(stored[key], int) and stored[key] > 0:
            settings[key] = stored[key]
    return settings


def save_settings(settings: dict) -> None:
    """Persist settings to disk."""
    with open(_SETTINGS_PATH, "w", encoding="utf-8") as f:
        json.dump(settings, f, indent=2)


def merge_overrides(settings: dict, overrides: dict) -> dict:
    """Return a copy of *settings* with the non-None *overrides* applied."""
    unknown = set(overrides) - set(_DEFAULTS)
    if unknown:
        raise ValueError(f"Unknown settings: {sorted(unknown)}")
    merged = dict(settings)
    merged.update({k: v for k, v in overrides.items() if v is not None})
    return merged


def options_from_settings(
    settings: dict,
    month: date,
    min_date: date,
    max_date: date,
    current=None,
) -> MonthOptions:
    """Combine persisted preferences with the month being shown."""
    return MonthOptions(
        date=month,
        min_date=min_date,
        max_date=max_date,
        mode=settings["mode"],
        current=current,
        allow_same_day=settings["allow_same_day"],
        first_day_of_week=settings["first_day_of_week"],
        lazy_render=settings["lazy_render"],
        locale=settings["locale"],
        show_mark=settings["show_mark"],
        show_month_title=settings["show_month_title"],
        show_subtitle=settings["show_subtitle"],
        color=settings["color"],
        row_height=settings["row_height"],
    )
