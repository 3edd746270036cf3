"""Localized calendar strings: range captions, month titles, weekday names."""

from __future__ import annotations

from datetime import date

DEFAULT_LOCALE = "en-US"

_DE_MONTHS = [
    "Januar", "Februar", "März", "April", "Mai", "Juni",
    "Juli", "August", "September", "Oktober", "November", "Dezember",
]

# --- locale tables: key -> text, or a callable for formatted entries ---------

MESSAGES: dict[str, dict] = {
    "en-US": {
        "start": "Start",
        "end": "End",
        "startEnd": "Start/End",
        "monthTitle": lambda year, month: f"{year}/{month}",
        "weekdays": ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"],
    },
    "zh-CN": {
        "start": "开始",
        "end": "结束",
        "startEnd": "开始/结束",
        "monthTitle": lambda year, month: f"{year}年{month}月",
        "weekdays": ["日", "一", "二", "三", "四", "五", "六"],
    },
    "de-DE": {
        "start": "Beginn",
        "end": "Ende",
        "startEnd": "Beginn/Ende",
        "monthTitle": lambda year, month: f"{_DE_MONTHS[month - 1]} {year}",
        "weekdays": ["So", "Mo", "Di", "Mi", "Do", "Fr", "Sa"],
    },
}

LOCALES = tuple(MESSAGES)


def _table(locale: str) -> dict:
    return MESSAGES.get(locale, MESSAGES[DEFAULT_LOCALE])


def t(key: str, locale: str = DEFAULT_LOCALE, *args) -> str:
    """Look up *key* for *locale*, falling back to en-US, then to the key itself."""
    message = _table(locale).get(key, MESSAGES[DEFAULT_LOCALE].get(key, key))
    if callable(message):
        return message(*args)
    return message


def format_month_title(d: date, locale: str = DEFAULT_LOCALE) -> str:
    return t("monthTitle", locale, d.year, d.month)


def weekday_names(locale: str = DEFAULT_LOCALE) -> list[str]:
    """Sunday-first weekday abbreviations."""
    return list(_table(locale)["weekdays"])
