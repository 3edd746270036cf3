"""Pure month calculations: day classification and grid layout, no UI dependencies."""

from __future__ import annotations

import calendar
import math
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum
from functools import lru_cache
from typing import Any, Callable, Iterable, NamedTuple

from messages import t, weekday_names

MODES = ("single", "multiple", "range")


class DayType(str, Enum):
    EMPTY = ""
    DISABLED = "disabled"
    SELECTED = "selected"
    START = "start"
    END = "end"
    START_END = "start-end"
    MIDDLE = "middle"
    MULTIPLE_SELECTED = "multiple-selected"
    MULTIPLE_MIDDLE = "multiple-middle"
    PLACEHOLDER = "placeholder"


class Bounds(NamedTuple):
    """Inclusive valid interval, compared by day."""

    min_date: date
    max_date: date


class RangeSelection(NamedTuple):
    start: date | None = None
    end: date | None = None


@dataclass(frozen=True)
class DayRecord:
    """One cell of the month grid, as handed to transforms and click handlers."""

    date: date | None
    type: DayType
    ordinal: int | None = None
    status_label: str | None = None
    top_info: str | None = None


@dataclass(frozen=True)
class GridLayout:
    weekday_offset: int
    total_days: int
    placeholder_row_count: int


@dataclass(frozen=True)
class MonthGrid:
    year: int
    month: int
    layout: GridLayout
    days: tuple[DayRecord, ...]
    placeholders: tuple[DayRecord, ...]


Transform = Callable[[DayRecord], DayRecord]


# ------------------------------------------------------------------
# Day-granularity helpers
# ------------------------------------------------------------------
def to_day(value: date) -> date:
    """Drop any time-of-day component."""
    if isinstance(value, datetime):
        return value.date()
    return value


def compare_day(a: date, b: date) -> int:
    """Return -1, 0 or 1 comparing *a* to *b* by year, month and day only."""
    a, b = to_day(a), to_day(b)
    if a < b:
        return -1
    if a > b:
        return 1
    return 0


def prev_day(day: date) -> date | None:
    try:
        return to_day(day) - timedelta(days=1)
    except OverflowError:
        return None


def next_day(day: date) -> date | None:
    try:
        return to_day(day) + timedelta(days=1)
    except OverflowError:
        return None


# ------------------------------------------------------------------
# Classifiers
# ------------------------------------------------------------------
def is_out_of_bounds(day: date, bounds: Bounds) -> bool:
    return compare_day(day, bounds.min_date) < 0 or compare_day(day, bounds.max_date) > 0


def classify_single(day: date, selected: date | None) -> DayType:
    if selected is not None and compare_day(day, selected) == 0:
        return DayType.SELECTED
    return DayType.EMPTY


def classify_multiple(day: date, selected: Iterable[date]) -> DayType:
    """Classify *day* against a set of discrete selected days.

    Each run of consecutive selected days gets a shape: the day whose
    following neighbour is also selected is ``start``, the day whose
    preceding neighbour is selected is ``end`` and days with both are
    ``multiple-middle``. A lone selected day is ``multiple-selected``.
    """
    members = selected if isinstance(selected, frozenset) else frozenset(to_day(d) for d in selected)

    def is_selected(d: date | None) -> bool:
        return d is not None and d in members

    day = to_day(day)
    if not is_selected(day):
        return DayType.EMPTY

    prev_selected = is_selected(prev_day(day))
    next_selected = is_selected(next_day(day))

    if prev_selected and next_selected:
        return DayType.MULTIPLE_MIDDLE
    if prev_selected:
        return DayType.END
    if next_selected:
        return DayType.START
    return DayType.MULTIPLE_SELECTED


def classify_range(day: date, selection: Any, allow_same_day: bool = False) -> DayType:
    """Classify *day* against a (start, end) pair where either end may be missing.

    A start after the end is not normalized: no day is ``middle`` then,
    though the endpoints themselves can still match.
    """
    start, end = _range_pair(selection)
    if start is None:
        return DayType.EMPTY

    compare_to_start = compare_day(day, start)
    if end is None:
        return DayType.START if compare_to_start == 0 else DayType.EMPTY

    compare_to_end = compare_day(day, end)
    if allow_same_day and compare_to_start == 0 and compare_to_end == 0:
        return DayType.START_END
    if compare_to_start == 0:
        return DayType.START
    if compare_to_end == 0:
        return DayType.END
    if compare_to_start > 0 and compare_to_end < 0:
        return DayType.MIDDLE
    return DayType.EMPTY


def is_collection(selection: Any) -> bool:
    return isinstance(selection, (list, tuple, set, frozenset, dict))


def _range_pair(selection: Any) -> RangeSelection:
    if isinstance(selection, RangeSelection):
        return selection
    if isinstance(selection, dict):
        return RangeSelection(selection.get("start"), selection.get("end"))
    items = list(selection)[:2]
    return RangeSelection(*items)


def classify_day(
    day: date,
    bounds: Bounds,
    mode: str,
    selection: Any,
    allow_same_day: bool = False,
) -> DayType:
    """Bounds first, then the classifier for *mode*."""
    if is_out_of_bounds(day, bounds):
        return DayType.DISABLED

    if selection is None:
        return DayType.EMPTY

    # multiple and range need a collection; a bare date classifies empty
    if mode == "multiple" and is_collection(selection):
        return classify_multiple(day, selection)
    if mode == "range" and is_collection(selection):
        return classify_range(day, selection, allow_same_day)
    if mode == "single" and isinstance(selection, date):
        return classify_single(day, selection)
    return DayType.EMPTY


def status_label(day_type: DayType, mode: str, locale: str = "en-US") -> str | None:
    """Short caption under a range endpoint; other days get none."""
    if mode != "range":
        return None
    if day_type in (DayType.START, DayType.END):
        return t(day_type.value, locale)
    if day_type == DayType.START_END:
        return t("startEnd", locale)
    return None


# ------------------------------------------------------------------
# Grid layout
# ------------------------------------------------------------------
def month_total_days(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def weekday_offset(year: int, month: int, first_day_of_week: int = 0) -> int:
    """Leading blank cells before the 1st, with *first_day_of_week* (0=Sunday) in column 0."""
    check_first_day_of_week(first_day_of_week)
    # date.weekday() is Monday-based
    real_day = (date(year, month, 1).weekday() + 1) % 7
    if first_day_of_week:
        return (real_day + 7 - first_day_of_week) % 7
    return real_day


def placeholder_row_count(total_days: int, offset: int) -> int:
    """Number of grid rows; lazy placeholders are one full-width entry per row."""
    return math.ceil((total_days + offset) / 7)


@lru_cache(maxsize=256)
def month_layout(year: int, month: int, first_day_of_week: int = 0) -> GridLayout:
    total = month_total_days(year, month)
    offset = weekday_offset(year, month, first_day_of_week)
    return GridLayout(offset, total, placeholder_row_count(total, offset))


def day_cell(index: int, offset: int) -> tuple[int, int]:
    """Return (row, column) of the index-th day (0-based) in the 7-column grid."""
    return divmod(index + offset, 7)


def weekday_headers(first_day_of_week: int = 0, locale: str = "en-US") -> list[str]:
    check_first_day_of_week(first_day_of_week)
    names = weekday_names(locale)
    return names[first_day_of_week:] + names[:first_day_of_week]


def check_first_day_of_week(value: int) -> None:
    if not isinstance(value, int) or not 0 <= value <= 6:
        raise ValueError(f"first_day_of_week must be an int in 0..6, got {value!r}")


def build_month(
    reference: date,
    bounds: Bounds,
    mode: str,
    selection: Any,
    *,
    allow_same_day: bool = False,
    first_day_of_week: int = 0,
    transform: Transform | None = None,
    locale: str = "en-US",
) -> MonthGrid:
    """Classify every day of *reference*'s month and lay out the grid.

    *transform*, if given, is called once per day in ordinal order with the
    built record and its return value replaces the record. Anything it
    raises propagates; no partial grid is returned.
    """
    year, month = reference.year, reference.month
    layout = month_layout(year, month, first_day_of_week)

    if mode == "multiple" and is_collection(selection):
        selection = frozenset(to_day(d) for d in selection)

    days: list[DayRecord] = []
    for ordinal in range(1, layout.total_days + 1):
        d = date(year, month, ordinal)
        day_type = classify_day(d, bounds, mode, selection, allow_same_day)
        record = DayRecord(
            date=d,
            type=day_type,
            ordinal=ordinal,
            status_label=status_label(day_type, mode, locale),
        )
        if transform is not None:
            record = transform(record)
        days.append(record)

    placeholders = (DayRecord(date=None, type=DayType.PLACEHOLDER),) * layout.placeholder_row_count

    return MonthGrid(year, month, layout, tuple(days), placeholders)


# ------------------------------------------------------------------
# Selection updates
# ------------------------------------------------------------------
def selection_from_days(mode: str, days: Iterable[date]) -> Any:
    """Shape a list of picked days into the selection *mode* expects."""
    days = list(days)
    if mode == "multiple":
        return days
    if mode == "range":
        return RangeSelection(*days[:2])
    return days[0] if days else None


def has_selection(selection: Any) -> bool:
    if isinstance(selection, RangeSelection):
        return selection.start is not None
    return bool(selection)


def next_selection(mode: str, current: Any, day: date, allow_same_day: bool = False) -> Any:
    """Selection after clicking *day*.

    single replaces, multiple toggles membership. In range mode a click
    completes an open range when it is after the start (or on it, with
    *allow_same_day*); any other click starts a new range.
    """
    day = to_day(day)
    if mode == "single":
        return day
    if mode == "multiple":
        picked = list(current) if is_collection(current) else []
        remaining = [d for d in picked if compare_day(d, day) != 0]
        if len(remaining) == len(picked):
            remaining.append(day)
        return remaining
    if mode == "range":
        start, end = _range_pair(current) if is_collection(current) else RangeSelection()
        if start is None or end is not None:
            return RangeSelection(day)
        cmp = compare_day(day, start)
        if cmp > 0 or (cmp == 0 and allow_same_day):
            return RangeSelection(start, day)
        return RangeSelection(day)
    return current


# ------------------------------------------------------------------
# Navigation
# ------------------------------------------------------------------
def prev_month(year: int, month: int) -> tuple[int, int]:
    """Return (year, month) for one month earlier."""
    if month == 1:
        return year - 1, 12
    return year, month - 1


def next_month(year: int, month: int) -> tuple[int, int]:
    """Return (year, month) for one month later."""
    if month == 12:
        return year + 1, 1
    return year, month + 1
