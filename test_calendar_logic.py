from dataclasses import replace
from datetime import date, datetime

import pytest

from calendar_logic import (
    Bounds,
    DayRecord,
    DayType,
    RangeSelection,
    build_month,
    classify_day,
    classify_multiple,
    classify_range,
    classify_single,
    compare_day,
    day_cell,
    has_selection,
    is_out_of_bounds,
    month_layout,
    month_total_days,
    next_day,
    next_month,
    next_selection,
    placeholder_row_count,
    prev_day,
    prev_month,
    selection_from_days,
    status_label,
    weekday_headers,
    weekday_offset,
)


def types_by_day(grid) -> dict[int, DayType]:
    return {r.ordinal: r.type for r in grid.days}


# --- Day-granularity compare ---


def test_compare_day_ignores_time_of_day():
    morning = datetime(2024, 2, 14, 0, 1)
    evening = datetime(2024, 2, 14, 23, 59)
    assert compare_day(morning, evening) == 0
    assert compare_day(morning, date(2024, 2, 14)) == 0
    assert compare_day(date(2024, 2, 13), evening) == -1
    assert compare_day(date(2024, 2, 15), morning) == 1


def test_neighbours_stop_at_date_limits():
    assert prev_day(date.min) is None
    assert next_day(date.max) is None
    assert next_day(date(2024, 2, 28)) == date(2024, 2, 29)
    assert prev_day(datetime(2024, 3, 1, 12)) == date(2024, 2, 29)


# --- Bounds ---


@pytest.mark.parametrize("mode,selection", [
    ("single", date(2023, 12, 31)),
    ("multiple", [date(2023, 12, 30), date(2023, 12, 31)]),
    ("range", RangeSelection(date(2023, 12, 1), date(2024, 1, 2))),
    ("range", None),
])
def test_out_of_bounds_is_disabled_regardless_of_selection(year_bounds, mode, selection):
    assert classify_day(date(2023, 12, 31), year_bounds, mode, selection) == DayType.DISABLED
    assert classify_day(date(2025, 1, 1), year_bounds, mode, selection) == DayType.DISABLED


def test_bounds_are_inclusive_by_day(year_bounds):
    assert not is_out_of_bounds(datetime(2024, 1, 1, 23, 0), year_bounds)
    assert not is_out_of_bounds(date(2024, 12, 31), year_bounds)
    bounds = Bounds(datetime(2024, 1, 1, 18, 0), datetime(2024, 12, 31, 6, 0))
    assert not is_out_of_bounds(date(2024, 1, 1), bounds)
    assert not is_out_of_bounds(datetime(2024, 12, 31, 20, 0), bounds)


def test_inverted_bounds_disable_whole_month():
    bounds = Bounds(date(2024, 3, 1), date(2024, 2, 1))
    grid = build_month(date(2024, 2, 1), bounds, "single", date(2024, 2, 14))
    assert {r.type for r in grid.days} == {DayType.DISABLED}


# --- Single ---


def test_single_selection():
    assert classify_single(date(2024, 2, 14), datetime(2024, 2, 14, 9, 30)) == DayType.SELECTED
    assert classify_single(date(2024, 2, 15), date(2024, 2, 14)) == DayType.EMPTY
    assert classify_single(date(2024, 2, 15), None) == DayType.EMPTY


def test_single_mode_month(year_bounds):
    grid = build_month(date(2024, 2, 1), year_bounds, "single", date(2024, 2, 14))
    types = types_by_day(grid)
    assert grid.layout.total_days == 29
    assert types.pop(14) == DayType.SELECTED
    assert set(types.values()) == {DayType.EMPTY}


def test_single_mode_ignores_list_selection(year_bounds):
    assert classify_day(date(2024, 2, 14), year_bounds, "single", [date(2024, 2, 14)]) == DayType.EMPTY


# --- Multiple ---


def test_multiple_run_shapes():
    selected = [date(2024, 2, d) for d in (5, 6, 7, 8, 20)]
    assert classify_multiple(date(2024, 2, 5), selected) == DayType.START
    assert classify_multiple(date(2024, 2, 6), selected) == DayType.MULTIPLE_MIDDLE
    assert classify_multiple(date(2024, 2, 7), selected) == DayType.MULTIPLE_MIDDLE
    assert classify_multiple(date(2024, 2, 8), selected) == DayType.END
    assert classify_multiple(date(2024, 2, 20), selected) == DayType.MULTIPLE_SELECTED
    assert classify_multiple(date(2024, 2, 9), selected) == DayType.EMPTY


def test_multiple_pair_is_start_then_end():
    selected = {date(2024, 2, 10), date(2024, 2, 11)}
    assert classify_multiple(date(2024, 2, 10), selected) == DayType.START
    assert classify_multiple(date(2024, 2, 11), selected) == DayType.END


def test_multiple_run_across_month_boundary():
    selected = [datetime(2024, 1, 31, 8), date(2024, 2, 1)]
    assert classify_multiple(date(2024, 2, 1), selected) == DayType.END
    assert classify_multiple(date(2024, 1, 31), selected) == DayType.START


def test_multiple_mode_month(year_bounds):
    selection = [date(2024, 2, 5), date(2024, 2, 6), date(2024, 2, 7)]
    types = types_by_day(build_month(date(2024, 2, 1), year_bounds, "multiple", selection))
    assert types[5] == DayType.START
    assert types[6] == DayType.MULTIPLE_MIDDLE
    assert types[7] == DayType.END
    assert types[4] == DayType.EMPTY
    assert types[8] == DayType.EMPTY


def test_empty_multiple_selection(year_bounds):
    grid = build_month(date(2024, 2, 1), year_bounds, "multiple", [])
    assert {r.type for r in grid.days} == {DayType.EMPTY}


# --- Range ---


def test_range_start_only():
    selection = RangeSelection(date(2024, 2, 10))
    assert classify_range(date(2024, 2, 10), selection) == DayType.START
    assert classify_range(date(2024, 2, 11), selection) == DayType.EMPTY


def test_range_without_start():
    assert classify_range(date(2024, 2, 10), RangeSelection()) == DayType.EMPTY
    assert classify_range(date(2024, 2, 10), []) == DayType.EMPTY
    assert classify_range(date(2024, 2, 10), (None, date(2024, 2, 10))) == DayType.EMPTY


def test_range_month(year_bounds):
    selection = RangeSelection(date(2024, 2, 10), date(2024, 2, 12))
    grid = build_month(date(2024, 2, 1), year_bounds, "range", selection)
    types = types_by_day(grid)
    assert types[9] == DayType.EMPTY
    assert types[10] == DayType.START
    assert types[11] == DayType.MIDDLE
    assert types[12] == DayType.END
    assert types[13] == DayType.EMPTY


def test_range_accepts_dict_and_list():
    day = date(2024, 2, 11)
    assert classify_range(day, {"start": date(2024, 2, 10), "end": date(2024, 2, 12)}) == DayType.MIDDLE
    assert classify_range(day, [date(2024, 2, 10), date(2024, 2, 12)]) == DayType.MIDDLE


def test_same_day_range_without_allow_same_day_is_start():
    selection = RangeSelection(date(2024, 2, 10), date(2024, 2, 10))
    assert classify_range(date(2024, 2, 10), selection, allow_same_day=False) == DayType.START


def test_same_day_range_with_allow_same_day_is_start_end():
    selection = RangeSelection(date(2024, 2, 10), date(2024, 2, 10))
    assert classify_range(date(2024, 2, 10), selection, allow_same_day=True) == DayType.START_END


def test_reversed_range_has_no_middle():
    selection = RangeSelection(date(2024, 2, 12), date(2024, 2, 10))
    assert classify_range(date(2024, 2, 11), selection) == DayType.EMPTY
    assert classify_range(date(2024, 2, 12), selection) == DayType.START
    assert classify_range(date(2024, 2, 10), selection) == DayType.END


def test_unknown_mode_is_empty(year_bounds):
    assert classify_day(date(2024, 2, 14), year_bounds, "week", date(2024, 2, 14)) == DayType.EMPTY


def test_none_selection_is_empty(year_bounds):
    for mode in ("single", "multiple", "range"):
        assert classify_day(date(2024, 2, 14), year_bounds, mode, None) == DayType.EMPTY


# --- Status labels ---


def test_status_label_only_in_range_mode():
    assert status_label(DayType.START, "range") == "Start"
    assert status_label(DayType.END, "range") == "End"
    assert status_label(DayType.START_END, "range") == "Start/End"
    assert status_label(DayType.MIDDLE, "range") is None
    assert status_label(DayType.START, "multiple") is None
    assert status_label(DayType.END, "multiple") is None


def test_status_label_is_localized():
    assert status_label(DayType.START, "range", "de-DE") == "Beginn"
    assert status_label(DayType.START_END, "range", "zh-CN") == "开始/结束"


def test_range_month_carries_status_labels(year_bounds):
    selection = RangeSelection(date(2024, 2, 10), date(2024, 2, 12))
    grid = build_month(date(2024, 2, 1), year_bounds, "range", selection)
    labels = {r.ordinal: r.status_label for r in grid.days if r.status_label}
    assert labels == {10: "Start", 12: "End"}


# --- Grid layout ---


@pytest.mark.parametrize("year,month,expected", [
    (2024, 2, 29),
    (2023, 2, 28),
    (1900, 2, 28),
    (2000, 2, 29),
    (2024, 4, 30),
    (2024, 12, 31),
])
def test_month_total_days(year, month, expected):
    assert month_total_days(year, month) == expected


def test_weekday_offset_default_sunday():
    # 2024-02-01 is a Thursday
    assert weekday_offset(2024, 2) == 4
    # 2024-09-01 is a Sunday
    assert weekday_offset(2024, 9) == 0


@pytest.mark.parametrize("first_day_of_week,expected", [(0, 4), (1, 3), (4, 0), (5, 6), (6, 5)])
def test_weekday_offset_rotation(first_day_of_week, expected):
    assert weekday_offset(2024, 2, first_day_of_week) == expected


@pytest.mark.parametrize("bad", [-1, 7, "1", None])
def test_weekday_offset_rejects_bad_first_day(bad):
    with pytest.raises(ValueError):
        weekday_offset(2024, 2, bad)


def test_placeholder_rows_not_cells():
    assert placeholder_row_count(29, 4) == 5
    # 2024-06-01 is a Saturday: 6 + 30 cells span six rows
    assert month_layout(2024, 6).placeholder_row_count == 6
    # 2015-02-01 is a Sunday: exactly four rows
    assert month_layout(2015, 2).placeholder_row_count == 4


def test_build_month_placeholders(year_bounds):
    grid = build_month(date(2024, 2, 14), year_bounds, "single", None)
    assert grid.layout.weekday_offset == 4
    assert len(grid.placeholders) == 5
    assert all(p == DayRecord(date=None, type=DayType.PLACEHOLDER) for p in grid.placeholders)


def test_build_month_uses_month_not_day_of_reference(year_bounds):
    a = build_month(date(2024, 2, 1), year_bounds, "single", None)
    b = build_month(datetime(2024, 2, 20, 15, 0), year_bounds, "single", None)
    assert a == b
    assert [r.ordinal for r in a.days] == list(range(1, 30))
    assert a.days[0].date == date(2024, 2, 1)


def test_build_month_is_idempotent(year_bounds):
    selection = [date(2024, 2, 5), date(2024, 2, 6)]
    first = build_month(date(2024, 2, 1), year_bounds, "multiple", selection)
    second = build_month(date(2024, 2, 1), year_bounds, "multiple", list(selection))
    assert first == second


def test_day_cell():
    assert day_cell(0, 4) == (0, 4)
    assert day_cell(2, 4) == (0, 6)
    assert day_cell(3, 4) == (1, 0)
    assert day_cell(28, 4) == (4, 4)


def test_weekday_headers_rotate():
    assert weekday_headers() == ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]
    assert weekday_headers(1) == ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
    assert weekday_headers(1, "de-DE")[0] == "Mo"


# --- Transform ---


def test_transform_called_once_per_day_in_order(year_bounds):
    seen: list[int] = []

    def transform(record: DayRecord) -> DayRecord:
        seen.append(record.ordinal)
        if record.ordinal == 14:
            return replace(record, top_info="Valentine", type=DayType.DISABLED)
        return record

    grid = build_month(date(2024, 2, 1), year_bounds, "single", None, transform=transform)
    assert seen == list(range(1, 30))
    assert grid.days[13].top_info == "Valentine"
    assert grid.days[13].type == DayType.DISABLED


def test_transform_receives_classified_record(year_bounds):
    received: list[DayRecord] = []

    def transform(record: DayRecord) -> DayRecord:
        received.append(record)
        return record

    build_month(date(2024, 2, 1), year_bounds, "range",
                RangeSelection(date(2024, 2, 10)), transform=transform)
    assert received[9].type == DayType.START
    assert received[9].status_label == "Start"


def test_transform_error_propagates(year_bounds):
    def transform(record: DayRecord) -> DayRecord:
        if record.ordinal == 3:
            raise RuntimeError("boom")
        return record

    with pytest.raises(RuntimeError, match="boom"):
        build_month(date(2024, 2, 1), year_bounds, "single", None, transform=transform)


# --- Navigation ---


def test_month_navigation_wraps_years():
    assert prev_month(2024, 1) == (2023, 12)
    assert next_month(2024, 12) == (2025, 1)
    assert next_month(2024, 2) == (2024, 3)


# --- Selection that does not match the mode ---


@pytest.mark.parametrize("mode", ["multiple", "range"])
def test_bare_date_selection_in_collection_modes_is_empty(year_bounds, mode):
    day = date(2024, 2, 14)
    assert classify_day(day, year_bounds, mode, day) == DayType.EMPTY
    grid = build_month(date(2024, 2, 1), year_bounds, mode, day)
    assert {r.type for r in grid.days} == {DayType.EMPTY}


@pytest.mark.parametrize("selection", [
    [date(2024, 2, 14)],
    RangeSelection(date(2024, 2, 14)),
    {date(2024, 2, 14)},
])
def test_collection_selection_in_single_mode_is_empty(year_bounds, selection):
    grid = build_month(date(2024, 2, 1), year_bounds, "single", selection)
    assert {r.type for r in grid.days} == {DayType.EMPTY}


# --- Click-to-select ---


def test_selection_from_days():
    days = [date(2024, 2, 10), date(2024, 2, 12)]
    assert selection_from_days("single", days) == date(2024, 2, 10)
    assert selection_from_days("single", []) is None
    assert selection_from_days("multiple", days) == days
    assert selection_from_days("range", days) == RangeSelection(*days)
    assert selection_from_days("range", []) == RangeSelection()


def test_has_selection():
    assert not has_selection(None)
    assert not has_selection([])
    assert not has_selection(RangeSelection())
    assert has_selection(RangeSelection(date(2024, 2, 10)))
    assert has_selection([date(2024, 2, 10)])
    assert has_selection(date(2024, 2, 10))


def test_single_click_replaces():
    assert next_selection("single", date(2024, 2, 1), date(2024, 2, 9)) == date(2024, 2, 9)
    assert next_selection("single", None, datetime(2024, 2, 9, 10)) == date(2024, 2, 9)


def test_multiple_click_toggles():
    current = [date(2024, 2, 5), date(2024, 2, 6)]
    added = next_selection("multiple", current, date(2024, 2, 7))
    assert added == [date(2024, 2, 5), date(2024, 2, 6), date(2024, 2, 7)]
    assert current == [date(2024, 2, 5), date(2024, 2, 6)]
    assert next_selection("multiple", added, date(2024, 2, 6)) == [date(2024, 2, 5), date(2024, 2, 7)]
    assert next_selection("multiple", None, date(2024, 2, 6)) == [date(2024, 2, 6)]


def test_range_click_sequence():
    first = next_selection("range", RangeSelection(), date(2024, 2, 10))
    assert first == RangeSelection(date(2024, 2, 10))
    complete = next_selection("range", first, date(2024, 2, 12))
    assert complete == RangeSelection(date(2024, 2, 10), date(2024, 2, 12))
    # a click after a complete range starts over
    assert next_selection("range", complete, date(2024, 2, 20)) == RangeSelection(date(2024, 2, 20))


def test_range_click_before_start_restarts():
    open_range = RangeSelection(date(2024, 2, 10))
    assert next_selection("range", open_range, date(2024, 2, 8)) == RangeSelection(date(2024, 2, 8))


@pytest.mark.parametrize("allow_same_day,expected", [
    (True, RangeSelection(date(2024, 2, 10), date(2024, 2, 10))),
    (False, RangeSelection(date(2024, 2, 10))),
])
def test_range_same_day_click(allow_same_day, expected):
    open_range = RangeSelection(date(2024, 2, 10))
    assert next_selection("range", open_range, date(2024, 2, 10), allow_same_day) == expected
