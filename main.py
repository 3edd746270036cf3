"""Entry point: open the month window, or print / export one month."""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import date

from calendar_logic import MODES, DayType, day_cell, selection_from_days
from messages import LOCALES
from month_view import MonthOptions, MonthView

logger = logging.getLogger(__name__)

_TEXT_MARKS = {
    DayType.SELECTED: "*",
    DayType.START: "[",
    DayType.END: "]",
    DayType.START_END: "#",
    DayType.MIDDLE: "-",
    DayType.MULTIPLE_SELECTED: "*",
    DayType.MULTIPLE_MIDDLE: "-",
    DayType.DISABLED: "x",
}


def _iso_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError as err:
        raise argparse.ArgumentTypeError(f"invalid date {value!r}, expected YYYY-MM-DD") from err


def _iso_month(value: str) -> date:
    try:
        year, month = (int(x) for x in value.split("-"))
        return date(year, month, 1)
    except ValueError as err:
        raise argparse.ArgumentTypeError(f"invalid month {value!r}, expected YYYY-MM") from err


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Mini calendar: one month with selection")
    parser.add_argument("--mode", choices=MODES,
                        help="Selection mode (default single; the window falls back to saved settings)")
    parser.add_argument("--date", type=_iso_month, help="Month to show (YYYY-MM), default current")
    parser.add_argument(
        "--select", type=_iso_date, nargs="*", default=[],
        help="Selected day(s); range mode takes START [END]",
    )
    parser.add_argument("--min-date", type=_iso_date, help="First valid day (inclusive)")
    parser.add_argument("--max-date", type=_iso_date, help="Last valid day (inclusive)")
    parser.add_argument("--first-day-of-week", type=int, choices=range(7),
                        help="0=Sunday .. 6=Saturday (default 0)")
    parser.add_argument("--allow-same-day", action="store_true", default=None,
                        help="Range mode: allow start and end on the same day")
    parser.add_argument("--locale", choices=LOCALES, help="default en-US")
    parser.add_argument("--print", dest="print_grid", action="store_true",
                        help="Print the month as text instead of opening a window")
    parser.add_argument("--export", metavar="PATH", help="Write the month as a PNG image")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def options_from_args(args: argparse.Namespace) -> MonthOptions:
    month = args.date or date.today().replace(day=1)
    mode = args.mode or "single"
    return MonthOptions(
        date=month,
        min_date=args.min_date or date.min,
        max_date=args.max_date or date.max,
        mode=mode,
        current=selection_from_days(mode, args.select),
        allow_same_day=bool(args.allow_same_day),
        first_day_of_week=args.first_day_of_week or 0,
        locale=args.locale or "en-US",
    )


def window_overrides(args: argparse.Namespace) -> dict:
    """Settings given on the command line; unset flags are left out."""
    overrides = {
        "mode": args.mode,
        "first_day_of_week": args.first_day_of_week,
        "allow_same_day": args.allow_same_day,
        "locale": args.locale,
    }
    return {k: v for k, v in overrides.items() if v is not None}


def format_month_text(view: MonthView) -> str:
    """Plain-text grid; a marker after each day shows its classification."""
    grid = view.grid
    lines = [view.title().center(28).rstrip(), "".join(f"{h:>4}" for h in view.weekday_headers())]
    rows: list[list[str]] = [["    "] * 7 for _ in range(grid.layout.placeholder_row_count)]
    for index, record in enumerate(grid.days):
        row, col = day_cell(index, grid.layout.weekday_offset)
        rows[row][col] = f"{record.ordinal:>3}{_TEXT_MARKS.get(record.type, ' ')}"
    lines.extend("".join(row).rstrip() for row in rows)
    return "\n".join(lines)


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        options = options_from_args(args)
    except ValueError as e:
        parser.error(str(e))
    view = MonthView(options)

    if args.print_grid or args.export:
        if args.print_grid:
            print(format_month_text(view))
        if args.export:
            from month_image import save_month_image

            save_month_image(view, args.export)
            logger.info("Wrote %s", args.export)
        return

    from calendar_window import CalendarWindow

    cal_win = CalendarWindow(min_date=args.min_date, max_date=args.max_date,
                             start=options.date, overrides=window_overrides(args),
                             selected=args.select)
    cal_win.show()
    cal_win.root.mainloop()


if __name__ == "__main__":
    main(sys.argv[1:])
