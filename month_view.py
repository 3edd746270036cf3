"""One calendar month as seen by a host: cached grid plus title/height/scroll/click."""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields, replace
from datetime import date
from typing import Any, Callable, Protocol

from calendar_logic import (
    MODES,
    Bounds,
    DayRecord,
    DayType,
    MonthGrid,
    RangeSelection,
    Transform,
    build_month,
    check_first_day_of_week,
    to_day,
    weekday_headers,
)
from messages import LOCALES, format_month_title

logger = logging.getLogger(__name__)


class ElementHandle(Protocol):
    """Something on screen the month can measure."""

    def top(self) -> float: ...

    def height(self) -> float: ...


class ScrollContainer(Protocol):
    def top(self) -> float: ...

    def scroll_top(self) -> float: ...

    def set_scroll_top(self, value: float) -> None: ...


@dataclass(frozen=True)
class MonthOptions:
    date: date
    min_date: date
    max_date: date
    mode: str = "single"
    current: Any = None
    allow_same_day: bool = False
    first_day_of_week: int = 0
    transform: Transform | None = None
    lazy_render: bool = False
    locale: str = "en-US"
    show_mark: bool = True
    show_month_title: bool = True
    show_subtitle: bool = True
    color: str | None = None
    row_height: int = 40

    def __post_init__(self) -> None:
        if self.mode not in MODES:
            raise ValueError(f"mode must be one of {MODES}, got {self.mode!r}")
        check_first_day_of_week(self.first_day_of_week)
        if self.locale not in LOCALES:
            logger.warning("Unknown locale %r, falling back to en-US", self.locale)

    @property
    def bounds(self) -> Bounds:
        return Bounds(self.min_date, self.max_date)

    def grid_key(self) -> tuple:
        """Everything the grid depends on, in hashable form."""
        return (
            self.date.year,
            self.date.month,
            to_day(self.min_date),
            to_day(self.max_date),
            self.mode,
            _freeze_selection(self.mode, self.current),
            self.allow_same_day,
            self.first_day_of_week,
            self.transform,
            self.locale,
        )


def _freeze_selection(mode: str, current: Any) -> Any:
    if current is None:
        return None
    if isinstance(current, date):
        return to_day(current)
    if mode == "multiple":
        return frozenset(to_day(d) for d in current)
    if mode == "range":
        if isinstance(current, dict):
            current = RangeSelection(current.get("start"), current.get("end"))
        return tuple(to_day(d) if d is not None else None for d in list(current)[:2])
    return tuple(current)


class MonthView:
    """Month capabilities for a host, decoupled from any UI toolkit.

    The grid is rebuilt only when an input it depends on changes. The
    visibility latch starts hidden and, once shown, is never reset.
    """

    def __init__(
        self,
        options: MonthOptions,
        month_element: ElementHandle | None = None,
        days_element: ElementHandle | None = None,
        on_click: Callable[[DayRecord], None] | None = None,
    ) -> None:
        self.options = options
        self.month_element = month_element
        self.days_element = days_element
        self.on_click = on_click
        self._visible = False
        self._grid_key: tuple | None = None
        self._grid: MonthGrid | None = None

    # ------------------------------------------------------------------
    # Inputs
    # ------------------------------------------------------------------
    def update(self, **changes: Any) -> None:
        unknown = set(changes) - {f.name for f in fields(MonthOptions)}
        if unknown:
            raise TypeError(f"Unknown month options: {sorted(unknown)}")
        self.options = replace(self.options, **changes)

    @property
    def grid(self) -> MonthGrid:
        key = self.options.grid_key()
        if self._grid is None or key != self._grid_key:
            opts = self.options
            logger.debug("Building grid for %04d-%02d (%s)", opts.date.year, opts.date.month, opts.mode)
            self._grid = build_month(
                opts.date,
                opts.bounds,
                opts.mode,
                opts.current,
                allow_same_day=opts.allow_same_day,
                first_day_of_week=opts.first_day_of_week,
                transform=opts.transform,
                locale=opts.locale,
            )
            self._grid_key = key
        return self._grid

    # ------------------------------------------------------------------
    # Lazy rendering
    # ------------------------------------------------------------------
    @property
    def visible(self) -> bool:
        return self._visible

    def set_visible(self, flag: bool = True) -> None:
        if flag and not self._visible:
            logger.debug("Month %s shown", self.title())
            self._visible = True

    @property
    def should_render(self) -> bool:
        return self._visible or not self.options.lazy_render

    def visible_days(self) -> tuple[DayRecord, ...]:
        grid = self.grid
        return grid.days if self.should_render else grid.placeholders

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------
    def title(self) -> str:
        return format_month_title(self.options.date, self.options.locale)

    def mark(self) -> str | None:
        """Month number drawn behind the days."""
        if self.options.show_mark and self.should_render:
            return str(self.options.date.month)
        return None

    def weekday_headers(self) -> list[str]:
        return weekday_headers(self.options.first_day_of_week, self.options.locale)

    def height(self) -> float:
        if self.month_element is None:
            return 0
        return self.month_element.height()

    def scroll_into_view(self, container: ScrollContainer) -> None:
        el = self.days_element if self.options.show_subtitle else self.month_element
        if el is None:
            raise RuntimeError("scroll_into_view needs a mounted element")
        scroll_top = el.top() - container.top() + container.scroll_top()
        container.set_scroll_top(scroll_top)

    def click(self, record: DayRecord) -> None:
        """Report a clicked day upward; disabled days and placeholders are inert."""
        if record.type in (DayType.DISABLED, DayType.PLACEHOLDER):
            return
        if self.on_click is not None:
            self.on_click(record)
