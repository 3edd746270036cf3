"""Single-month calendar window (tkinter) driven by a MonthView."""

from __future__ import annotations

import logging
from datetime import date
from tkinter import font as tkfont
import tkinter as tk

from calendar_logic import (
    DayRecord,
    DayType,
    day_cell,
    has_selection,
    next_month,
    next_selection,
    prev_month,
    selection_from_days,
)
from month_view import MonthView
from settings import load_settings, merge_overrides, options_from_settings, save_settings
from styles import CAPTION_FG, GRID_BG, HEADER_BG, MARK_FG, day_colors

logger = logging.getLogger(__name__)


class TkElement:
    """Measurement handle over a tk widget."""

    __slots__ = ("widget",)

    def __init__(self, widget: tk.Widget) -> None:
        self.widget = widget

    def top(self) -> float:
        return self.widget.winfo_rooty()

    def height(self) -> float:
        return self.widget.winfo_height()


class TkScrollContainer:
    """Scroll handle over a tk.Canvas whose scrollregion holds the months."""

    __slots__ = ("canvas",)

    def __init__(self, canvas: tk.Canvas) -> None:
        self.canvas = canvas

    def top(self) -> float:
        return self.canvas.winfo_rooty()

    def scroll_top(self) -> float:
        return self.canvas.canvasy(0)

    def set_scroll_top(self, value: float) -> None:
        region = self.canvas.bbox("all")
        if not region:
            return
        total = region[3] - region[1]
        if total > 0:
            self.canvas.yview_moveto(max(0.0, value) / total)


class MonthPanel:
    """Widgets for one month: title, weekday header, day cells."""

    def __init__(self, parent: tk.Widget, view: MonthView, fonts: dict) -> None:
        self.view = view
        self.fonts = fonts
        self.frame = tk.Frame(parent, bg=GRID_BG)

        self.header = tk.Label(self.frame, font=fonts["header"], bg=HEADER_BG, fg="#333333")
        if view.options.show_month_title:
            self.header.pack(fill="x", pady=(0, 2))

        self.subtitle = tk.Frame(self.frame, bg=GRID_BG)
        self.subtitle.pack(fill="x")
        self.day_headers: list[tk.Label] = []
        for col in range(7):
            lbl = tk.Label(self.subtitle, font=fonts["bold"], bg=GRID_BG, fg="#333333", width=4)
            lbl.grid(row=0, column=col)
            self.day_headers.append(lbl)

        size = view.options.row_height
        self.days = tk.Canvas(
            self.frame, width=size * 7, height=size * 6,
            bg=GRID_BG, highlightthickness=0, borderwidth=0,
        )
        self.days.pack()
        self.days.bind("<ButtonPress-1>", self._on_press)
        self._cells: dict[tuple[int, int], DayRecord] = {}

        view.month_element = TkElement(self.frame)
        view.days_element = TkElement(self.days)

    def refresh(self) -> None:
        """Redraw from the view; the grid is rebuilt only if inputs changed."""
        view = self.view
        self.header.configure(text=view.title())
        for lbl, name in zip(self.day_headers, view.weekday_headers()):
            lbl.configure(text=name)

        size = view.options.row_height
        layout = view.grid.layout
        canvas = self.days
        canvas.delete("all")
        canvas.configure(height=size * layout.placeholder_row_count)
        self._cells.clear()

        mark = view.mark()
        if mark:
            canvas.create_text(
                size * 7 // 2, size * layout.placeholder_row_count // 2,
                text=mark, fill=MARK_FG, font=self.fonts["mark"],
            )

        for index, record in enumerate(view.visible_days()):
            if record.type == DayType.PLACEHOLDER:
                # one blank full-width row per placeholder
                continue
            row, col = day_cell(index, layout.weekday_offset)
            self._cells[(row, col)] = record
            self._draw_cell(record, row, col, size)

    def _draw_cell(self, record: DayRecord, row: int, col: int, size: int) -> None:
        canvas = self.days
        x0, y0 = col * size, row * size
        bg, fg = day_colors(record.type, self.view.options.color)
        if bg != GRID_BG:
            canvas.create_rectangle(x0, y0, x0 + size, y0 + size, fill=bg, outline="")
        if record.top_info:
            canvas.create_text(x0 + size // 2, y0 + size // 6, text=record.top_info,
                               fill=CAPTION_FG if bg == GRID_BG else fg, font=self.fonts["small"])
        text_y = y0 + size // 2 - (size // 8 if record.status_label else 0)
        canvas.create_text(x0 + size // 2, text_y, text=str(record.ordinal),
                           fill=fg, font=self.fonts["normal"])
        if record.status_label:
            canvas.create_text(x0 + size // 2, y0 + size * 5 // 6, text=record.status_label,
                               fill=fg, font=self.fonts["small"])

    def _on_press(self, event: tk.Event) -> None:
        size = self.view.options.row_height
        record = self._cells.get((event.y // size, event.x // size))
        if record is not None:
            self.view.click(record)


class CalendarWindow:
    """One navigable month with click-to-select for the configured mode."""

    def __init__(self, min_date: date | None = None, max_date: date | None = None,
                 start: date | None = None, overrides: dict | None = None,
                 selected: list[date] | None = None) -> None:
        self.root = tk.Tk()
        self.root.resizable(False, False)
        self.root.configure(bg=GRID_BG)
        self._setup_fonts()

        # overrides apply to this window only; self.settings is what gets saved
        self.settings = load_settings()
        effective = merge_overrides(self.settings, overrides or {})
        today = date.today()
        self.min_date = min_date or date(today.year - 1, today.month, 1)
        self.max_date = max_date or date(today.year + 1, today.month, 28)
        month = start or today
        self.year, self.month = month.year, month.month

        options = options_from_settings(
            effective, date(self.year, self.month, 1), self.min_date, self.max_date,
            current=selection_from_days(effective["mode"], selected or []),
        )
        self.view = MonthView(options, on_click=self._on_day_click)

        self._build_shell()
        self.panel = MonthPanel(self._outer, self.view, self._fonts)
        self.panel.frame.pack()
        self.panel.frame.bind("<Map>", self._on_map)
        self.panel.refresh()
        self.root.title(self.view.title())

        self.root.bind("<Escape>", self._on_escape)
        self.root.protocol("WM_DELETE_WINDOW", self.hide)

    # ------------------------------------------------------------------
    # Fonts
    # ------------------------------------------------------------------
    def _setup_fonts(self) -> None:
        families = tkfont.families(self.root)
        base = "Segoe UI" if "Segoe UI" in families else "TkDefaultFont"
        self._fonts = {
            "normal": tkfont.Font(family=base, size=10),
            "bold": tkfont.Font(family=base, size=9, weight="bold"),
            "header": tkfont.Font(family=base, size=11, weight="bold"),
            "nav": tkfont.Font(family=base, size=12, weight="bold"),
            "small": tkfont.Font(family=base, size=7),
            "mark": tkfont.Font(family=base, size=96, weight="bold"),
        }

    def _build_shell(self) -> None:
        self._outer = tk.Frame(self.root, bg=GRID_BG)
        self._outer.pack(padx=6, pady=4)

        nav = tk.Frame(self._outer, bg=GRID_BG)
        nav.pack(fill="x", pady=(0, 2))

        btn_prev = tk.Label(nav, text="◀", font=self._fonts["nav"], bg=GRID_BG, cursor="hand2")
        btn_prev.pack(side="left", padx=6)
        btn_prev.bind("<Button-1>", lambda _e: self._navigate(-1))

        btn_next = tk.Label(nav, text="▶", font=self._fonts["nav"], bg=GRID_BG, cursor="hand2")
        btn_next.pack(side="right", padx=6)
        btn_next.bind("<Button-1>", lambda _e: self._navigate(1))

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------
    def _on_day_click(self, record: DayRecord) -> None:
        opts = self.view.options
        current = next_selection(opts.mode, opts.current, record.date, opts.allow_same_day)
        logger.debug("Clicked %s (%s)", record.date, record.type.value or "empty")
        self.view.update(current=current)
        self.panel.refresh()

    def _clear_selection(self) -> None:
        self.view.update(current=selection_from_days(self.view.options.mode, []))
        self.panel.refresh()

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------
    def _on_map(self, _event: tk.Event) -> None:
        if not self.view.visible:
            self.view.set_visible()
            self.panel.refresh()

    def _on_escape(self, _event: tk.Event) -> None:
        if has_selection(self.view.options.current):
            self._clear_selection()
        else:
            self.hide()

    def _navigate(self, direction: int) -> None:
        if direction < 0:
            self.year, self.month = prev_month(self.year, self.month)
        else:
            self.year, self.month = next_month(self.year, self.month)
        logger.debug("Navigated to %04d-%02d", self.year, self.month)
        self.view.update(date=date(self.year, self.month, 1))
        self.panel.refresh()
        self.root.title(self.view.title())

    # ------------------------------------------------------------------
    # Show / Hide
    # ------------------------------------------------------------------
    def show(self) -> None:
        self.root.deiconify()
        self.root.lift()
        self.root.focus_force()

    def hide(self) -> None:
        self.root.update_idletasks()
        self.settings["window_width"] = self.root.winfo_width()
        self.settings["window_height"] = self.root.winfo_height()
        save_settings(self.settings)
        self.root.destroy()
