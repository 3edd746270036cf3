"""Render a month into a PIL Image (PNG export of the calendar grid)."""

from __future__ import annotations

from PIL import Image, ImageDraw, ImageFont

from calendar_logic import DayType, day_cell
from month_view import MonthView
from styles import CAPTION_FG, GRID_BG, HEADER_BG, MARK_FG, day_colors

_TITLE_H = 28
_HEADER_H = 20


def _font(size: int) -> ImageFont.ImageFont:
    try:
        return ImageFont.truetype("DejaVuSans.ttf", size)
    except OSError:
        return ImageFont.load_default()


def _centered(draw: ImageDraw.ImageDraw, box: tuple[int, int, int, int],
              text: str, font, fill: str) -> None:
    bbox = draw.textbbox((0, 0), text, font=font)
    x = box[0] + (box[2] - box[0] - (bbox[2] - bbox[0])) / 2 - bbox[0]
    y = box[1] + (box[3] - box[1] - (bbox[3] - bbox[1])) / 2 - bbox[1]
    draw.text((x, y), text, fill=fill, font=font)


def render_month_image(view: MonthView, cell_size: int | None = None) -> Image.Image:
    """Draw title, weekday header and day cells of *view*.

    Placeholders (lazy, not yet shown) come out as blank full-width rows.
    """
    cell = cell_size or view.options.row_height
    layout = view.grid.layout
    rows = layout.placeholder_row_count
    title_h = _TITLE_H if view.options.show_month_title else 0
    width = cell * 7
    height = title_h + _HEADER_H + rows * cell

    img = Image.new("RGB", (width, height), GRID_BG)
    draw = ImageDraw.Draw(img)
    font = _font(max(10, cell // 3))
    small = _font(max(8, cell // 5))

    if title_h:
        draw.rectangle((0, 0, width, title_h), fill=HEADER_BG)
        _centered(draw, (0, 0, width, title_h), view.title(), font, "#333333")

    for col, name in enumerate(view.weekday_headers()):
        box = (col * cell, title_h, (col + 1) * cell, title_h + _HEADER_H)
        _centered(draw, box, name, small, "#333333")

    top = title_h + _HEADER_H
    mark = view.mark()
    if mark:
        _centered(draw, (0, top, width, height), mark, _font(cell * 3), MARK_FG)

    for index, record in enumerate(view.visible_days()):
        if record.type == DayType.PLACEHOLDER:
            continue
        row, col = day_cell(index, layout.weekday_offset)
        box = (col * cell, top + row * cell, (col + 1) * cell, top + (row + 1) * cell)
        bg, fg = day_colors(record.type, view.options.color)
        if bg != GRID_BG:
            draw.rectangle(box, fill=bg)
        text_box = box if not record.status_label else (box[0], box[1], box[2], box[3] - cell // 4)
        _centered(draw, text_box, str(record.ordinal), font, fg)
        if record.status_label:
            caption_box = (box[0], box[3] - cell // 3, box[2], box[3])
            _centered(draw, caption_box, record.status_label, small, fg)
        if record.top_info:
            _centered(draw, (box[0], box[1], box[2], box[1] + cell // 3),
                      record.top_info, small, CAPTION_FG if bg == GRID_BG else fg)

    return img


def save_month_image(view: MonthView, path: str, cell_size: int | None = None) -> None:
    render_month_image(view, cell_size).save(path)
