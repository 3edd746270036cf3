"""Day cell colours, shared by the tkinter panel and the image export."""

from calendar_logic import DayType

# Colours
ACCENT = "#0078D4"
GRID_BG = "white"
HEADER_BG = "#F3F3F3"
DISABLED_FG = "#C8C9CC"
MARK_FG = "#F2F3F5"
CAPTION_FG = "#555555"

_SOLID = {
    DayType.SELECTED,
    DayType.START,
    DayType.END,
    DayType.START_END,
    DayType.MULTIPLE_SELECTED,
}
_TINTED = {DayType.MIDDLE, DayType.MULTIPLE_MIDDLE}


def tint(color: str, alpha: float = 0.1) -> str:
    """Blend a #RRGGBB colour onto white."""
    r, g, b = (int(color[i:i + 2], 16) for i in (1, 3, 5))
    r, g, b = (round(255 - (255 - v) * alpha) for v in (r, g, b))
    return f"#{r:02X}{g:02X}{b:02X}"


def day_colors(day_type: DayType, color: str | None = None) -> tuple[str, str]:
    """Return (background, foreground) for a classified day."""
    accent = color or ACCENT
    if day_type in _SOLID:
        return accent, "white"
    if day_type in _TINTED:
        return tint(accent), accent
    if day_type == DayType.DISABLED:
        return GRID_BG, DISABLED_FG
    return GRID_BG, "black"
