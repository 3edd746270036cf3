from datetime import date

import pytest

from calendar_logic import Bounds
from month_view import MonthOptions, MonthView


@pytest.fixture
def year_bounds():
    return Bounds(date(2024, 1, 1), date(2024, 12, 31))


@pytest.fixture
def make_view():
    """Build a MonthView for February 2024 with overridable options."""

    def _make(**overrides) -> MonthView:
        options = {
            "date": date(2024, 2, 1),
            "min_date": date(2024, 1, 1),
            "max_date": date(2024, 12, 31),
        }
        options.update(overrides)
        return MonthView(MonthOptions(**options))

    return _make


@pytest.fixture
def settings_path(tmp_path, monkeypatch):
    import settings

    path = tmp_path / "settings.json"
    monkeypatch.setattr(settings, "_SETTINGS_PATH", str(path))
    return path
