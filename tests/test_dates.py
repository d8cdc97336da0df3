import pytest

from rolling_forecast.dates import CALENDAR_DAY_NOT_TRADING_DAY, next_calendar_day


def test_next_calendar_day_leap_year():
    assert next_calendar_day("2024-02-28") == "2024-02-29"
    assert next_calendar_day("2024-02-29") == "2024-03-01"


def test_next_calendar_day_non_leap_year():
    assert next_calendar_day("2023-02-28") == "2023-03-01"


def test_next_calendar_day_year_rollover():
    assert next_calendar_day("2024-12-31") == "2025-01-01"


def test_next_calendar_day_does_not_skip_weekends():
    # 2024-01-05 is a Friday; the next step is Saturday, not Monday.
    assert CALENDAR_DAY_NOT_TRADING_DAY
    assert next_calendar_day("2024-01-05") == "2024-01-06"


def test_next_calendar_day_rejects_garbage():
    with pytest.raises(ValueError):
        next_calendar_day("not-a-date")
