"""Calendar arithmetic on the ``YYYY-MM-DD`` strings used by history rows."""

from __future__ import annotations

from datetime import date, timedelta

# Predictions advance one *calendar* day: weekends and exchange holidays are
# not skipped, and the model's 5-trading-day horizon is not reconciled with
# this step.
CALENDAR_DAY_NOT_TRADING_DAY = "calendar_day_not_trading_day"


def parse_date(date_str: str) -> date:
    """Parse an ISO calendar day, raising ``ValueError`` on anything else."""
    try:
        return date.fromisoformat(str(date_str).strip()[:10])
    except ValueError as exc:
        raise ValueError(f"Invalid ISO date: {date_str!r}") from exc


def format_date(d: date) -> str:
    return d.isoformat()


def next_calendar_day(date_str: str) -> str:
    """Return the day after ``date_str`` in the same ``YYYY-MM-DD`` form."""
    return format_date(parse_date(date_str) + timedelta(days=1))
