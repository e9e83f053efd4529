"""
Time helpers for analysis periods.

Analysis periods are given as short strings ("1mo", "1y", ...). Unknown
period strings fall back to one year.
"""

from datetime import UTC, datetime, timedelta
from typing import Optional

DEFAULT_PERIOD = "1y"

PERIOD_DAYS = {
    "1d": 1,
    "5d": 5,
    "14d": 14,
    "1mo": 30,
    "3mo": 90,
    "6mo": 180,
    "1y": 365,
    "2y": 730,
    "5y": 1825,
    "10y": 3650,
}


def utc_now() -> datetime:
    """Current wall-clock time as an aware UTC datetime."""
    return datetime.now(UTC)


def normalize_period(period: Optional[str]) -> str:
    """Return period if it is a known period string, else the default."""
    if period in PERIOD_DAYS:
        return period
    return DEFAULT_PERIOD


def period_start_date(period: Optional[str], now: Optional[datetime] = None) -> datetime:
    """
    Get the first date covered by an analysis period.

    Args:
        period: Period string such as "3mo" or "1y"
        now: Reference time, defaults to the current UTC time

    Returns:
        UTC datetime ``now - PERIOD_DAYS[period]`` days
    """
    reference = now or utc_now()
    return reference - timedelta(days=PERIOD_DAYS[normalize_period(period)])
