"""Utility helpers."""

from .time import (
    DEFAULT_PERIOD,
    PERIOD_DAYS,
    normalize_period,
    period_start_date,
    utc_now,
)

__all__ = [
    "DEFAULT_PERIOD",
    "PERIOD_DAYS",
    "normalize_period",
    "period_start_date",
    "utc_now",
]
