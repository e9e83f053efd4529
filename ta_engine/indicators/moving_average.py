"""Simple and exponential moving averages."""

from collections.abc import Sequence

from .primitives import ema_series, mean, round_to, sma_series
from .validators import validate_data_length, validate_period, validate_prices


def calculate_moving_average(closes: Sequence[float], period: int) -> float:
    """
    Mean of the last ``period`` closes, rounded to 3 decimals.

    Raises:
        InsufficientDataError: if fewer than ``period`` closes are available
    """
    validate_prices(closes, "closes")
    validate_period(period)
    validate_data_length(closes, period, f"moving_average_{period}")
    return round_to(mean(closes[-period:]), 3)


def moving_average_series(closes: Sequence[float], period: int) -> list[float]:
    """Unrounded SMA series; element 0 refers to closes[period - 1]."""
    validate_period(period)
    validate_data_length(closes, period, f"moving_average_{period}")
    return sma_series(closes, period)


def calculate_ema(closes: Sequence[float], period: int) -> float:
    """Latest EMA value, SMA-seeded, rounded to 3 decimals."""
    validate_prices(closes, "closes")
    validate_period(period)
    validate_data_length(closes, period, f"ema_{period}")
    return round_to(ema_series(closes, period)[-1], 3)
