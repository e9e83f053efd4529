"""
MACD: EMA(fast) - EMA(slow) with an EMA signal line.

Both EMA series are seeded with an SMA and therefore start at different
input indices (fast_period - 1 and slow_period - 1). The fast series is
shifted by ``slow_period - fast_period`` so that each subtraction pairs
values belonging to the same bar.
"""

from collections.abc import Sequence

from ..models.indicators import MACDResult
from .primitives import ema_series, round_to
from .validators import (
    validate_data_length,
    validate_period,
    validate_period_relationship,
    validate_prices,
)


def macd_line(closes: Sequence[float], fast_period: int = 12,
              slow_period: int = 26) -> list[float]:
    """
    Unrounded MACD line; element 0 refers to closes[slow_period - 1].
    """
    validate_period_relationship(fast_period, slow_period, "fast_period", "slow_period")
    fast = ema_series(closes, fast_period)
    slow = ema_series(closes, slow_period)
    offset = slow_period - fast_period
    return [fast[i + offset] - slow[i] for i in range(len(slow))]


def calculate_macd(closes: Sequence[float], fast_period: int = 12,
                   slow_period: int = 26, signal_period: int = 9) -> MACDResult:
    """
    Calculate MACD, signal and histogram for the latest close.

    Raises:
        InsufficientDataError: if fewer than slow_period + signal_period - 1
            closes are available
    """
    validate_prices(closes, "closes")
    for name, value in (("fast_period", fast_period), ("slow_period", slow_period),
                        ("signal_period", signal_period)):
        validate_period(value, name)
    validate_data_length(closes, slow_period + signal_period - 1, "macd")

    line = macd_line(closes, fast_period, slow_period)
    signal = ema_series(line, signal_period)

    macd_value = line[-1]
    signal_value = signal[-1]
    return MACDResult(
        macd=round_to(macd_value, 3),
        signal=round_to(signal_value, 3),
        histogram=round_to(macd_value - signal_value, 3),
    )
