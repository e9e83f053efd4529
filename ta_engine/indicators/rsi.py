"""
Relative Strength Index with Wilder smoothing.

The initial average gain and loss are simple means over the first ``period``
price changes; every later change is folded in with
``avg = (avg * (period - 1) + change) / period``. Long series are truncated
to a tail of ``period + warmup_period + 1`` closes, which is enough for the
smoothing to forget its seed.
"""

from collections.abc import Sequence

from ..models.indicators import RSISignal
from .primitives import round_to
from .validators import validate_data_length, validate_period, validate_prices

DEFAULT_WARMUP = 100


def calculate_rsi(closes: Sequence[float], period: int = 14,
                  warmup_period: int = DEFAULT_WARMUP) -> float:
    """
    Calculate RSI for the latest close.

    Raises:
        InsufficientDataError: if there are not more than ``period`` closes
    """
    validate_prices(closes, "closes")
    validate_period(period)
    validate_data_length(closes, period + 1, f"rsi_{period}")

    window = period + warmup_period + 1
    if len(closes) > window:
        closes = closes[-window:]

    changes = [closes[i] - closes[i - 1] for i in range(1, len(closes))]
    gains = [max(change, 0.0) for change in changes]
    losses = [max(-change, 0.0) for change in changes]

    avg_gain = sum(gains[:period]) / period
    avg_loss = sum(losses[:period]) / period
    for gain, loss in zip(gains[period:], losses[period:]):
        avg_gain = (avg_gain * (period - 1) + gain) / period
        avg_loss = (avg_loss * (period - 1) + loss) / period

    if avg_loss == 0:
        return 50.0 if avg_gain == 0 else 100.0
    if avg_gain == 0:
        return 0.0

    rs = avg_gain / avg_loss
    return round_to(100 - 100 / (1 + rs), 2)


def rsi_signal(value: float, overbought: float = 70, oversold: float = 30) -> RSISignal:
    if value >= overbought:
        return RSISignal.OVERBOUGHT
    if value <= oversold:
        return RSISignal.OVERSOLD
    return RSISignal.NEUTRAL
