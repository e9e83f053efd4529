"""Stochastic oscillator (%K / %D)."""

from collections.abc import Sequence

from ..data.models import PriceBar
from ..data.processor import highs, lows
from ..models.indicators import StochasticResult, StochasticState
from .primitives import highest, lowest, mean, round_to
from .validators import validate_data_length, validate_period


def _percent_k(bars: Sequence[PriceBar]) -> float:
    high = highest(highs(bars))
    low = lowest(lows(bars))
    if high == low:
        return 50.0
    k = (bars[-1].close - low) / (high - low) * 100
    # Unrepaired input may put the close outside [low, high]
    return min(max(k, 0.0), 100.0)


def calculate_stochastic(bars: Sequence[PriceBar], k_period: int = 14, d_period: int = 3,
                         overbought: float = 80, oversold: float = 20) -> StochasticResult:
    """
    %K over the last ``k_period`` bars and %D as the mean of the last
    ``d_period`` %K values. %K is 50 when the window's range is zero.

    Raises:
        InsufficientDataError: if fewer than k_period + d_period - 1 bars
    """
    validate_period(k_period, "k_period")
    validate_period(d_period, "d_period")
    validate_data_length(bars, k_period + d_period - 1, "stochastic")

    k_values = []
    for end in range(len(bars) - d_period + 1, len(bars) + 1):
        k_values.append(_percent_k(bars[end - k_period:end]))

    k = k_values[-1]
    d = mean(k_values)

    if k >= overbought and d >= overbought:
        state = StochasticState.OVERBOUGHT
    elif k <= oversold and d <= oversold:
        state = StochasticState.OVERSOLD
    else:
        state = StochasticState.NEUTRAL

    return StochasticResult(k=round_to(k, 2), d=round_to(d, 2), state=state)
