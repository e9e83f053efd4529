"""
Golden / dead cross detection between two simple moving averages.

A golden cross is the short average moving from at-or-below the long average
on the previous bar to above it on the latest bar; a dead cross is the
reverse. Strength is graded from the relative slope of both averages over
their last five points together with a five-bar volatility proxy.
"""

from collections.abc import Sequence

from ..models.indicators import CrossResult, CrossType, SignalStrength
from .primitives import last_n, mean, round_to, sma_series, std_dev
from .validators import (
    validate_data_length,
    validate_period,
    validate_period_relationship,
    validate_prices,
)

SLOPE_WINDOW = 5


def _relative_slope(series: Sequence[float]) -> float:
    window = last_n(series, SLOPE_WINDOW)
    if len(window) < 2 or window[0] == 0:
        return 0.0
    return (window[-1] - window[0]) / window[0]


def _volatility(closes: Sequence[float]) -> float:
    window = last_n(closes, SLOPE_WINDOW)
    avg = mean(window)
    return std_dev(window) / avg if avg > 0 else 0.0


def cross_strength(short_series: Sequence[float], long_series: Sequence[float],
                   closes: Sequence[float]) -> SignalStrength:
    short_slope = abs(_relative_slope(short_series))
    long_slope = abs(_relative_slope(long_series))
    volatility = _volatility(closes)

    if short_slope > 0.02 and long_slope > 0.01 and volatility > 0.03:
        return SignalStrength.STRONG
    if short_slope > 0.01 or long_slope > 0.005 or volatility > 0.02:
        return SignalStrength.MODERATE
    return SignalStrength.WEAK


def _confirmation_days(short_series: Sequence[float], long_series: Sequence[float],
                       max_days: int) -> int:
    """Consecutive bars before the latest that keep the latest ordering."""
    above = short_series[-1] > long_series[-1]
    below = short_series[-1] < long_series[-1]
    if not (above or below):
        return 0

    days = 0
    for short, long in zip(reversed(short_series[:-1]), reversed(long_series[:-1])):
        if days >= max_days:
            break
        if (above and short > long) or (below and short < long):
            days += 1
        else:
            break
    return days


def detect_cross(closes: Sequence[float], short_period: int = 25, long_period: int = 50,
                 confirmation: int = 3) -> CrossResult:
    """
    Detect a cross on the latest bar.

    Raises:
        InsufficientDataError: if fewer than long_period + confirmation closes
    """
    validate_prices(closes, "closes")
    validate_period(short_period, "short_period")
    validate_period(long_period, "long_period")
    validate_period_relationship(short_period, long_period, "short_period", "long_period")
    validate_data_length(closes, max(short_period, long_period) + max(confirmation, 1), "cross")

    long_series = sma_series(closes, long_period)
    short_series = sma_series(closes, short_period)[-len(long_series):]

    short_now, short_prev = short_series[-1], short_series[-2]
    long_now, long_prev = long_series[-1], long_series[-2]

    if short_prev <= long_prev and short_now > long_now:
        cross_type = CrossType.GOLDEN
    elif short_prev >= long_prev and short_now < long_now:
        cross_type = CrossType.DEAD
    else:
        cross_type = CrossType.NONE

    return CrossResult(
        cross_type=cross_type,
        strength=cross_strength(short_series, long_series, closes),
        confirmation_days=_confirmation_days(short_series, long_series, confirmation),
        short_period=short_period,
        long_period=long_period,
        short_ma=round_to(short_now, 3),
        long_ma=round_to(long_now, 3),
    )
