"""
Composite trend, momentum and strength signals.

Each signal is a small vote over boolean comparisons of indicator results.
Degraded indicator results never vote.
"""

from collections.abc import Mapping
from typing import Optional

from ..config.defaults import RSIParams
from ..models.analysis import Momentum, Signals, TrendDirection
from ..models.indicators import (
    ExtendedIndicatorResult,
    MACDResult,
    MovingAverageResult,
    RSIResult,
    SignalStrength,
)

TREND_MARGIN = 2


def _primary_rsi(rsi: Mapping[int, RSIResult]) -> Optional[RSIResult]:
    """RSI of the shortest configured period that computed successfully."""
    for period in sorted(rsi):
        if not rsi[period].degraded:
            return rsi[period]
    return None


def determine_trend(price: float, moving_averages: Mapping[int, MovingAverageResult]) -> TrendDirection:
    """
    Price against each moving average plus each shorter average against the
    next longer one. A net margin of at least two votes is required.
    """
    values = [
        moving_averages[period].value
        for period in sorted(moving_averages)
        if not moving_averages[period].degraded
    ]
    up = down = 0
    for value in values:
        if price > value:
            up += 1
        elif price < value:
            down += 1
    for shorter, longer in zip(values, values[1:]):
        if shorter > longer:
            up += 1
        elif shorter < longer:
            down += 1

    if up - down >= TREND_MARGIN:
        return TrendDirection.UPWARD
    if down - up >= TREND_MARGIN:
        return TrendDirection.DOWNWARD
    return TrendDirection.SIDEWAYS


def determine_momentum(rsi: Mapping[int, RSIResult], macd: MACDResult) -> Momentum:
    votes = 0
    primary = _primary_rsi(rsi)
    if primary is not None:
        votes += 1 if primary.value > 50 else -1
    if not macd.degraded:
        votes += 1 if macd.macd > macd.signal else -1
        votes += 1 if macd.histogram > 0 else -1

    if votes > 0:
        return Momentum.POSITIVE
    if votes < 0:
        return Momentum.NEGATIVE
    return Momentum.NEUTRAL


def determine_strength(rsi: Mapping[int, RSIResult], macd: MACDResult,
                       thresholds: Optional[RSIParams] = None) -> SignalStrength:
    thresholds = thresholds or RSIParams()
    score = 0

    primary = _primary_rsi(rsi)
    if primary is not None:
        if primary.value >= thresholds.overbought or primary.value <= thresholds.oversold:
            score += 2
        elif primary.value >= 60 or primary.value <= 40:
            score += 1

    if not macd.degraded:
        magnitude = abs(macd.histogram)
        if magnitude > 1:
            score += 2
        elif magnitude > 0.5:
            score += 1

    if score >= 3:
        return SignalStrength.STRONG
    if score >= 1:
        return SignalStrength.MODERATE
    return SignalStrength.WEAK


def synthesize_signals(price: float, indicators: ExtendedIndicatorResult,
                       thresholds: Optional[RSIParams] = None) -> Signals:
    return Signals(
        trend=determine_trend(price, indicators.moving_averages),
        momentum=determine_momentum(indicators.rsi, indicators.macd),
        strength=determine_strength(indicators.rsi, indicators.macd, thresholds),
    )
