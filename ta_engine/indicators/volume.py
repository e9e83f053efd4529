"""Volume analysis over a trailing window of bars."""

from collections.abc import Sequence

from ..data.models import PriceBar
from ..models.indicators import AccumulationState, SignalStrength, VolumeResult, VolumeTrend
from .primitives import correlation, mean, pct_change, round_to
from .validators import validate_data_length, validate_period

TREND_THRESHOLD_PCT = 20.0
MIN_ACCUMULATION_BARS = 5
MIN_CORRELATION_BARS = 10


def volume_trend(volumes: Sequence[float]) -> VolumeTrend:
    """Compare the average volume of the second half of the window to the first half."""
    half = len(volumes) // 2
    change = pct_change(mean(volumes[:half]), mean(volumes[half:]))
    if change > TREND_THRESHOLD_PCT:
        return VolumeTrend.INCREASING
    if change < -TREND_THRESHOLD_PCT:
        return VolumeTrend.DECREASING
    return VolumeTrend.STABLE


def on_balance_volume(bars: Sequence[PriceBar]) -> list[float]:
    """Running signed volume: added on up closes, subtracted on down closes."""
    running = 0.0
    series = [running]
    for prev, bar in zip(bars, bars[1:]):
        if bar.close > prev.close:
            running += bar.volume
        elif bar.close < prev.close:
            running -= bar.volume
        series.append(running)
    return series


def accumulation_state(bars: Sequence[PriceBar]) -> AccumulationState:
    if len(bars) < MIN_ACCUMULATION_BARS:
        return AccumulationState.NEUTRAL
    a, b, c = on_balance_volume(bars)[-3:]
    if a < b < c:
        return AccumulationState.ACCUMULATING
    if a > b > c:
        return AccumulationState.DISTRIBUTING
    return AccumulationState.NEUTRAL


def price_volume_strength(bars: Sequence[PriceBar]) -> SignalStrength:
    """Grade how closely absolute price moves track absolute volume moves."""
    if len(bars) < MIN_CORRELATION_BARS:
        return SignalStrength.WEAK
    price_moves = [abs(pct_change(prev.close, bar.close)) for prev, bar in zip(bars, bars[1:])]
    volume_moves = [abs(pct_change(prev.volume, bar.volume)) for prev, bar in zip(bars, bars[1:])]
    corr = correlation(price_moves, volume_moves)
    if corr > 0.6:
        return SignalStrength.STRONG
    if corr > 0.3:
        return SignalStrength.MODERATE
    return SignalStrength.WEAK


def analyze_volume(bars: Sequence[PriceBar], period: int = 20,
                   spike_threshold: float = 2.0) -> VolumeResult:
    """
    Analyze the last ``period`` bars.

    Relative volume is the latest volume over the window average (1 when
    the average is zero); a spike is a relative volume above
    ``spike_threshold``.

    Raises:
        InsufficientDataError: if fewer than ``period`` bars
    """
    validate_period(period)
    validate_data_length(bars, period, "volume")

    window = list(bars[-period:])
    volumes = [bar.volume for bar in window]
    average = mean(volumes)
    current = volumes[-1]
    relative = current / average if average > 0 else 1.0

    return VolumeResult(
        average_volume=round_to(average, 0),
        current_volume=current,
        relative_volume=round_to(relative, 2),
        is_spike=average > 0 and relative > spike_threshold,
        trend=volume_trend(volumes),
        accumulation=accumulation_state(window),
        price_volume_strength=price_volume_strength(window),
    )
