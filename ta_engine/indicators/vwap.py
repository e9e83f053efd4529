"""
VWAP family: windowed (moving) VWAP, true daily VWAP from intraday bars and
the hybrid analysis that chooses between them.

Dispersion is the volume-weighted standard deviation of typical price around
the VWAP, so heavily traded bars dominate the bands just as they dominate
the average.
"""

import math
from collections.abc import Sequence
from typing import Optional

from ..data.models import PriceBar
from ..errors import CalculationError, ValidationError
from ..models.indicators import (
    Convergence,
    DataQuality,
    HybridVWAPResult,
    PricePosition,
    SignalStrength,
    TradingSignal,
    TrueVWAPResult,
    VWAPRecommendation,
    VWAPResult,
    VWAPTrend,
)
from .primitives import mean, pct_change, round_to
from .validators import validate_data_length, validate_period

POSITION_BAND = 0.001
STRENGTH_WINDOW = 5
TREND_MIN_BARS = 10
TREND_THRESHOLD_PCT = 2.0
EXPECTED_INTRADAY_POINTS = 26
MIN_POINTS_FOR_BOTH = 20


def _vwap_and_deviation(bars: Sequence[PriceBar]) -> tuple[float, float]:
    total_volume = sum(bar.volume for bar in bars)
    if total_volume <= 0:
        raise CalculationError("VWAP requires non-zero total volume", indicator="vwap")
    vwap = sum(bar.typical_price * bar.volume for bar in bars) / total_volume
    variance = sum((bar.typical_price - vwap) ** 2 * bar.volume for bar in bars) / total_volume
    return vwap, math.sqrt(variance)


def _position(price: float, vwap: float) -> PricePosition:
    if price > vwap * (1 + POSITION_BAND):
        return PricePosition.ABOVE
    if price < vwap * (1 - POSITION_BAND):
        return PricePosition.BELOW
    return PricePosition.AT


def _strength(bars: Sequence[PriceBar], vwap: float, position: PricePosition) -> SignalStrength:
    """Share of the last five typical prices on the same side of VWAP as the close."""
    if position is PricePosition.AT:
        return SignalStrength.WEAK
    recent = bars[-STRENGTH_WINDOW:]
    if position is PricePosition.ABOVE:
        agreeing = sum(1 for bar in recent if bar.typical_price > vwap)
    else:
        agreeing = sum(1 for bar in recent if bar.typical_price < vwap)
    consistency = agreeing / len(recent)
    if consistency >= 0.8:
        return SignalStrength.STRONG
    if consistency >= 0.6:
        return SignalStrength.MODERATE
    return SignalStrength.WEAK


def _trend(bars: Sequence[PriceBar], vwap: float) -> VWAPTrend:
    """Compare the VWAP of the earlier half of the window with the full-window VWAP."""
    if len(bars) < TREND_MIN_BARS:
        return VWAPTrend.FLAT
    earlier = bars[:len(bars) // 2]
    earlier_volume = sum(bar.volume for bar in earlier)
    if earlier_volume <= 0:
        return VWAPTrend.FLAT
    earlier_vwap = sum(bar.typical_price * bar.volume for bar in earlier) / earlier_volume
    change = pct_change(earlier_vwap, vwap)
    if change > TREND_THRESHOLD_PCT:
        return VWAPTrend.RISING
    if change < -TREND_THRESHOLD_PCT:
        return VWAPTrend.FALLING
    return VWAPTrend.FLAT


def calculate_vwap(bars: Sequence[PriceBar], standard_deviations: float = 1.0) -> VWAPResult:
    """
    VWAP over all given bars with bands at +/- standard_deviations.

    Raises:
        ValidationError: if ``bars`` is empty
        CalculationError: if total volume is zero
    """
    if not bars:
        raise ValidationError("VWAP requires at least one bar", field="bars")

    vwap, deviation = _vwap_and_deviation(bars)
    position = _position(bars[-1].close, vwap)

    return VWAPResult(
        vwap=round_to(vwap, 2),
        upper_band=round_to(vwap + standard_deviations * deviation, 2),
        lower_band=round_to(vwap - standard_deviations * deviation, 2),
        deviation=round_to(deviation, 4),
        position=position,
        strength=_strength(bars, vwap, position),
        trend=_trend(bars, vwap),
    )


def calculate_moving_vwap(bars: Sequence[PriceBar], period: int = 20,
                          standard_deviations: float = 1.0) -> VWAPResult:
    """VWAP over the last ``period`` daily bars."""
    validate_period(period)
    validate_data_length(bars, period, "mvwap")
    return calculate_vwap(bars[-period:], standard_deviations)


def assess_intraday_quality(bars: Sequence[PriceBar],
                            expected_points: int = EXPECTED_INTRADAY_POINTS) -> tuple[DataQuality, float]:
    """
    Rate one session of intraday bars.

    The score is the mean of completeness (bars / expected, capped at 1),
    the share of bars with volume and the share of OHLC-consistent bars.
    """
    if not bars:
        return DataQuality.LOW, 0.0

    completeness = min(len(bars) / expected_points, 1.0)
    volume_quality = sum(1 for bar in bars if bar.volume > 0) / len(bars)
    price_quality = sum(
        1 for bar in bars
        if bar.open >= 0 and bar.close >= 0
        and bar.low <= min(bar.open, bar.close)
        and bar.high >= max(bar.open, bar.close)
    ) / len(bars)

    score = mean([completeness, volume_quality, price_quality])
    if score >= 0.9:
        quality = DataQuality.HIGH
    elif score >= 0.7:
        quality = DataQuality.MEDIUM
    else:
        quality = DataQuality.LOW
    return quality, round_to(score, 4)


def calculate_true_daily_vwap(intraday_bars: Sequence[PriceBar], standard_deviations: float = 1.0,
                              expected_points: int = EXPECTED_INTRADAY_POINTS) -> TrueVWAPResult:
    """
    Daily VWAP from one session of intraday bars.

    Raises:
        ValidationError: if there are no intraday bars
        CalculationError: if the session has no volume
    """
    if not intraday_bars:
        raise ValidationError("True daily VWAP requires intraday bars", field="intraday_bars")

    vwap, deviation = _vwap_and_deviation(intraday_bars)
    quality, score = assess_intraday_quality(intraday_bars, expected_points)

    return TrueVWAPResult(
        vwap=round_to(vwap, 2),
        upper_band=round_to(vwap + standard_deviations * deviation, 2),
        lower_band=round_to(vwap - standard_deviations * deviation, 2),
        deviation=round_to(deviation, 4),
        quality=quality,
        quality_score=score,
        data_points=len(intraday_bars),
        session_date=intraday_bars[-1].date.date(),
    )


def select_recommended_vwap(true_daily: Optional[TrueVWAPResult]) -> VWAPRecommendation:
    if true_daily is None or true_daily.quality is DataQuality.LOW:
        return VWAPRecommendation.MOVING
    if true_daily.quality is DataQuality.HIGH and true_daily.data_points >= MIN_POINTS_FOR_BOTH:
        return VWAPRecommendation.BOTH
    return VWAPRecommendation.DAILY


def _band_vote(price: float, upper: float, lower: float) -> TradingSignal:
    if price > upper:
        return TradingSignal.BULLISH
    if price < lower:
        return TradingSignal.BEARISH
    return TradingSignal.NEUTRAL


def analyze_hybrid_vwap(bars: Sequence[PriceBar], true_daily: Optional[TrueVWAPResult] = None,
                        period: int = 20, standard_deviations: float = 1.0) -> HybridVWAPResult:
    """
    Combine the moving VWAP with an optional true daily VWAP.

    Convergence compares the two VWAPs relative to their average: under
    0.5% aligned, under 2% converging, otherwise diverging. The trading
    signal is a majority vote of the latest close breaking out of each
    variant's bands.
    """
    moving = calculate_moving_vwap(bars, period, standard_deviations)
    price = bars[-1].close

    convergence = None
    difference_pct = None
    reliability = DataQuality.MEDIUM
    votes = [_band_vote(price, moving.upper_band, moving.lower_band)]

    if true_daily is not None:
        average = (true_daily.vwap + moving.vwap) / 2
        ratio = abs(true_daily.vwap - moving.vwap) / average if average > 0 else 0.0
        difference_pct = round_to(ratio * 100, 2)
        if ratio < 0.005:
            convergence = Convergence.ALIGNED
        elif ratio < 0.02:
            convergence = Convergence.CONVERGING
        else:
            convergence = Convergence.DIVERGING

        if true_daily.quality is DataQuality.HIGH and convergence is Convergence.ALIGNED:
            reliability = DataQuality.HIGH
        elif true_daily.quality is DataQuality.LOW or convergence is Convergence.DIVERGING:
            reliability = DataQuality.LOW

        votes.append(_band_vote(price, true_daily.upper_band, true_daily.lower_band))

    bullish = votes.count(TradingSignal.BULLISH)
    bearish = votes.count(TradingSignal.BEARISH)
    if bullish > bearish:
        signal = TradingSignal.BULLISH
    elif bearish > bullish:
        signal = TradingSignal.BEARISH
    else:
        signal = TradingSignal.NEUTRAL

    return HybridVWAPResult(
        moving=moving,
        true_daily=true_daily,
        recommended=select_recommended_vwap(true_daily),
        convergence=convergence,
        difference_pct=difference_pct,
        reliability=reliability,
        trading_signal=signal,
    )
