"""
Indicator result value objects.

Every result carries an explicit ``degraded`` flag. A degraded result is the
documented fallback shape produced when the computation failed: numbers are
zeroed and labels neutral, but consumers must check the flag rather than
interpret the zeros.
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Optional


class SignalStrength(str, Enum):
    STRONG = "strong"
    MODERATE = "moderate"
    WEAK = "weak"


class RSISignal(str, Enum):
    OVERBOUGHT = "overbought"
    OVERSOLD = "oversold"
    NEUTRAL = "neutral"


class StochasticState(str, Enum):
    OVERBOUGHT = "overbought"
    OVERSOLD = "oversold"
    NEUTRAL = "neutral"


class CrossType(str, Enum):
    GOLDEN = "golden"
    DEAD = "dead"
    NONE = "none"


class VolumeTrend(str, Enum):
    INCREASING = "increasing"
    DECREASING = "decreasing"
    STABLE = "stable"


class AccumulationState(str, Enum):
    ACCUMULATING = "accumulating"
    DISTRIBUTING = "distributing"
    NEUTRAL = "neutral"


class PricePosition(str, Enum):
    ABOVE = "above"
    BELOW = "below"
    AT = "at"


class VWAPTrend(str, Enum):
    RISING = "rising"
    FALLING = "falling"
    FLAT = "flat"


class DataQuality(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class VWAPRecommendation(str, Enum):
    MOVING = "moving"
    DAILY = "daily"
    BOTH = "both"


class Convergence(str, Enum):
    ALIGNED = "aligned"
    CONVERGING = "converging"
    DIVERGING = "diverging"


class TradingSignal(str, Enum):
    BULLISH = "bullish"
    BEARISH = "bearish"
    NEUTRAL = "neutral"


class DeviationSignal(str, Enum):
    STRONG_ABOVE = "strong_above"
    ABOVE = "above"
    NEUTRAL = "neutral"
    BELOW = "below"
    STRONG_BELOW = "strong_below"


@dataclass(frozen=True)
class MovingAverageResult:
    """Simple moving average of the last ``period`` closes."""
    period: int
    value: float
    degraded: bool = False

    @classmethod
    def fallback(cls, period: int) -> "MovingAverageResult":
        return cls(period=period, value=0.0, degraded=True)


@dataclass(frozen=True)
class RSIResult:
    """Wilder RSI with its threshold signal."""
    period: int
    value: float
    signal: RSISignal = RSISignal.NEUTRAL
    degraded: bool = False

    @classmethod
    def fallback(cls, period: int) -> "RSIResult":
        return cls(period=period, value=0.0, signal=RSISignal.NEUTRAL, degraded=True)


@dataclass(frozen=True)
class MACDResult:
    macd: float
    signal: float
    histogram: float
    degraded: bool = False

    @classmethod
    def fallback(cls) -> "MACDResult":
        return cls(macd=0.0, signal=0.0, histogram=0.0, degraded=True)


@dataclass(frozen=True)
class BollingerResult:
    upper: float
    middle: float
    lower: float
    bandwidth: float
    percent_b: float
    degraded: bool = False

    @classmethod
    def fallback(cls) -> "BollingerResult":
        return cls(upper=0.0, middle=0.0, lower=0.0, bandwidth=0.0, percent_b=0.5, degraded=True)


@dataclass(frozen=True)
class StochasticResult:
    k: float
    d: float
    state: StochasticState = StochasticState.NEUTRAL
    degraded: bool = False

    @classmethod
    def fallback(cls) -> "StochasticResult":
        return cls(k=0.0, d=0.0, state=StochasticState.NEUTRAL, degraded=True)


@dataclass(frozen=True)
class CrossResult:
    """Golden/dead cross between a short and a long simple moving average."""
    cross_type: CrossType
    strength: SignalStrength
    confirmation_days: int
    short_period: int
    long_period: int
    short_ma: float = 0.0
    long_ma: float = 0.0
    degraded: bool = False

    @classmethod
    def fallback(cls, short_period: int, long_period: int) -> "CrossResult":
        return cls(
            cross_type=CrossType.NONE,
            strength=SignalStrength.WEAK,
            confirmation_days=0,
            short_period=short_period,
            long_period=long_period,
            degraded=True,
        )


@dataclass(frozen=True)
class VolumeResult:
    average_volume: float
    current_volume: float
    relative_volume: float
    is_spike: bool
    trend: VolumeTrend
    accumulation: AccumulationState
    price_volume_strength: SignalStrength
    degraded: bool = False

    @classmethod
    def fallback(cls) -> "VolumeResult":
        return cls(
            average_volume=0.0,
            current_volume=0.0,
            relative_volume=0.0,
            is_spike=False,
            trend=VolumeTrend.STABLE,
            accumulation=AccumulationState.NEUTRAL,
            price_volume_strength=SignalStrength.WEAK,
            degraded=True,
        )


@dataclass(frozen=True)
class VWAPResult:
    """VWAP over a window of bars with volume-weighted dispersion bands."""
    vwap: float
    upper_band: float
    lower_band: float
    deviation: float
    position: PricePosition
    strength: SignalStrength
    trend: VWAPTrend
    degraded: bool = False

    @classmethod
    def fallback(cls) -> "VWAPResult":
        return cls(
            vwap=0.0,
            upper_band=0.0,
            lower_band=0.0,
            deviation=0.0,
            position=PricePosition.AT,
            strength=SignalStrength.WEAK,
            trend=VWAPTrend.FLAT,
            degraded=True,
        )


@dataclass(frozen=True)
class TrueVWAPResult:
    """Daily VWAP computed from one session's intraday bars."""
    vwap: float
    upper_band: float
    lower_band: float
    deviation: float
    quality: DataQuality
    quality_score: float
    data_points: int
    session_date: Optional[date] = None


@dataclass(frozen=True)
class HybridVWAPResult:
    """Moving VWAP plus the optional true daily VWAP and the choice between them."""
    moving: VWAPResult
    true_daily: Optional[TrueVWAPResult]
    recommended: VWAPRecommendation
    convergence: Optional[Convergence] = None
    difference_pct: Optional[float] = None
    reliability: DataQuality = DataQuality.MEDIUM
    trading_signal: TradingSignal = TradingSignal.NEUTRAL
    degraded: bool = False

    @classmethod
    def fallback(cls) -> "HybridVWAPResult":
        return cls(
            moving=VWAPResult.fallback(),
            true_daily=None,
            recommended=VWAPRecommendation.MOVING,
            reliability=DataQuality.LOW,
            degraded=True,
        )


@dataclass(frozen=True)
class MADeviationResult:
    """Percent distance of the latest close from its moving average."""
    period: int
    moving_average: float
    deviation_pct: float
    position: PricePosition
    signal: DeviationSignal
    degraded: bool = False

    @classmethod
    def fallback(cls, period: int) -> "MADeviationResult":
        return cls(
            period=period,
            moving_average=0.0,
            deviation_pct=0.0,
            position=PricePosition.AT,
            signal=DeviationSignal.NEUTRAL,
            degraded=True,
        )


@dataclass(frozen=True)
class ExtendedIndicatorResult:
    """All indicator results of one analysis, keyed by name and period."""
    moving_averages: dict[int, MovingAverageResult]
    rsi: dict[int, RSIResult]
    macd: MACDResult
    bollinger_bands: BollingerResult
    stochastic: StochasticResult
    cross: CrossResult
    volume: VolumeResult
    vwap: HybridVWAPResult
    ma_deviations: dict[int, MADeviationResult] = field(default_factory=dict)

    @property
    def degraded_indicators(self) -> list[str]:
        """Names of indicators that fell back, in result order."""
        names = [f"moving_average_{p}" for p, r in self.moving_averages.items() if r.degraded]
        names += [f"rsi_{p}" for p, r in self.rsi.items() if r.degraded]
        for name in ("macd", "bollinger_bands", "stochastic", "cross", "volume", "vwap"):
            if getattr(self, name).degraded:
                names.append(name)
        names += [f"ma_deviation_{p}" for p, r in self.ma_deviations.items() if r.degraded]
        return names
