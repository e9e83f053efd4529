"""
Result models.

Immutable value objects for indicator results, composite signals and the
final analysis outcome.
"""

from .analysis import (
    AnalysisOutcome,
    AnalysisResult,
    Momentum,
    PriceSummary,
    Signals,
    TrendDirection,
)
from .indicators import (
    AccumulationState,
    BollingerResult,
    Convergence,
    CrossResult,
    CrossType,
    DataQuality,
    DeviationSignal,
    ExtendedIndicatorResult,
    HybridVWAPResult,
    MACDResult,
    MADeviationResult,
    MovingAverageResult,
    PricePosition,
    RSIResult,
    RSISignal,
    SignalStrength,
    StochasticResult,
    StochasticState,
    TradingSignal,
    TrueVWAPResult,
    VolumeResult,
    VolumeTrend,
    VWAPRecommendation,
    VWAPResult,
    VWAPTrend,
)

__all__ = [
    "AnalysisOutcome",
    "AnalysisResult",
    "Momentum",
    "PriceSummary",
    "Signals",
    "TrendDirection",
    "AccumulationState",
    "BollingerResult",
    "Convergence",
    "CrossResult",
    "CrossType",
    "DataQuality",
    "DeviationSignal",
    "ExtendedIndicatorResult",
    "HybridVWAPResult",
    "MACDResult",
    "MADeviationResult",
    "MovingAverageResult",
    "PricePosition",
    "RSIResult",
    "RSISignal",
    "SignalStrength",
    "StochasticResult",
    "StochasticState",
    "TradingSignal",
    "TrueVWAPResult",
    "VolumeResult",
    "VolumeTrend",
    "VWAPRecommendation",
    "VWAPResult",
    "VWAPTrend",
]
