"""
Technical indicator calculators.

Calculators are plain functions over closes or PriceBar sequences. They raise
CalculationError (or InsufficientDataError) on unusable input instead of
returning placeholder values; the engine wraps each call and substitutes the
result type's fallback.
"""

from .bollinger import calculate_bollinger_bands
from .calculator import IndicatorCalculator, IndicatorTask, series_fingerprint
from .cross import detect_cross
from .deviation import calculate_ma_deviation
from .macd import calculate_macd, macd_line
from .moving_average import calculate_ema, calculate_moving_average, moving_average_series
from .rsi import calculate_rsi, rsi_signal
from .stochastic import calculate_stochastic
from .volume import analyze_volume
from .vwap import (
    analyze_hybrid_vwap,
    assess_intraday_quality,
    calculate_moving_vwap,
    calculate_true_daily_vwap,
    calculate_vwap,
    select_recommended_vwap,
)

__all__ = [
    "IndicatorCalculator",
    "IndicatorTask",
    "series_fingerprint",
    "calculate_bollinger_bands",
    "detect_cross",
    "calculate_ma_deviation",
    "calculate_macd",
    "macd_line",
    "calculate_ema",
    "calculate_moving_average",
    "moving_average_series",
    "calculate_rsi",
    "rsi_signal",
    "calculate_stochastic",
    "analyze_volume",
    "analyze_hybrid_vwap",
    "assess_intraday_quality",
    "calculate_moving_vwap",
    "calculate_true_daily_vwap",
    "calculate_vwap",
    "select_recommended_vwap",
]
