"""Data models for a complete analysis"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional

from ..config.defaults import IndicatorConfig
from ..config.validation import ParameterWarning
from ..data.models import FundamentalsSnapshot
from ..errors.handler import ErrorReport
from .indicators import ExtendedIndicatorResult, SignalStrength


class TrendDirection(str, Enum):
    UPWARD = "upward"
    DOWNWARD = "downward"
    SIDEWAYS = "sideways"


class Momentum(str, Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"


@dataclass(frozen=True)
class Signals:
    """Composite signals synthesized from the indicator results"""
    trend: TrendDirection
    momentum: Momentum
    strength: SignalStrength


@dataclass(frozen=True)
class PriceSummary:
    """Latest close and its change against the previous bar"""
    date: datetime
    current_price: float
    previous_close: Optional[float]
    change: float
    change_percent: float


@dataclass(frozen=True)
class AnalysisResult:
    """Best-effort technical analysis of one symbol"""
    symbol: str
    period: str
    price: PriceSummary
    indicators: ExtendedIndicatorResult
    signals: Signals
    config: IndicatorConfig
    warnings: list[ParameterWarning] = field(default_factory=list)
    has_custom_settings: bool = False
    fundamentals: Optional[FundamentalsSnapshot] = None
    data_points: int = 0
    generated_at: Optional[datetime] = None

    @property
    def is_degraded(self) -> bool:
        return bool(self.indicators.degraded_indicators)


@dataclass(frozen=True)
class AnalysisOutcome:
    """Analysis result plus the recoverable issues hit while producing it"""
    result: AnalysisResult
    error_reports: list[ErrorReport] = field(default_factory=list)
    summary_message: str = ""
