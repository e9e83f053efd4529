"""
Canonical data models for daily price series.

These immutable structures represent price data after normalization from a
provider's raw rows and before indicator computation.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional


@dataclass(frozen=True)
class PriceBar:
    """One OHLCV bar. Daily for the main series, sub-daily for intraday."""
    date: datetime      # UTC bar open time
    open: float
    high: float
    low: float
    close: float
    volume: float

    @property
    def typical_price(self) -> float:
        return (self.high + self.low + self.close) / 3


@dataclass(frozen=True)
class FundamentalsSnapshot:
    """Company fundamentals as returned by the data provider."""
    symbol: str
    market_cap: Optional[float] = None
    pe_ratio: Optional[float] = None
    eps: Optional[float] = None
    dividend_yield: Optional[float] = None
    fifty_two_week_high: Optional[float] = None
    fifty_two_week_low: Optional[float] = None
    extra: dict[str, Any] = field(default_factory=dict)
