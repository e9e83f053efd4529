"""Price data models, normalization/repair and the provider interface."""

from .models import FundamentalsSnapshot, PriceBar
from .processor import (
    closes,
    highs,
    lows,
    normalize_raw_bars,
    repair_series,
    volumes,
)
from .provider import InMemoryMarketDataProvider, MarketDataProvider

__all__ = [
    "FundamentalsSnapshot",
    "PriceBar",
    "closes",
    "highs",
    "lows",
    "normalize_raw_bars",
    "repair_series",
    "volumes",
    "InMemoryMarketDataProvider",
    "MarketDataProvider",
]
