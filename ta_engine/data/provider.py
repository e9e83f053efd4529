"""
Market data provider interface.

The engine consumes market data only through this interface. Providers are
treated as unreliable: any method may raise, be rate limited or return
partial data. Adapters should raise the types in ta_engine.errors.fetch so
failures are classified without message inspection.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping, Sequence
from datetime import date, datetime
from typing import Optional

from ..errors import DataFetchError
from ..utils.time import period_start_date, utc_now
from .models import FundamentalsSnapshot, PriceBar


class MarketDataProvider(ABC):
    """Abstract asynchronous market data source."""

    @abstractmethod
    async def fetch_daily_series(self, symbol: str, period: str) -> list[PriceBar]:
        """Fetch daily bars covering the given period."""
        pass

    async def fetch_intraday_series(self, symbol: str, day: date,
                                    interval: str = "15m") -> list[PriceBar]:
        """Fetch sub-daily bars for one session. Providers without intraday data return []."""
        return []

    @abstractmethod
    async def fetch_fundamentals(self, symbol: str) -> Optional[FundamentalsSnapshot]:
        """Fetch fundamentals, or None when the provider has none."""
        pass


class InMemoryMarketDataProvider(MarketDataProvider):
    """Provider backed by in-memory data, for examples, tests and backtests."""

    def __init__(
        self,
        daily: Optional[Mapping[str, Sequence[PriceBar]]] = None,
        intraday: Optional[Mapping[tuple[str, date], Sequence[PriceBar]]] = None,
        fundamentals: Optional[Mapping[str, FundamentalsSnapshot]] = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.daily = {k.upper(): list(v) for k, v in (daily or {}).items()}
        self.intraday = {(k.upper(), d): list(v) for (k, d), v in (intraday or {}).items()}
        self.fundamentals = {k.upper(): v for k, v in (fundamentals or {}).items()}
        self._clock = clock

    async def fetch_daily_series(self, symbol: str, period: str) -> list[PriceBar]:
        bars = self.daily.get(symbol.upper())
        if bars is None:
            raise DataFetchError(
                f"No price data for {symbol}", symbol=symbol, data_type="daily"
            )
        start = period_start_date(period, self._clock())
        return [bar for bar in bars if bar.date >= start]

    async def fetch_intraday_series(self, symbol: str, day: date,
                                    interval: str = "15m") -> list[PriceBar]:
        return list(self.intraday.get((symbol.upper(), day), []))

    async def fetch_fundamentals(self, symbol: str) -> Optional[FundamentalsSnapshot]:
        return self.fundamentals.get(symbol.upper())
