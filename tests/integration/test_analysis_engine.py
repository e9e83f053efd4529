"""Integration tests for the complete analysis pipeline."""

import asyncio
from datetime import UTC, date, datetime
from pathlib import Path
from typing import Optional

import pytest

from ta_engine.config import ConfigLoader
from ta_engine.data.models import FundamentalsSnapshot, PriceBar
from ta_engine.data.provider import InMemoryMarketDataProvider
from ta_engine.engine import AnalysisEngine, EngineServices
from ta_engine.errors import DataFetchError, ErrorKind, ProviderConnectionError, ValidationError
from ta_engine.models.analysis import TrendDirection
from ta_engine.models.indicators import VWAPRecommendation

NOW = datetime(2024, 9, 17, tzinfo=UTC)
SESSION = date(2024, 9, 16)


async def _no_sleep(delay: float) -> None:
    return None


class CountingProvider(InMemoryMarketDataProvider):
    """In-memory provider that counts calls and can be told to fail."""

    def __init__(self, *args, daily_error: Optional[Exception] = None,
                 fundamentals_error: Optional[Exception] = None,
                 intraday_error: Optional[Exception] = None, **kwargs):
        super().__init__(*args, clock=lambda: NOW, **kwargs)
        self.daily_error = daily_error
        self.fundamentals_error = fundamentals_error
        self.intraday_error = intraday_error
        self.calls = {"daily": 0, "fundamentals": 0, "intraday": 0}

    async def fetch_daily_series(self, symbol: str, period: str) -> list[PriceBar]:
        self.calls["daily"] += 1
        if self.daily_error:
            raise self.daily_error
        return await super().fetch_daily_series(symbol, period)

    async def fetch_fundamentals(self, symbol: str) -> Optional[FundamentalsSnapshot]:
        self.calls["fundamentals"] += 1
        if self.fundamentals_error:
            raise self.fundamentals_error
        return await super().fetch_fundamentals(symbol)

    async def fetch_intraday_series(self, symbol: str, day: date,
                                    interval: str = "15m") -> list[PriceBar]:
        self.calls["intraday"] += 1
        if self.intraday_error:
            raise self.intraday_error
        return await super().fetch_intraday_series(symbol, day, interval)


@pytest.fixture
def make_provider(trending_bars, intraday_bars, sample_fundamentals):
    def factory(bars=None, **kwargs) -> CountingProvider:
        return CountingProvider(
            daily={"ACME": trending_bars if bars is None else bars},
            intraday={("ACME", SESSION): intraday_bars},
            fundamentals={"ACME": sample_fundamentals},
            **kwargs,
        )
    return factory


def _engine(provider, config_loader: Optional[ConfigLoader] = None) -> AnalysisEngine:
    services = EngineServices.create(config_loader=config_loader, sleep=_no_sleep)
    return AnalysisEngine(provider, services)


@pytest.mark.integration
class TestAnalyze:
    """Integration tests for AnalysisEngine.analyze."""

    def test_full_analysis(self, make_provider, sample_fundamentals) -> None:
        """Test a complete analysis with every input available."""
        engine = _engine(make_provider())

        outcome = asyncio.run(engine.analyze("acme"))
        result = outcome.result

        assert result.symbol == "ACME"
        assert result.period == "1y"
        assert result.data_points == 260
        assert result.fundamentals == sample_fundamentals
        assert result.is_degraded is False
        assert result.signals.trend == TrendDirection.UPWARD
        assert result.indicators.vwap.recommended == VWAPRecommendation.BOTH
        assert result.indicators.vwap.true_daily.session_date == SESSION
        assert outcome.error_reports == []
        assert outcome.summary_message == ""

    def test_price_summary(self, make_provider) -> None:
        """Test the latest close and its change against the previous bar."""
        outcome = asyncio.run(_engine(make_provider()).analyze("ACME"))
        price = outcome.result.price
        assert price.current_price == 229.0
        assert price.previous_close == 230.5
        assert price.change == -1.5
        assert price.change_percent == -0.65
        assert price.date == datetime(2024, 9, 16, tzinfo=UTC)

    def test_second_analysis_uses_cache(self, make_provider) -> None:
        """Test that repeated analyses do not refetch or recompute."""
        provider = make_provider()
        engine = _engine(provider)

        first = asyncio.run(engine.analyze("ACME"))
        second = asyncio.run(engine.analyze("ACME"))

        assert provider.calls == {"daily": 1, "fundamentals": 1, "intraday": 1}
        assert second.result.indicators == first.result.indicators
        assert engine.cache.stats().hits > 0

    def test_without_fundamentals(self, make_provider) -> None:
        """Test that fundamentals can be skipped."""
        provider = make_provider()
        outcome = asyncio.run(_engine(provider).analyze("ACME", include_fundamentals=False))
        assert outcome.result.fundamentals is None
        assert provider.calls["fundamentals"] == 0

    def test_short_period(self, make_provider) -> None:
        """Test that a one month period degrades the long lookback indicators."""
        outcome = asyncio.run(_engine(make_provider()).analyze("ACME", period="1mo"))
        result = outcome.result
        assert result.data_points == 30
        assert "moving_average_200" in result.indicators.degraded_indicators
        assert "macd" in result.indicators.degraded_indicators
        assert result.is_degraded is True
        assert outcome.summary_message.startswith("An indicator could not be calculated")

    def test_unknown_period_defaults_to_one_year(self, make_provider) -> None:
        """Test that unrecognized periods are analyzed as one year."""
        outcome = asyncio.run(_engine(make_provider()).analyze("ACME", period="fortnight"))
        assert outcome.result.period == "1y"


@pytest.mark.integration
class TestFailureHandling:
    """Integration tests for partial failures."""

    def test_fundamentals_failure_is_reported(self, make_provider) -> None:
        """Test that missing fundamentals never fail the analysis."""
        provider = make_provider(fundamentals_error=DataFetchError("fundamentals not found"))
        outcome = asyncio.run(_engine(provider).analyze("ACME"))

        assert outcome.result.fundamentals is None
        assert outcome.result.is_degraded is False
        assert provider.calls["fundamentals"] == 3
        assert [r.kind for r in outcome.error_reports] == [ErrorKind.DATA_FETCH]
        assert outcome.summary_message == (
            "Market data could not be retrieved for this symbol (affected: ACME)."
        )

    def test_intraday_failure_falls_back_to_moving_vwap(self, make_provider) -> None:
        """Test that a failing intraday fetch leaves the moving VWAP in charge."""
        provider = make_provider(intraday_error=ProviderConnectionError("connection reset"))
        outcome = asyncio.run(_engine(provider).analyze("ACME"))

        vwap = outcome.result.indicators.vwap
        assert vwap.degraded is False
        assert vwap.true_daily is None
        assert vwap.recommended == VWAPRecommendation.MOVING
        assert [r.context.indicator for r in outcome.error_reports] == ["true_vwap"]

    def test_price_failure_raises_original_error(self, make_provider) -> None:
        """Test that an analysis without price data surfaces the fetch error."""
        provider = make_provider(daily_error=ProviderConnectionError("connection refused"))
        with pytest.raises(ProviderConnectionError):
            asyncio.run(_engine(provider).analyze("ACME"))
        assert provider.calls["daily"] == 3

    def test_empty_price_series(self, make_provider) -> None:
        """Test that an empty series is a data fetch error."""
        with pytest.raises(DataFetchError):
            asyncio.run(_engine(make_provider(bars=[])).analyze("ACME"))

    def test_unknown_symbol(self, make_provider) -> None:
        with pytest.raises(DataFetchError):
            asyncio.run(_engine(make_provider()).analyze("NOPE"))

    def test_requires_provider(self) -> None:
        """Test that analyze needs a market data provider."""
        with pytest.raises(ValidationError):
            asyncio.run(AnalysisEngine().analyze("ACME"))

    def test_requires_symbol(self, make_provider) -> None:
        with pytest.raises(ValidationError):
            asyncio.run(_engine(make_provider()).analyze("  "))


@pytest.mark.integration
class TestConfiguration:
    """Integration tests for configuration precedence during analysis."""

    def test_invalid_override_is_corrected(self, make_provider) -> None:
        """Test that invalid parameters are replaced and reported as warnings."""
        outcome = asyncio.run(_engine(make_provider()).analyze(
            "ACME", partial_config={"rsi": {"overbought": 150}, "macd": {"fastPeriod": 8}},
        ))
        result = outcome.result
        assert result.has_custom_settings is True
        assert result.config.rsi.overbought == 70.0
        assert result.config.macd.fast_period == 8
        assert [w.parameter for w in result.warnings] == ["rsi.overbought"]

    def test_symbol_preset(self, make_provider, tmp_path: Path) -> None:
        """Test that symbol presets apply beneath call overrides."""
        (tmp_path / "symbols.yaml").write_text(
            "symbols:\n  ACME:\n    rsi:\n      periods: [7]\n    vwap:\n      enableTrueVWAP: false\n"
        )
        provider = make_provider()
        engine = _engine(provider, ConfigLoader.create(tmp_path))

        outcome = asyncio.run(engine.analyze("ACME", partial_config={"rsi": {"periods": [9, 7]}}))

        assert outcome.result.config.rsi.periods == (7, 9)
        assert set(outcome.result.indicators.rsi) == {7, 9}
        assert outcome.result.config.vwap.enable_true_vwap is False
        assert provider.calls["intraday"] == 0

    def test_compute_indicators_on_engine(self, trending_bars) -> None:
        """Test synchronous computation for an already fetched series."""
        engine = AnalysisEngine()
        indicators, reports = engine.compute_indicators(trending_bars[:60])
        assert indicators.degraded_indicators == ["moving_average_200", "ma_deviation_200"]
        assert len(reports) == 2
        assert len(engine.error_handler.reports) == 2
