"""
Main analysis engine coordinator.

Orchestrates one analysis: fetch inputs, validate configuration, compute
indicators with per-indicator isolation and synthesize composite signals.

    Provider → Repair → Validate → Core indicators → Extended indicators → Signals
"""

import asyncio
import time
from collections.abc import Awaitable, Callable, Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import structlog

from .cache.manager import CacheCategory, CacheManager
from .config.defaults import EngineSettings, IndicatorConfig, get_default_config, get_default_settings
from .config.loader import ConfigLoader
from .config.validation import ValidationResult, validate_config
from .data.models import FundamentalsSnapshot, PriceBar
from .data.processor import repair_series
from .data.provider import MarketDataProvider
from .errors import DataFetchError, ValidationError
from .errors.handler import ErrorContext, ErrorHandler, ErrorReport, SafeResult
from .indicators.calculator import IndicatorCalculator, series_fingerprint
from .indicators.primitives import pct_change, round_to
from .logging.config import log_parameter_correction
from .models.analysis import AnalysisOutcome, AnalysisResult, PriceSummary
from .models.indicators import ExtendedIndicatorResult
from .signals.composite import synthesize_signals
from .utils.time import normalize_period, utc_now

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class EngineServices:
    """
    Long-lived collaborators shared by every analysis of one engine.

    Created once and passed to the engine; the cache and the error history
    are internally locked and safe to share between threads.
    """
    settings: EngineSettings
    cache: CacheManager
    error_handler: ErrorHandler
    config_loader: Optional[ConfigLoader] = None

    @classmethod
    def create(
        cls,
        settings: Optional[EngineSettings] = None,
        config_loader: Optional[ConfigLoader] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        clock: Callable[[], float] = time.time,
    ) -> "EngineServices":
        settings = settings or get_default_settings()
        return cls(
            settings=settings,
            cache=CacheManager(settings.cache, clock=clock),
            error_handler=ErrorHandler(
                max_reports=settings.errors.max_reports,
                max_retries=settings.retry.max_retries,
                retry_delay=settings.retry.retry_delay,
                sleep=sleep,
            ),
            config_loader=config_loader,
        )

    @classmethod
    def from_config_dir(cls, config_dir: Optional[Path] = None, **kwargs: Any) -> "EngineServices":
        """Create services from engine.yaml / symbols.yaml in ``config_dir``."""
        loader = ConfigLoader.create(config_dir)
        return cls.create(settings=loader.load_engine_settings(), config_loader=loader, **kwargs)


class AnalysisEngine:
    """
    Main coordinator for technical analysis of one symbol at a time.

    Never raises once price data is available: every indicator failure is
    replaced by a fallback result and reported in the outcome.
    """

    def __init__(self, provider: Optional[MarketDataProvider] = None,
                 services: Optional[EngineServices] = None) -> None:
        self.logger = logger
        self.provider = provider
        self.services = services or EngineServices.create()

        self.calculator = IndicatorCalculator(
            self.services.error_handler,
            self.services.settings.calculation,
            self.services.cache,
        )

    @property
    def cache(self) -> CacheManager:
        return self.services.cache

    @property
    def error_handler(self) -> ErrorHandler:
        return self.services.error_handler

    def validate(self, symbol: Optional[str], partial_config: Optional[Mapping] = None) -> ValidationResult:
        """Merge the symbol preset under the call overrides and validate."""
        loader = self.services.config_loader
        merged: Any = partial_config
        if loader is not None and symbol and (partial_config is None or isinstance(partial_config, Mapping)):
            merged = loader.merge_config(symbol, partial_config) or partial_config

        validation = validate_config(merged)
        for warning in validation.warnings:
            log_parameter_correction(
                self.logger, warning.parameter, warning.original_value,
                warning.corrected_value, warning.reason,
            )
        return validation

    def compute_indicators(
        self,
        series: Sequence[PriceBar],
        config: Optional[IndicatorConfig] = None,
        intraday: Optional[Sequence[PriceBar]] = None,
        symbol: Optional[str] = None,
    ) -> tuple[ExtendedIndicatorResult, list[ErrorReport]]:
        """
        Compute every indicator synchronously for an already fetched series.

        Raises:
            ValidationError: if the series is empty
        """
        bars = repair_series(series)
        if not bars:
            raise ValidationError("Price series must not be empty", field="series")
        intraday_bars = repair_series(intraday) if intraday else None
        return self.calculator.compute(bars, config or get_default_config(), intraday_bars, symbol)

    async def analyze(
        self,
        symbol: str,
        period: str = "1y",
        include_fundamentals: bool = True,
        partial_config: Optional[Mapping] = None,
    ) -> AnalysisOutcome:
        """
        Run a complete, cached, failure-tolerant analysis.

        Raises:
            ValidationError: if no provider is configured or the symbol is empty
            AnalysisError: the original fetch error when no price data could be
                obtained at all; DataFetchError when the provider returned none
        """
        if self.provider is None:
            raise ValidationError("AnalysisEngine.analyze requires a market data provider")
        symbol = (symbol or "").strip().upper()
        if not symbol:
            raise ValidationError("Symbol must not be empty", field="symbol")
        period = normalize_period(period)

        self.logger.info("Analysis started", symbol=symbol, period=period)

        # FetchInputs
        fetches = [self._fetch_price_series(symbol, period)]
        if include_fundamentals:
            fetches.append(self._fetch_fundamentals(symbol))
        fetched = await asyncio.gather(*fetches)
        price_result: SafeResult = fetched[0]
        fundamentals_result: Optional[SafeResult] = fetched[1] if include_fundamentals else None

        if price_result.degraded:
            self.logger.error("No price data available", symbol=symbol,
                              error=price_result.error.technical_details)
            raise price_result.error.error
        bars = repair_series(price_result.value)
        if not bars:
            raise DataFetchError(f"No price data returned for {symbol}",
                                 symbol=symbol, data_type="daily")

        reports = [r.error for r in (price_result, fundamentals_result) if r is not None and r.error]

        # Validate
        validation = self.validate(symbol, partial_config)
        config = validation.config

        intraday: Optional[list[PriceBar]] = None
        if config.vwap.enable_true_vwap:
            intraday_result = await self._fetch_intraday(symbol, bars[-1])
            if intraday_result.error:
                reports.append(intraday_result.error)
            intraday = repair_series(intraday_result.value) or None

        # ComputeCore / ComputeExtended
        indicators, indicator_reports = await self.calculator.compute_async(
            bars, config, intraday, symbol, series_fingerprint(bars, intraday),
        )
        reports.extend(indicator_reports)

        # Synthesize
        signals = synthesize_signals(bars[-1].close, indicators, config.rsi)
        result = AnalysisResult(
            symbol=symbol,
            period=period,
            price=self._price_summary(bars),
            indicators=indicators,
            signals=signals,
            config=config,
            warnings=validation.warnings,
            has_custom_settings=validation.has_custom_settings,
            fundamentals=fundamentals_result.value if fundamentals_result else None,
            data_points=len(bars),
            generated_at=utc_now(),
        )

        self.logger.info(
            "Analysis completed",
            symbol=symbol,
            trend=signals.trend.value,
            momentum=signals.momentum.value,
            strength=signals.strength.value,
            degraded=indicators.degraded_indicators,
            error_count=len(reports),
        )
        return AnalysisOutcome(
            result=result,
            error_reports=reports,
            summary_message=self.error_handler.consolidated_message(reports),
        )

    async def _cached_fetch(
        self,
        category: CacheCategory,
        symbol: str,
        key: Optional[str],
        fetch: Callable[[], Awaitable[Any]],
        fallback: Callable[[], Any],
        context: ErrorContext,
        description: str,
    ) -> SafeResult:
        cached = self.cache.get(category, symbol, key)
        if cached is not None:
            self.logger.debug("Cache hit", category=category.value, symbol=symbol, key=key)
            return SafeResult(cached)

        result = await self.error_handler.safe_execute_async(fetch, fallback, context, description)
        if not result.degraded and result.value:
            self.cache.set(category, symbol, result.value, key)
        return result

    async def _fetch_price_series(self, symbol: str, period: str) -> SafeResult:
        return await self._cached_fetch(
            CacheCategory.PRICE, symbol, period,
            lambda: self.provider.fetch_daily_series(symbol, period),
            list,
            ErrorContext(symbol=symbol, parameters={"period": period}),
            "price series unavailable",
        )

    async def _fetch_fundamentals(self, symbol: str) -> SafeResult:
        return await self._cached_fetch(
            CacheCategory.FUNDAMENTALS, symbol, None,
            lambda: self.provider.fetch_fundamentals(symbol),
            _no_fundamentals,
            ErrorContext(symbol=symbol),
            "analysis continues without fundamentals",
        )

    async def _fetch_intraday(self, symbol: str, last_bar: PriceBar) -> SafeResult:
        day = last_bar.date.date()
        interval = self.services.settings.calculation.intraday_interval
        return await self._cached_fetch(
            CacheCategory.INTRADAY, symbol, f"{day.isoformat()}:{interval}",
            lambda: self.provider.fetch_intraday_series(symbol, day, interval),
            list,
            ErrorContext(symbol=symbol, indicator="true_vwap",
                         parameters={"day": day.isoformat(), "interval": interval}),
            "moving VWAP used instead of true daily VWAP",
        )

    @staticmethod
    def _price_summary(bars: Sequence[PriceBar]) -> PriceSummary:
        last = bars[-1]
        previous = bars[-2].close if len(bars) > 1 else None
        change = last.close - previous if previous is not None else 0.0
        return PriceSummary(
            date=last.date,
            current_price=last.close,
            previous_close=previous,
            change=round_to(change, 2),
            change_percent=round_to(pct_change(previous, last.close), 2) if previous else 0.0,
        )


def _no_fundamentals() -> Optional[FundamentalsSnapshot]:
    return None


def compute_indicators(series: Sequence[PriceBar],
                       config: Optional[IndicatorConfig] = None,
                       intraday: Optional[Sequence[PriceBar]] = None) -> ExtendedIndicatorResult:
    """
    Compute every indicator for a series with a private error handler and no cache.

    Failed indicators carry ``degraded=True``.
    """
    calculator = IndicatorCalculator(ErrorHandler())
    bars = repair_series(series)
    if not bars:
        raise ValidationError("Price series must not be empty", field="series")
    intraday_bars = repair_series(intraday) if intraday else None
    indicators, _reports = calculator.compute(bars, config or get_default_config(), intraday_bars)
    return indicators
