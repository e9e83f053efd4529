"""Indicator calculator coordinating every indicator of one analysis"""

import asyncio
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from functools import partial
from typing import Any, Optional

from ..cache.manager import CacheCategory, CacheManager, hash_params
from ..config.defaults import CalculationParams, IndicatorConfig
from ..data.models import PriceBar
from ..data.processor import closes as extract_closes
from ..errors.handler import ErrorContext, ErrorHandler, ErrorReport, SafeResult
from ..logging.config import get_indicator_logger, log_indicator_fallback
from ..models.indicators import (
    BollingerResult,
    CrossResult,
    ExtendedIndicatorResult,
    HybridVWAPResult,
    MACDResult,
    MADeviationResult,
    MovingAverageResult,
    RSIResult,
    StochasticResult,
    TrueVWAPResult,
    VolumeResult,
)
from .bollinger import calculate_bollinger_bands
from .cross import detect_cross
from .deviation import calculate_ma_deviation
from .macd import calculate_macd
from .moving_average import calculate_moving_average
from .rsi import calculate_rsi, rsi_signal
from .stochastic import calculate_stochastic
from .volume import analyze_volume
from .vwap import analyze_hybrid_vwap, calculate_true_daily_vwap

logger = get_indicator_logger(__name__)

DEFAULT_CROSS_PERIODS = (25, 50)
TRUE_VWAP = "true_vwap"


@dataclass(frozen=True)
class IndicatorTask:
    """One isolated indicator computation with its fallback."""
    name: str
    compute: Callable[[], Any]
    fallback: Callable[[], Any]
    parameters: dict[str, Any] = field(default_factory=dict)


def _moving_average(closes: Sequence[float], period: int) -> MovingAverageResult:
    return MovingAverageResult(period=period, value=calculate_moving_average(closes, period))


def _rsi(closes: Sequence[float], period: int, warmup: int,
         overbought: float, oversold: float) -> RSIResult:
    value = calculate_rsi(closes, period, warmup)
    return RSIResult(period=period, value=value, signal=rsi_signal(value, overbought, oversold))


def _no_true_vwap() -> Optional[TrueVWAPResult]:
    return None


def series_fingerprint(bars: Sequence[PriceBar],
                       intraday: Optional[Sequence[PriceBar]] = None) -> str:
    """Hash identifying the exact input data of an analysis."""
    def rows(series: Sequence[PriceBar]) -> list[list[Any]]:
        return [[b.date, b.open, b.high, b.low, b.close, b.volume] for b in series]

    return hash_params({"daily": rows(bars), "intraday": rows(intraday or [])})


class IndicatorCalculator:
    """
    Runs every configured indicator independently.

    A failing indicator is replaced by its fallback result and reported to
    the error handler; sibling indicators are unaffected. Successful results
    are cached when a cache, a symbol and a series fingerprint are given.
    """

    def __init__(self, error_handler: ErrorHandler,
                 calculation: Optional[CalculationParams] = None,
                 cache: Optional[CacheManager] = None):
        self.error_handler = error_handler
        self.calculation = calculation or CalculationParams()
        self.cache = cache

    def plan_core(self, bars: Sequence[PriceBar], config: IndicatorConfig,
                  intraday: Optional[Sequence[PriceBar]] = None) -> list[IndicatorTask]:
        """Moving averages, RSI and MACD, plus the true daily VWAP the hybrid VWAP needs."""
        closes = extract_closes(bars)
        tasks = []

        for period in config.moving_averages.periods:
            tasks.append(IndicatorTask(
                name=f"moving_average_{period}",
                compute=partial(_moving_average, closes, period),
                fallback=partial(MovingAverageResult.fallback, period),
                parameters={"period": period},
            ))

        rsi = config.rsi
        for period in rsi.periods:
            tasks.append(IndicatorTask(
                name=f"rsi_{period}",
                compute=partial(_rsi, closes, period, self.calculation.rsi_warmup,
                                rsi.overbought, rsi.oversold),
                fallback=partial(RSIResult.fallback, period),
                parameters={"period": period, "warmup": self.calculation.rsi_warmup},
            ))

        macd = config.macd
        tasks.append(IndicatorTask(
            name="macd",
            compute=partial(calculate_macd, closes, macd.fast_period,
                            macd.slow_period, macd.signal_period),
            fallback=MACDResult.fallback,
            parameters={"fast": macd.fast_period, "slow": macd.slow_period,
                        "signal": macd.signal_period},
        ))

        if config.vwap.enable_true_vwap and intraday:
            tasks.append(IndicatorTask(
                name=TRUE_VWAP,
                compute=partial(calculate_true_daily_vwap, intraday,
                                config.vwap.standard_deviations,
                                self.calculation.intraday_expected_points),
                fallback=_no_true_vwap,
                parameters={"sigma": config.vwap.standard_deviations},
            ))

        return tasks

    def plan_extended(self, bars: Sequence[PriceBar], config: IndicatorConfig,
                      true_daily: Optional[TrueVWAPResult] = None) -> list[IndicatorTask]:
        """Bollinger, Stochastic, cross, volume, hybrid VWAP and MA deviations."""
        closes = extract_closes(bars)
        bollinger = config.bollinger_bands
        stochastic = config.stochastic
        volume = config.volume_analysis
        mvwap = config.mvwap

        periods = config.moving_averages.periods
        short, long = periods[:2] if len(periods) >= 2 else DEFAULT_CROSS_PERIODS

        tasks = [
            IndicatorTask(
                name="bollinger_bands",
                compute=partial(calculate_bollinger_bands, closes, bollinger.period,
                                bollinger.standard_deviations),
                fallback=BollingerResult.fallback,
                parameters={"period": bollinger.period, "k": bollinger.standard_deviations},
            ),
            IndicatorTask(
                name="stochastic",
                compute=partial(calculate_stochastic, bars, stochastic.k_period,
                                stochastic.d_period, stochastic.overbought, stochastic.oversold),
                fallback=StochasticResult.fallback,
                parameters={"k": stochastic.k_period, "d": stochastic.d_period,
                            "overbought": stochastic.overbought, "oversold": stochastic.oversold},
            ),
            IndicatorTask(
                name="cross",
                compute=partial(detect_cross, closes, short, long,
                                self.calculation.cross_confirmation),
                fallback=partial(CrossResult.fallback, short, long),
                parameters={"short": short, "long": long,
                            "confirmation": self.calculation.cross_confirmation},
            ),
            IndicatorTask(
                name="volume",
                compute=partial(analyze_volume, bars, volume.period, volume.spike_threshold),
                fallback=VolumeResult.fallback,
                parameters={"period": volume.period, "spike": volume.spike_threshold},
            ),
            IndicatorTask(
                name="vwap",
                compute=partial(analyze_hybrid_vwap, bars, true_daily, mvwap.period,
                                mvwap.standard_deviations),
                fallback=HybridVWAPResult.fallback,
                parameters={"period": mvwap.period, "sigma": mvwap.standard_deviations,
                            "true_daily": true_daily is not None},
            ),
        ]

        for period in periods:
            tasks.append(IndicatorTask(
                name=f"ma_deviation_{period}",
                compute=partial(calculate_ma_deviation, closes, period),
                fallback=partial(MADeviationResult.fallback, period),
                parameters={"period": period},
            ))

        return tasks

    def run_task(self, task: IndicatorTask, symbol: Optional[str] = None,
                 fingerprint: Optional[str] = None) -> SafeResult:
        """Run one task in isolation, consulting the indicator cache first."""
        cache_key = None
        if self.cache is not None and symbol and fingerprint:
            cache_key = f"{task.name}:{hash_params([task.parameters, fingerprint])}"
            cached = self.cache.get(CacheCategory.INDICATOR, symbol, cache_key)
            if cached is not None:
                return SafeResult(cached)

        result = self.error_handler.safe_execute(
            task.compute,
            task.fallback,
            ErrorContext(symbol=symbol, indicator=task.name, parameters=task.parameters),
            fallback_description=f"{task.name} replaced by its default result",
        )

        if result.degraded:
            log_indicator_fallback(
                logger, task.name, symbol, result.error.technical_details,
                context=task.parameters,
            )
        elif cache_key is not None and result.value is not None:
            self.cache.set(CacheCategory.INDICATOR, symbol, result.value, cache_key)

        return result

    def compute(self, bars: Sequence[PriceBar], config: IndicatorConfig,
                intraday: Optional[Sequence[PriceBar]] = None, symbol: Optional[str] = None,
                fingerprint: Optional[str] = None) -> tuple[ExtendedIndicatorResult, list[ErrorReport]]:
        """Compute every indicator sequentially."""
        results: dict[str, SafeResult] = {}
        for task in self.plan_core(bars, config, intraday):
            results[task.name] = self.run_task(task, symbol, fingerprint)

        true_daily = results[TRUE_VWAP].value if TRUE_VWAP in results else None
        for task in self.plan_extended(bars, config, true_daily):
            results[task.name] = self.run_task(task, symbol, fingerprint)

        return self.assemble(config, results), self._reports(results)

    async def compute_async(self, bars: Sequence[PriceBar], config: IndicatorConfig,
                            intraday: Optional[Sequence[PriceBar]] = None,
                            symbol: Optional[str] = None,
                            fingerprint: Optional[str] = None
                            ) -> tuple[ExtendedIndicatorResult, list[ErrorReport]]:
        """
        Compute core indicators, then launch the extended indicators together
        on worker threads and join them. Results are assembled by name, so
        completion order never matters.
        """
        results: dict[str, SafeResult] = {}
        for task in self.plan_core(bars, config, intraday):
            results[task.name] = self.run_task(task, symbol, fingerprint)

        true_daily = results[TRUE_VWAP].value if TRUE_VWAP in results else None
        extended = self.plan_extended(bars, config, true_daily)
        outcomes = await asyncio.gather(*(
            asyncio.to_thread(self.run_task, task, symbol, fingerprint) for task in extended
        ))
        results.update(zip((task.name for task in extended), outcomes))

        return self.assemble(config, results), self._reports(results)

    @staticmethod
    def _reports(results: dict[str, SafeResult]) -> list[ErrorReport]:
        return [result.error for result in results.values() if result.error is not None]

    @staticmethod
    def assemble(config: IndicatorConfig, results: dict[str, SafeResult]) -> ExtendedIndicatorResult:
        periods = config.moving_averages.periods
        return ExtendedIndicatorResult(
            moving_averages={p: results[f"moving_average_{p}"].value for p in periods},
            rsi={p: results[f"rsi_{p}"].value for p in config.rsi.periods},
            macd=results["macd"].value,
            bollinger_bands=results["bollinger_bands"].value,
            stochastic=results["stochastic"].value,
            cross=results["cross"].value,
            volume=results["volume"].value,
            vwap=results["vwap"].value,
            ma_deviations={p: results[f"ma_deviation_{p}"].value for p in periods},
        )
