#!/usr/bin/env python3
"""
Basic Usage Example - TA Engine

This script demonstrates the basic usage of the technical analysis engine
with simulated market data. It shows how to:
- Load a market data provider with daily and intraday bars
- Run a complete analysis with per-call parameter overrides
- Inspect indicators, composite signals and corrections
- Compute indicators for an already fetched series

Run: python examples/basic_usage.py
"""

import asyncio
import math
from datetime import UTC, datetime, timedelta

from ta_engine.data.models import FundamentalsSnapshot, PriceBar
from ta_engine.data.provider import InMemoryMarketDataProvider
from ta_engine.engine import AnalysisEngine, EngineServices, compute_indicators
from ta_engine.logging import configure_logging


def create_daily_bars(days: int = 300, start_price: float = 100.0) -> list[PriceBar]:
    """Create a drifting, oscillating daily series ending today."""
    today = datetime.now(UTC).replace(hour=0, minute=0, second=0, microsecond=0)
    bars = []
    for i in range(days):
        close = start_price * (1 + 0.001 * i) + 3 * math.sin(i / 6)
        bars.append(PriceBar(
            date=today - timedelta(days=days - 1 - i),
            open=close - 0.4,
            high=close + 1.2,
            low=close - 1.1,
            close=close,
            volume=1_000_000 + 250_000 * math.cos(i / 4),
        ))
    return bars


def create_session_bars(day: datetime, price: float) -> list[PriceBar]:
    """Create one regular session of 15 minute bars."""
    open_time = day.replace(hour=13, minute=30)
    return [
        PriceBar(
            date=open_time + timedelta(minutes=15 * i),
            open=price + 0.05 * (i % 5),
            high=price + 0.05 * (i % 5) + 0.3,
            low=price + 0.05 * (i % 5) - 0.3,
            close=price + 0.05 * ((i + 1) % 5),
            volume=40_000 + 1_000 * i,
        )
        for i in range(26)
    ]


def print_analysis(outcome) -> None:
    """Print the interesting parts of an analysis outcome."""
    result = outcome.result
    indicators = result.indicators

    print(f"📊 {result.symbol} ({result.period}, {result.data_points} bars)")
    print(f"  Price: ${result.price.current_price:.2f} ({result.price.change_percent:+.2f}%)")
    for period, ma in indicators.moving_averages.items():
        print(f"  SMA {period}: {ma.value}")
    for period, rsi in indicators.rsi.items():
        print(f"  RSI {period}: {rsi.value} ({rsi.signal.value})")
    print(f"  MACD: {indicators.macd.macd} / signal {indicators.macd.signal}")
    print(f"  Bollinger %B: {indicators.bollinger_bands.percent_b}")
    print(f"  Stochastic: %K {indicators.stochastic.k} ({indicators.stochastic.state.value})")
    print(f"  Cross: {indicators.cross.cross_type.value} ({indicators.cross.strength.value})")
    print(f"  Volume: {indicators.volume.relative_volume}x average, {indicators.volume.trend.value}")

    vwap = indicators.vwap
    print(f"  VWAP: moving {vwap.moving.vwap}, recommended {vwap.recommended.value}")
    if vwap.true_daily:
        print(f"    True daily {vwap.true_daily.vwap} ({vwap.true_daily.quality.value}), "
              f"{vwap.convergence.value}")

    signals = result.signals
    print(f"  Signals: trend={signals.trend.value} momentum={signals.momentum.value} "
          f"strength={signals.strength.value}")

    for warning in result.warnings:
        print(f"  ⚠️  {warning.parameter}: {warning.reason} -> {warning.corrected_value}")
    if outcome.summary_message:
        print(f"  ❗ {outcome.summary_message}")
    print()


async def run_demo() -> None:
    print("🚀 TA Engine - Basic Usage Demo")
    print("=" * 60)

    print("1. Creating an in-memory market data provider...")
    daily = create_daily_bars()
    last_day = daily[-1].date
    provider = InMemoryMarketDataProvider(
        daily={"ACME": daily},
        intraday={("ACME", last_day.date()): create_session_bars(last_day, daily[-1].close)},
        fundamentals={"ACME": FundamentalsSnapshot(symbol="ACME", market_cap=4.2e10, pe_ratio=21.5)},
    )
    engine = AnalysisEngine(provider, EngineServices.from_config_dir())
    print()

    print("2. Analyzing with default parameters...")
    print_analysis(await engine.analyze("ACME"))

    print("3. Analyzing with overrides (one of them invalid)...")
    overrides = {
        "movingAverages": {"periods": [10, 30, 0]},
        "rsi": {"overbought": 65, "oversold": 35},
        "bollingerBands": {"standardDeviations": 12},
    }
    print_analysis(await engine.analyze("ACME", period="6mo", partial_config=overrides))

    print("4. Cache statistics:")
    stats = engine.cache.stats()
    print(f"   Entries: {stats.total_entries}, hit rate: {stats.hit_rate}%")
    print()

    print("5. Computing indicators for a short series directly...")
    indicators = compute_indicators(daily[-40:])
    print(f"   Degraded indicators: {', '.join(indicators.degraded_indicators)}")


def main():
    configure_logging(level="WARNING")
    asyncio.run(run_demo())


if __name__ == "__main__":
    main()
