"""Pytest configuration and shared fixtures."""

from datetime import UTC, datetime, timedelta
from typing import Callable, Optional

import pytest

from ta_engine.data.models import FundamentalsSnapshot, PriceBar

START = datetime(2024, 1, 1, tzinfo=UTC)


def _make_bars(
    closes: list[float],
    volumes: Optional[list[float]] = None,
    spread: float = 1.0,
    start: datetime = START,
    step: timedelta = timedelta(days=1),
) -> list[PriceBar]:
    volumes = volumes or [1000.0] * len(closes)
    return [
        PriceBar(
            date=start + step * i,
            open=close,
            high=close + spread,
            low=max(close - spread, 0.0),
            close=close,
            volume=volume,
        )
        for i, (close, volume) in enumerate(zip(closes, volumes))
    ]


@pytest.fixture
def make_bars() -> Callable[..., list[PriceBar]]:
    """Factory building daily bars from closes (open == close, +/- spread)."""
    return _make_bars


@pytest.fixture
def trending_bars() -> list[PriceBar]:
    """260 daily bars of a steady uptrend with a gentle wobble."""
    closes = [100.0 + i * 0.5 + (1.5 if i % 3 == 0 else -0.5) for i in range(260)]
    volumes = [1000.0 + (i % 7) * 100 for i in range(260)]
    return _make_bars(closes, volumes)


@pytest.fixture
def intraday_bars() -> list[PriceBar]:
    """A complete session of 26 fifteen-minute bars."""
    closes = [150.0 + (i % 4) * 0.25 for i in range(26)]
    return _make_bars(
        closes,
        [5000.0] * 26,
        spread=0.2,
        start=datetime(2024, 9, 16, 13, 30, tzinfo=UTC),
        step=timedelta(minutes=15),
    )


@pytest.fixture
def sample_fundamentals() -> FundamentalsSnapshot:
    return FundamentalsSnapshot(
        symbol="ACME",
        market_cap=2.5e12,
        pe_ratio=28.4,
        eps=6.1,
        dividend_yield=0.005,
    )
