"""Numeric primitives shared by the indicator calculators."""

import math
from collections.abc import Sequence


def round_to(value: float, decimals: int = 2) -> float:
    """Round half up (toward +infinity on ties), independent of float repr."""
    factor = 10 ** decimals
    return math.floor(value * factor + 0.5) / factor


def mean(values: Sequence[float]) -> float:
    """Arithmetic mean; 0 for an empty sequence."""
    if not values:
        return 0.0
    return sum(values) / len(values)


def std_dev(values: Sequence[float]) -> float:
    """Population standard deviation."""
    if not values:
        return 0.0
    avg = mean(values)
    return math.sqrt(sum((v - avg) ** 2 for v in values) / len(values))


def sma_series(values: Sequence[float], period: int) -> list[float]:
    """
    Simple moving average series.

    Element i of the result is the mean of values[i:i + period], so the
    result refers to input indices period - 1 .. len(values) - 1.
    """
    if period <= 0 or len(values) < period:
        return []
    window_sum = sum(values[:period])
    result = [window_sum / period]
    for i in range(period, len(values)):
        window_sum += values[i] - values[i - period]
        result.append(window_sum / period)
    return result


def ema_series(values: Sequence[float], period: int) -> list[float]:
    """
    Exponential moving average seeded with the SMA of the first period values.

    Like sma_series, element 0 corresponds to input index period - 1.
    """
    if period <= 0 or len(values) < period:
        return []
    alpha = 2 / (period + 1)
    ema = sum(values[:period]) / period
    result = [ema]
    for value in values[period:]:
        ema = value * alpha + ema * (1 - alpha)
        result.append(ema)
    return result


def last_n(values: Sequence[float], n: int) -> list[float]:
    if n <= 0:
        return []
    return list(values[-n:])


def highest(values: Sequence[float]) -> float:
    return max(values)


def lowest(values: Sequence[float]) -> float:
    return min(values)


def pct_change(previous: float, current: float) -> float:
    """Percent change from previous to current; 0 when previous is 0."""
    if previous == 0:
        return 0.0
    return (current - previous) / previous * 100


def correlation(xs: Sequence[float], ys: Sequence[float]) -> float:
    """Pearson correlation; 0 when either side has no variance."""
    n = min(len(xs), len(ys))
    if n < 2:
        return 0.0
    xs, ys = xs[:n], ys[:n]
    mx, my = mean(xs), mean(ys)
    cov = sum((x - mx) * (y - my) for x, y in zip(xs, ys))
    vx = sum((x - mx) ** 2 for x in xs)
    vy = sum((y - my) ** 2 for y in ys)
    if vx == 0 or vy == 0:
        return 0.0
    return cov / math.sqrt(vx * vy)
