"""Moving-average deviation: how far the latest close sits from its SMA, in percent."""

from collections.abc import Sequence

from ..models.indicators import DeviationSignal, MADeviationResult, PricePosition
from .moving_average import calculate_moving_average
from .primitives import round_to


def deviation_signal(deviation_pct: float) -> DeviationSignal:
    if deviation_pct >= 10:
        return DeviationSignal.STRONG_ABOVE
    if deviation_pct >= 5:
        return DeviationSignal.ABOVE
    if deviation_pct <= -10:
        return DeviationSignal.STRONG_BELOW
    if deviation_pct <= -5:
        return DeviationSignal.BELOW
    return DeviationSignal.NEUTRAL


def calculate_ma_deviation(closes: Sequence[float], period: int) -> MADeviationResult:
    """
    Raises:
        InsufficientDataError: if fewer than ``period`` closes
    """
    moving_average = calculate_moving_average(closes, period)
    price = closes[-1]
    deviation = (price - moving_average) / moving_average * 100 if moving_average > 0 else 0.0

    if deviation > 0:
        position = PricePosition.ABOVE
    elif deviation < 0:
        position = PricePosition.BELOW
    else:
        position = PricePosition.AT

    return MADeviationResult(
        period=period,
        moving_average=moving_average,
        deviation_pct=round_to(deviation, 2),
        position=position,
        signal=deviation_signal(deviation),
    )
