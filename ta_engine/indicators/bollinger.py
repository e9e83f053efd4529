"""Bollinger Bands."""

from collections.abc import Sequence

from ..errors import ValidationError
from ..models.indicators import BollingerResult
from .primitives import mean, round_to, std_dev
from .validators import validate_data_length, validate_period, validate_prices


def calculate_bollinger_bands(closes: Sequence[float], period: int = 20,
                              standard_deviations: float = 2.0) -> BollingerResult:
    """
    Bands of ``standard_deviations`` population standard deviations around
    the SMA of the last ``period`` closes.

    %B is (close - lower) / (upper - lower), defined as 0.5 when the bands
    collapse (a constant window). Bandwidth is (upper - lower) / middle and
    0 when the middle band is not positive.
    """
    validate_prices(closes, "closes")
    validate_period(period, minimum=2)
    if standard_deviations < 0:
        raise ValidationError(
            f"standard_deviations must be non-negative, got {standard_deviations}",
            field="standard_deviations",
        )
    validate_data_length(closes, period, "bollinger_bands")

    window = closes[-period:]
    middle = mean(window)
    # A constant window has exactly zero dispersion, whatever float noise the mean carries
    flat = max(window) == min(window)
    spread = 0.0 if flat else standard_deviations * std_dev(window)
    upper = middle + spread
    lower = middle - spread

    price = closes[-1]
    upper_band, lower_band = round_to(upper, 3), round_to(lower, 3)
    if upper_band > lower_band:
        percent_b = (price - lower) / (upper - lower)
    else:
        percent_b = 0.5
    bandwidth = (upper - lower) / middle if middle > 0 else 0.0

    return BollingerResult(
        upper=upper_band,
        middle=round_to(middle, 3),
        lower=lower_band,
        bandwidth=round_to(bandwidth, 4),
        percent_b=round_to(percent_b, 4),
    )
