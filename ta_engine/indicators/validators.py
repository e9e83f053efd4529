"""Argument checks used by the indicator calculators."""

import math
from collections.abc import Sequence

from ..errors import InsufficientDataError, ValidationError


def validate_prices(values: Sequence[float], name: str = "prices") -> None:
    """Reject empty input and non-finite or negative values."""
    if not values:
        raise ValidationError(f"{name} must not be empty", field=name)
    for index, value in enumerate(values):
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValidationError(
                f"{name}[{index}] is not a number: {value!r}", field=name
            )
        if not math.isfinite(value) or value < 0:
            raise ValidationError(
                f"{name}[{index}] must be a finite non-negative number, got {value}",
                field=name,
            )


def validate_period(period: int, name: str = "period", minimum: int = 1,
                    maximum: int = 1000) -> None:
    if isinstance(period, bool) or not isinstance(period, int):
        raise ValidationError(f"{name} must be an integer, got {period!r}", field=name)
    if period < minimum or period > maximum:
        raise ValidationError(
            f"{name} must be between {minimum} and {maximum}, got {period}", field=name
        )


def validate_data_length(values: Sequence, required: int, indicator: str) -> None:
    if len(values) < required:
        raise InsufficientDataError(
            f"{indicator} requires at least {required} data points, got {len(values)}",
            indicator=indicator,
            required_count=required,
            available_count=len(values),
        )


def validate_period_relationship(short_period: int, long_period: int,
                                 short_name: str = "short period",
                                 long_name: str = "long period") -> None:
    if short_period >= long_period:
        raise ValidationError(
            f"{short_name} ({short_period}) must be less than {long_name} ({long_period})",
            field=short_name,
        )
