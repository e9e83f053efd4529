"""
Errors raised while validating input or computing indicators.
"""

from typing import Optional

from .base import AnalysisError, ErrorKind


class ValidationError(AnalysisError):
    """Input rejected by a calculator's argument checks."""

    kind = ErrorKind.VALIDATION

    def __init__(self, message: str, field: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.field = field


class CalculationError(AnalysisError):
    """Indicator computation failed."""

    kind = ErrorKind.CALCULATION

    def __init__(self, message: str, indicator: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.indicator = indicator


class InsufficientDataError(CalculationError):
    """Not enough bars for the requested lookback."""

    def __init__(self, message: str, required_count: Optional[int] = None,
                 available_count: Optional[int] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.required_count = required_count
        self.available_count = available_count
