"""
Structured error hierarchy and error handling for the analysis engine.

Errors raised at the provider boundary and inside calculators are typed so
the handler can classify them without inspecting messages.
"""

from .base import (
    AnalysisError,
    ErrorKind,
    UnknownAnalysisError,
)
from .calculation import (
    CalculationError,
    InsufficientDataError,
    ValidationError,
)
from .fetch import (
    DataFetchError,
    ProviderConnectionError,
    RateLimitError,
)
from .handler import (
    ErrorContext,
    ErrorHandler,
    ErrorReport,
    ErrorSummary,
    SafeResult,
    classify_error,
)

__all__ = [
    # Taxonomy
    "AnalysisError",
    "ErrorKind",
    "ProviderConnectionError",
    "RateLimitError",
    "DataFetchError",
    "ValidationError",
    "CalculationError",
    "InsufficientDataError",
    "UnknownAnalysisError",
    # Handling
    "ErrorContext",
    "ErrorHandler",
    "ErrorReport",
    "ErrorSummary",
    "SafeResult",
    "classify_error",
]
