"""
Base error classification for the analysis engine.

Every failure the engine reports belongs to exactly one ErrorKind. The kind
carries a fixed recoverability flag that drives the retry policy: rate limits
and validation problems are never retried.
"""

from enum import Enum
from typing import Any, Optional


class ErrorKind(str, Enum):
    """Failure categories used for retry decisions and user messaging."""
    CONNECTION = "connection"
    RATE_LIMIT = "rate_limit"
    DATA_FETCH = "data_fetch"
    VALIDATION = "validation"
    CALCULATION = "calculation"
    UNKNOWN = "unknown"

    @property
    def recoverable(self) -> bool:
        return self not in (ErrorKind.RATE_LIMIT, ErrorKind.VALIDATION)


class AnalysisError(Exception):
    """Base class for structured engine errors."""

    kind: ErrorKind = ErrorKind.UNKNOWN

    def __init__(self, message: str, context: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = self.kind.recoverable


class UnknownAnalysisError(AnalysisError):
    """Failure that could not be attributed to any known category."""

    kind = ErrorKind.UNKNOWN
