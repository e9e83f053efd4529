"""
Errors raised at the market data provider boundary.

Provider adapters should translate their client library failures into these
types so the error handler can classify them by type instead of by message.
"""

from typing import Optional

from .base import AnalysisError, ErrorKind


class ProviderConnectionError(AnalysisError):
    """Network failure or timeout talking to the data provider."""

    kind = ErrorKind.CONNECTION


class RateLimitError(AnalysisError):
    """Provider refused the request because of rate limiting."""

    kind = ErrorKind.RATE_LIMIT

    def __init__(self, message: str, retry_after: Optional[float] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.retry_after = retry_after


class DataFetchError(AnalysisError):
    """Provider answered but the data was missing or unusable."""

    kind = ErrorKind.DATA_FETCH

    def __init__(self, message: str, symbol: Optional[str] = None,
                 data_type: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.symbol = symbol
        self.data_type = data_type
