"""
Error handler: classification, safe execution wrappers and diagnostic history.

Failures are classified by exception type first. Message patterns are only
consulted for exceptions that carry no structure (errors bubbling up from
third-party clients that do not translate their failures).
"""

import asyncio
import threading
from collections import Counter, deque
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from typing import Any, Awaitable, Callable, Generic, Optional, TypeVar

import structlog

from .base import AnalysisError, ErrorKind

logger = structlog.get_logger(__name__)

T = TypeVar("T")

USER_MESSAGES = {
    ErrorKind.CONNECTION: "Could not reach the market data service. Please try again shortly.",
    ErrorKind.RATE_LIMIT: "The data provider's request limit was reached. Please wait before retrying.",
    ErrorKind.DATA_FETCH: "Market data could not be retrieved for this symbol.",
    ErrorKind.VALIDATION: "Some input values were invalid and could not be used.",
    ErrorKind.CALCULATION: "An indicator could not be calculated; a fallback value was used.",
    ErrorKind.UNKNOWN: "An unexpected error occurred.",
}

_RATE_LIMIT_PATTERNS = ("rate limit", "too many requests", "429")
_CONNECTION_PATTERNS = ("network", "timeout", "timed out", "connection", "econnrefused")
_VALIDATION_PATTERNS = ("validation", "invalid")
_CALCULATION_PATTERNS = ("calculation", "math", "division")
_DATA_FETCH_PATTERNS = ("fetch", "no data", "not found")


@dataclass(frozen=True)
class ErrorContext:
    """Where a failure happened."""
    symbol: Optional[str] = None
    indicator: Optional[str] = None
    parameters: dict[str, Any] = field(default_factory=dict)
    attempt: Optional[int] = None
    max_attempts: Optional[int] = None


@dataclass(frozen=True)
class ErrorReport:
    """Diagnostic record of one handled failure."""
    kind: ErrorKind
    context: ErrorContext
    recoverable: bool
    user_message: str
    technical_details: str
    fallback_description: Optional[str]
    timestamp: datetime
    error: Optional[BaseException] = None


@dataclass(frozen=True)
class SafeResult(Generic[T]):
    """Outcome of a safe call: the value, plus the report when a fallback was used."""
    value: T
    error: Optional[ErrorReport] = None

    @property
    def degraded(self) -> bool:
        return self.error is not None


@dataclass(frozen=True)
class ErrorSummary:
    """Aggregate view over the report history."""
    total: int
    by_kind: dict[str, int]
    recent: list[ErrorReport]


def classify_error(error: BaseException) -> ErrorKind:
    """Map an exception to an ErrorKind."""
    if isinstance(error, AnalysisError):
        return error.kind
    if isinstance(error, (ConnectionError, TimeoutError)):
        return ErrorKind.CONNECTION
    if isinstance(error, ArithmeticError):
        return ErrorKind.CALCULATION

    message = str(error).lower()
    # Rate limit first: "429 ... timeout" style messages are still rate limits
    for patterns, kind in (
        (_RATE_LIMIT_PATTERNS, ErrorKind.RATE_LIMIT),
        (_CONNECTION_PATTERNS, ErrorKind.CONNECTION),
        (_VALIDATION_PATTERNS, ErrorKind.VALIDATION),
        (_CALCULATION_PATTERNS, ErrorKind.CALCULATION),
        (_DATA_FETCH_PATTERNS, ErrorKind.DATA_FETCH),
    ):
        if any(pattern in message for pattern in patterns):
            return kind
    return ErrorKind.UNKNOWN


def _technical_details(error: BaseException, context: ErrorContext) -> str:
    parts = [f"Error: {error}", f"Type: {type(error).__name__}"]
    if context.symbol:
        parts.append(f"Symbol: {context.symbol}")
    if context.indicator:
        parts.append(f"Indicator: {context.indicator}")
    if context.attempt is not None:
        parts.append(f"Attempt: {context.attempt}/{context.max_attempts}")
    if context.parameters:
        parts.append(f"Parameters: {context.parameters}")
    return " | ".join(parts)


class ErrorHandler:
    """
    Classifies failures, runs callables with fallbacks and keeps a bounded
    history of error reports.

    The history is shared by every caller of one handler instance, including
    indicator computations running on worker threads, so all access goes
    through a lock.
    """

    def __init__(
        self,
        max_reports: int = 100,
        max_retries: int = 3,
        retry_delay: float = 1.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self._sleep = sleep
        self._reports: deque[ErrorReport] = deque(maxlen=max_reports)
        self._lock = threading.Lock()

    @property
    def reports(self) -> list[ErrorReport]:
        """Snapshot of the history, oldest first."""
        with self._lock:
            return list(self._reports)

    def classify(self, error: BaseException) -> ErrorKind:
        return classify_error(error)

    def handle_error(
        self,
        error: BaseException,
        context: Optional[ErrorContext] = None,
        fallback_description: Optional[str] = None,
        kind: Optional[ErrorKind] = None,
    ) -> ErrorReport:
        """Classify an error, record a report for it and return the report."""
        context = context or ErrorContext()
        kind = kind or self.classify(error)
        report = ErrorReport(
            kind=kind,
            context=context,
            recoverable=kind.recoverable,
            user_message=USER_MESSAGES[kind],
            technical_details=_technical_details(error, context),
            fallback_description=fallback_description,
            timestamp=datetime.now(UTC),
            error=error,
        )
        with self._lock:
            self._reports.append(report)

        logger.warning(
            "Analysis error recorded",
            kind=kind.value,
            symbol=context.symbol,
            indicator=context.indicator,
            recoverable=report.recoverable,
            error=str(error),
        )
        return report

    def safe_execute(
        self,
        fn: Callable[[], T],
        fallback_fn: Callable[[], T],
        context: Optional[ErrorContext] = None,
        fallback_description: Optional[str] = None,
    ) -> SafeResult[T]:
        """Run fn; on failure run fallback_fn and record one report."""
        try:
            return SafeResult(fn())
        except Exception as e:
            report = self.handle_error(e, context, fallback_description)
            return SafeResult(fallback_fn(), report)

    async def safe_execute_async(
        self,
        fn: Callable[[], Awaitable[T]],
        fallback_fn: Callable[[], T],
        context: Optional[ErrorContext] = None,
        fallback_description: Optional[str] = None,
        max_retries: Optional[int] = None,
        retry_delay: Optional[float] = None,
    ) -> SafeResult[T]:
        """
        Await fn with bounded retries.

        Recoverable failures are retried after delay * attempt seconds. A
        non-recoverable failure, or the failure of the last attempt, runs the
        fallback and records exactly one report.
        """
        context = context or ErrorContext()
        attempts = max(1, self.max_retries if max_retries is None else max_retries)
        delay = self.retry_delay if retry_delay is None else retry_delay

        attempt = 1
        while True:
            try:
                return SafeResult(await fn())
            except Exception as e:
                kind = self.classify(e)
                if not kind.recoverable or attempt >= attempts:
                    report = self.handle_error(
                        e,
                        replace(context, attempt=attempt, max_attempts=attempts),
                        fallback_description,
                        kind=kind,
                    )
                    return SafeResult(fallback_fn(), report)

                wait = delay * attempt
                logger.info(
                    f"Attempt {attempt} failed, retrying in {wait}s",
                    symbol=context.symbol,
                    kind=kind.value,
                    error=str(e),
                )
                await self._sleep(wait)
                attempt += 1

    def get_error_summary(self) -> ErrorSummary:
        reports = self.reports
        counts = Counter(report.kind.value for report in reports)
        return ErrorSummary(total=len(reports), by_kind=dict(counts), recent=reports[-5:])

    def consolidated_message(self, reports: Optional[list[ErrorReport]] = None) -> str:
        """
        Render one summary across many reports: at most one sentence per kind,
        in order of first occurrence, with affected indicators or symbols
        listed once each.
        """
        if reports is None:
            reports = self.reports
        if not reports:
            return ""

        subjects: dict[ErrorKind, list[str]] = {}
        for report in reports:
            names = subjects.setdefault(report.kind, [])
            subject = report.context.indicator or report.context.symbol
            if subject and subject not in names:
                names.append(subject)

        sentences = []
        for kind, names in subjects.items():
            sentence = USER_MESSAGES[kind]
            if names:
                sentence = f"{sentence[:-1]} (affected: {', '.join(names)})."
            sentences.append(sentence)
        return " ".join(sentences)

    def clear_history(self) -> None:
        with self._lock:
            self._reports.clear()
