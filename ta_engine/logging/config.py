"""
Centralized logging configuration for the technical analysis engine.

This module provides standardized logging configuration using structlog
for all components. All logging throughout the engine should use this
configuration to ensure consistent formatting and structured logging.
"""
import logging
import sys
from typing import Any, Optional

import structlog
from structlog.types import FilteringBoundLogger


def configure_logging(
    level: str = "INFO",
    format_json: bool = False,
    include_timestamp: bool = True,
    include_caller: bool = False,
    extra_processors: Optional[list] = None
) -> None:
    """
    Configure structlog for the entire application.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_json: If True, output JSON format; otherwise human-readable
        include_timestamp: Include timestamp in log output
        include_caller: Include caller information (filename, line number)
        extra_processors: Additional structlog processors to include
    """
    log_level = getattr(logging, level.upper())

    logging.basicConfig(
        level=log_level,
        stream=sys.stdout,
        format="%(message)s"  # structlog will handle formatting
    )

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if include_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso"))

    if include_caller:
        processors.append(structlog.processors.CallsiteParameterAdder(
            parameters=[structlog.processors.CallsiteParameter.FILENAME,
                        structlog.processors.CallsiteParameter.LINENO]
        ))

    if extra_processors:
        processors.extend(extra_processors)

    if format_json:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> FilteringBoundLogger:
    """
    Get a configured structlog logger instance.

    Args:
        name: Logger name (typically __name__)
    """
    return structlog.get_logger(name)


def get_indicator_logger(name: str) -> FilteringBoundLogger:
    """Get a logger bound to the indicator computation subsystem."""
    return get_logger(name).bind(subsystem="indicators")


def get_cache_logger(name: str) -> FilteringBoundLogger:
    """Get a logger bound to the cache subsystem."""
    return get_logger(name).bind(subsystem="cache")


def log_indicator_fallback(
    logger: FilteringBoundLogger,
    indicator: str,
    symbol: Optional[str],
    reason: str,
    context: Optional[dict[str, Any]] = None
) -> None:
    """
    Log that an indicator was replaced by its fallback result.

    Args:
        logger: Structlog logger instance
        indicator: Indicator name, e.g. "rsi_14"
        symbol: Symbol being analyzed, if known
        reason: Why the computation failed
        context: Additional context data
    """
    bound_logger = logger.bind(
        indicator=indicator,
        symbol=symbol,
        reason=reason,
    )

    if context:
        bound_logger = bound_logger.bind(context=context)

    bound_logger.warning("Indicator fell back to default result")


def log_parameter_correction(
    logger: FilteringBoundLogger,
    parameter: str,
    original_value: Any,
    corrected_value: Any,
    reason: str
) -> None:
    """Log one configuration correction made by the parameter validator."""
    logger.info(
        "Parameter corrected",
        parameter=parameter,
        original_value=original_value,
        corrected_value=corrected_value,
        reason=reason,
    )
