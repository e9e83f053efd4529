"""
Logging configuration and utilities for the technical analysis engine.
"""
from .config import (
    configure_logging,
    get_cache_logger,
    get_indicator_logger,
    get_logger,
    log_indicator_fallback,
    log_parameter_correction,
)

__all__ = [
    "configure_logging",
    "get_cache_logger",
    "get_indicator_logger",
    "get_logger",
    "log_indicator_fallback",
    "log_parameter_correction",
]
