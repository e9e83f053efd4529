"""Composite signal synthesis."""

from .composite import (
    determine_momentum,
    determine_strength,
    determine_trend,
    synthesize_signals,
)

__all__ = [
    "determine_momentum",
    "determine_strength",
    "determine_trend",
    "synthesize_signals",
]
