"""
TA Engine - Technical Analysis Engine for daily price series

A configurable multi-indicator analytics engine. Validates indicator
configuration, computes moving averages, RSI, MACD, Bollinger Bands,
Stochastic, cross detection, volume analysis and VWAP variants with
per-indicator failure isolation, and synthesizes composite signals.
"""

__version__ = "0.1.0"
__author__ = "TA Engine Team"
