"""Tests for RSI calculations"""

import pytest

from ta_engine.errors import InsufficientDataError
from ta_engine.indicators.rsi import calculate_rsi, rsi_signal
from ta_engine.models.indicators import RSISignal


class TestRSI:
    """Test Wilder RSI"""

    def test_only_gains(self):
        """No losses gives RSI 100"""
        assert calculate_rsi([float(i) for i in range(1, 31)], 14) == 100.0

    def test_only_losses(self):
        """No gains gives RSI 0"""
        assert calculate_rsi([float(i) for i in range(30, 0, -1)], 14) == 0.0

    def test_flat_series(self):
        """No movement at all gives RSI 50"""
        assert calculate_rsi([100.0] * 30, 14) == 50.0

    def test_wilder_recurrence(self):
        """Hand-computed value for period 2"""
        # Seed: gain 0.5, loss 0.5; then +1 gives gain 0.75, loss 0.25
        assert calculate_rsi([1.0, 2.0, 1.0, 2.0], 2) == 75.0

    def test_bounded(self):
        """RSI stays within [0, 100] on a noisy series"""
        closes = [100 + ((i * 37) % 11) - 5 + i * 0.1 for i in range(80)]
        for period in (2, 5, 14, 21):
            value = calculate_rsi(closes, period)
            assert 0.0 <= value <= 100.0

    def test_warmup_window(self):
        """Only the trailing period + warmup + 1 closes matter"""
        closes = [100 + ((i * 13) % 7) for i in range(400)]
        assert calculate_rsi(closes, 14, 100) == calculate_rsi(closes[-115:], 14, 100)

    def test_insufficient_data(self):
        """RSI needs more than period closes"""
        with pytest.raises(InsufficientDataError):
            calculate_rsi([float(i) for i in range(14)], 14)


class TestRSISignal:
    """Test RSI threshold signals"""

    def test_thresholds_inclusive(self):
        """Thresholds themselves count as overbought/oversold"""
        assert rsi_signal(70, 70, 30) == RSISignal.OVERBOUGHT
        assert rsi_signal(30, 70, 30) == RSISignal.OVERSOLD
        assert rsi_signal(50, 70, 30) == RSISignal.NEUTRAL

    def test_custom_thresholds(self):
        """Custom thresholds are honoured"""
        assert rsi_signal(72, 75, 25) == RSISignal.NEUTRAL
