"""Tests for numeric primitives"""

import pytest

from ta_engine.indicators.primitives import (
    correlation,
    ema_series,
    mean,
    pct_change,
    round_to,
    sma_series,
    std_dev,
)


class TestRounding:
    """Test half-up rounding"""

    def test_round_half_up(self):
        """Ties round toward positive infinity"""
        assert round_to(2.5, 0) == 3.0
        assert round_to(-2.5, 0) == -2.0

    def test_round_decimals(self):
        """Test rounding to several decimals"""
        assert round_to(1.23456, 3) == pytest.approx(1.235)


class TestStatistics:
    """Test mean and standard deviation"""

    def test_mean_empty(self):
        """Mean of nothing is zero"""
        assert mean([]) == 0.0

    def test_population_std_dev(self):
        """Standard deviation divides by n, not n - 1"""
        assert std_dev([2, 4, 4, 4, 5, 5, 7, 9]) == pytest.approx(2.0)

    def test_pct_change_zero_base(self):
        """Percent change from zero is defined as zero"""
        assert pct_change(0, 10) == 0.0
        assert pct_change(100, 110) == pytest.approx(10.0)

    def test_correlation(self):
        """Test perfect and undefined correlation"""
        assert correlation([1, 2, 3], [2, 4, 6]) == pytest.approx(1.0)
        assert correlation([1, 2, 3], [3, 2, 1]) == pytest.approx(-1.0)
        assert correlation([1, 1, 1], [1, 2, 3]) == 0.0


class TestMovingSeries:
    """Test SMA and EMA recurrences"""

    def test_sma_series(self):
        """SMA series starts at index period - 1"""
        assert sma_series([1, 2, 3, 4, 5], 3) == pytest.approx([2, 3, 4])

    def test_ema_seeded_with_sma(self):
        """EMA seed is the SMA of the first period values"""
        assert ema_series([1, 2, 3, 4, 5], 3) == pytest.approx([2, 3, 4])

    def test_short_input(self):
        """Series shorter than the period produce nothing"""
        assert sma_series([1, 2], 3) == []
        assert ema_series([1, 2], 3) == []
