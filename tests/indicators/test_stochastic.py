"""Tests for the Stochastic oscillator"""

import pytest

from ta_engine.errors import InsufficientDataError
from ta_engine.indicators.stochastic import calculate_stochastic
from ta_engine.models.indicators import StochasticState


class TestStochastic:
    """Test %K, %D and state"""

    def test_zero_range_is_fifty(self, make_bars):
        """A window without range gives %K = %D = 50"""
        result = calculate_stochastic(make_bars([100.0] * 20, spread=0.0), 14, 3)
        assert result.k == 50.0
        assert result.d == 50.0
        assert result.state == StochasticState.NEUTRAL

    def test_uptrend_is_overbought(self, make_bars):
        """Closes near the top of the range read as overbought"""
        bars = make_bars([float(i) for i in range(1, 21)], spread=1.0)
        result = calculate_stochastic(bars, 14, 3)
        # Each window: close - lowest low = 14, highest high - lowest low = 15
        assert result.k == pytest.approx(93.33)
        assert result.d == pytest.approx(93.33)
        assert result.state == StochasticState.OVERBOUGHT

    def test_downtrend_is_oversold(self, make_bars):
        """Closes near the bottom of the range read as oversold"""
        bars = make_bars([float(i) for i in range(40, 20, -1)], spread=1.0)
        result = calculate_stochastic(bars, 14, 3)
        assert result.k < 20
        assert result.state == StochasticState.OVERSOLD

    def test_values_bounded(self, make_bars):
        """%K and %D stay within [0, 100]"""
        closes = [100 + ((i * 11) % 9) - 4 for i in range(50)]
        result = calculate_stochastic(make_bars(closes, spread=2.0), 14, 3)
        assert 0 <= result.k <= 100
        assert 0 <= result.d <= 100

    def test_insufficient_data(self, make_bars):
        """Needs k_period + d_period - 1 bars"""
        with pytest.raises(InsufficientDataError):
            calculate_stochastic(make_bars([100.0] * 15), 14, 3)
