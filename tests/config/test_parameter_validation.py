"""Unit tests for indicator parameter validation."""

import math
import random

import pytest

from ta_engine.config import (
    ParameterValidator,
    SettingsValidator,
    get_default_config,
    normalize_keys,
    validate_config,
)


class TestDefaults:
    """Test suite for missing and malformed configurations."""

    def test_none_returns_defaults(self) -> None:
        """Test that no configuration yields the defaults without warnings."""
        result = validate_config(None)
        assert result.config == get_default_config()
        assert result.warnings == []
        assert result.has_custom_settings is False

    def test_empty_mapping_returns_defaults(self) -> None:
        """Test that an empty mapping is not a custom configuration."""
        result = validate_config({})
        assert result.config == get_default_config()
        assert result.has_custom_settings is False

    def test_non_mapping_configuration(self) -> None:
        """Test that a non-mapping configuration is replaced by defaults."""
        result = validate_config("rsi=14")
        assert result.config == get_default_config()
        assert len(result.warnings) == 1
        assert result.warnings[0].parameter == "config"

    def test_section_must_be_mapping(self) -> None:
        """Test that a scalar section is replaced by its defaults."""
        result = validate_config({"rsi": 14})
        assert result.config.rsi == get_default_config().rsi
        assert result.warnings[0].parameter == "rsi"
        assert result.warnings[0].reason == "section must be a mapping"

    def test_unknown_keys_are_ignored(self) -> None:
        """Test that unrecognized sections and fields are dropped silently."""
        result = validate_config({"ichimoku": {"period": 9}, "rsi": {"smoothing": 2}})
        assert result.config == get_default_config()
        assert result.warnings == []
        assert result.has_custom_settings is False


class TestFieldValidation:
    """Test suite for per-field checks."""

    def test_valid_custom_values(self) -> None:
        """Test that valid values are kept and flagged as custom."""
        result = validate_config({
            "rsi": {"periods": [21, 7], "overbought": 80},
            "bollingerBands": {"standardDeviations": 2.5},
        })
        assert result.warnings == []
        assert result.has_custom_settings is True
        assert result.config.rsi.periods == (7, 21)
        assert result.config.rsi.overbought == 80.0
        assert isinstance(result.config.rsi.overbought, float)
        assert result.config.bollinger_bands.standard_deviations == 2.5

    def test_snake_case_keys(self) -> None:
        """Test that attribute-style keys are accepted too."""
        result = validate_config({"bollinger_bands": {"standard_deviations": 3}})
        assert result.config.bollinger_bands.standard_deviations == 3.0
        assert result.warnings == []

    def test_integer_out_of_range(self) -> None:
        """Test that an out-of-range integer falls back to its default."""
        result = validate_config({"macd": {"signalPeriod": 0}})
        assert result.config.macd.signal_period == 9
        warning = result.warnings[0]
        assert warning.parameter == "macd.signalPeriod"
        assert warning.original_value == 0
        assert warning.corrected_value == 9
        assert warning.reason == "value must be an integer between 1 and 50"

    def test_integer_rejects_float(self) -> None:
        """Test that a fractional period is not accepted."""
        result = validate_config({"bollingerBands": {"period": 20.5}})
        assert result.config.bollinger_bands.period == 20
        assert result.warnings[0].parameter == "bollingerBands.period"

    def test_integer_rejects_bool(self) -> None:
        """Test that booleans are not integers."""
        result = validate_config({"stochastic": {"kPeriod": True}})
        assert result.config.stochastic.k_period == 14
        assert len(result.warnings) == 1

    @pytest.mark.parametrize("value", [10, -1, math.nan, math.inf, "2"])
    def test_number_out_of_range(self, value) -> None:
        """Test that invalid numbers fall back to their default."""
        result = validate_config({"bollingerBands": {"standardDeviations": value}})
        assert result.config.bollinger_bands.standard_deviations == 2.0
        assert result.warnings[0].reason == "value must be a number between 0.1 and 5"

    def test_boolean_field(self) -> None:
        """Test that enableTrueVWAP must be a real boolean."""
        result = validate_config({"vwap": {"enableTrueVWAP": "yes"}})
        assert result.config.vwap.enable_true_vwap is True
        assert result.warnings[0].parameter == "vwap.enableTrueVWAP"
        assert result.warnings[0].reason == "value must be a boolean"

        disabled = validate_config({"vwap": {"enableTrueVWAP": False}})
        assert disabled.config.vwap.enable_true_vwap is False
        assert disabled.warnings == []

    def test_invalid_value_still_counts_as_custom(self) -> None:
        """Test that a recognized but invalid field marks custom settings."""
        result = validate_config({"volumeAnalysis": {"spikeThreshold": 0.5}})
        assert result.has_custom_settings is True
        assert result.config.volume_analysis.spike_threshold == 2.0


class TestPeriodLists:
    """Test suite for period array validation."""

    def test_invalid_entries_are_excluded(self) -> None:
        """Test that bad periods are dropped and the rest sorted and deduplicated."""
        result = validate_config({"movingAverages": {"periods": [50, -5, "x", 20, 50]}})
        assert result.config.moving_averages.periods == (20, 50)
        assert [w.parameter for w in result.warnings] == [
            "movingAverages.periods[-5]",
            "movingAverages.periods[x]",
        ]
        assert all(w.corrected_value == "excluded" for w in result.warnings)

    def test_empty_list(self) -> None:
        """Test that an empty list restores the default periods."""
        result = validate_config({"movingAverages": {"periods": []}})
        assert result.config.moving_averages.periods == (25, 50, 200)
        assert result.warnings[0].reason == "periods must be a non-empty list of integers"

    def test_not_a_list(self) -> None:
        """Test that a scalar is not a period list."""
        result = validate_config({"rsi": {"periods": 14}})
        assert result.config.rsi.periods == (14, 21)
        assert len(result.warnings) == 1

    def test_all_entries_invalid(self) -> None:
        """Test that a list with no valid entries restores the defaults."""
        result = validate_config({"rsi": {"periods": [0, 400]}})
        assert result.config.rsi.periods == (14, 21)
        assert len(result.warnings) == 3
        assert result.warnings[-1].reason == "no valid periods found, using defaults"
        assert result.warnings[-1].corrected_value == [14, 21]


class TestCrossFieldValidation:
    """Test suite for checks spanning two fields."""

    def test_rsi_thresholds_inverted(self) -> None:
        """Test that inverted RSI thresholds reset both values."""
        result = validate_config({"rsi": {"overbought": 30, "oversold": 70}})
        assert (result.config.rsi.overbought, result.config.rsi.oversold) == (70.0, 30.0)
        warning = result.warnings[0]
        assert warning.parameter == "rsi.overbought/oversold"
        assert warning.original_value == "overbought:30.0, oversold:70.0"
        assert warning.corrected_value == "overbought:70.0, oversold:30.0"

    def test_stochastic_thresholds_equal(self) -> None:
        """Test that equal Stochastic thresholds are rejected."""
        result = validate_config({"stochastic": {"overbought": 50, "oversold": 50}})
        assert result.config.stochastic.overbought == 80.0
        assert result.config.stochastic.oversold == 20.0
        assert result.warnings[0].parameter == "stochastic.overbought/oversold"

    def test_single_threshold_against_default(self) -> None:
        """Test that one overridden threshold is checked against the other's default."""
        result = validate_config({"rsi": {"oversold": 75}})
        assert result.config.rsi.oversold == 30.0
        assert len(result.warnings) == 1

    def test_macd_periods_inverted(self) -> None:
        """Test that fastPeriod must be below slowPeriod."""
        result = validate_config({"macd": {"fastPeriod": 26, "slowPeriod": 12}})
        assert (result.config.macd.fast_period, result.config.macd.slow_period) == (12, 26)
        assert result.warnings[0].parameter == "macd.fastPeriod/slowPeriod"
        assert result.warnings[0].reason == "fastPeriod must be less than slowPeriod"

    def test_macd_signal_untouched(self) -> None:
        """Test that the cross-field reset leaves signalPeriod alone."""
        result = validate_config({"macd": {"fastPeriod": 30, "signalPeriod": 5}})
        assert result.config.macd.signal_period == 5
        assert result.config.macd.fast_period == 12


class TestValidatedConfigProperties:
    """Test suite for invariants that hold for any input."""

    @staticmethod
    def _random_value(rng: random.Random):
        return rng.choice([
            rng.randint(-50, 500),
            rng.uniform(-10, 150),
            None,
            "text",
            True,
            [rng.randint(-5, 400) for _ in range(rng.randint(0, 4))],
            math.nan,
        ])

    def test_random_configurations_are_valid(self) -> None:
        """Test that arbitrary inputs always produce a usable configuration."""
        rng = random.Random(1234)
        fields = {
            "movingAverages": ["periods"],
            "rsi": ["periods", "overbought", "oversold"],
            "macd": ["fastPeriod", "slowPeriod", "signalPeriod"],
            "bollingerBands": ["period", "standardDeviations"],
            "stochastic": ["kPeriod", "dPeriod", "overbought", "oversold"],
            "volumeAnalysis": ["period", "spikeThreshold"],
            "vwap": ["enableTrueVWAP", "standardDeviations"],
            "mvwap": ["period", "standardDeviations"],
        }

        for _ in range(200):
            partial = {
                section: {key: self._random_value(rng) for key in keys if rng.random() < 0.6}
                for section, keys in fields.items()
                if rng.random() < 0.7
            }
            config = ParameterValidator.validate_and_set_defaults(partial).config

            assert config.rsi.overbought > config.rsi.oversold
            assert config.stochastic.overbought > config.stochastic.oversold
            assert config.macd.fast_period < config.macd.slow_period
            for periods in (config.moving_averages.periods, config.rsi.periods):
                assert periods
                assert list(periods) == sorted(set(periods))
                assert all(isinstance(p, int) and p >= 1 for p in periods)
            assert 0.1 <= config.bollinger_bands.standard_deviations <= 5
            assert isinstance(config.vwap.enable_true_vwap, bool)


class TestNormalizeKeys:
    """Test suite for key normalization."""

    def test_camel_case_to_attributes(self) -> None:
        """Test that camelCase keys map to attribute names."""
        normalized = normalize_keys({"volumeAnalysis": {"spikeThreshold": 3.0}, "other": 1})
        assert normalized == {"volume_analysis": {"spike_threshold": 3.0}}


class TestSettingsValidator:
    """Test suite for engine settings validation."""

    def test_valid_settings(self) -> None:
        """Test that sane settings produce no issues."""
        settings = {"cache": {"max_entries": 10, "price_ttl": 60}, "retry": {"retry_delay": 0}}
        assert SettingsValidator.validate_settings(settings) == []

    def test_invalid_max_entries(self) -> None:
        """Test that max_entries must be a positive integer."""
        issues = SettingsValidator.validate_settings({"cache": {"max_entries": 0}})
        assert len(issues) == 1
        assert issues[0].field == "cache.max_entries"
        assert "Must be a positive integer" in issues[0].message

    def test_invalid_ttl(self) -> None:
        """Test that TTLs must be positive numbers."""
        issues = SettingsValidator.validate_settings({"cache": {"indicator_ttl": -5}})
        assert issues[0].field == "cache.indicator_ttl"
        assert "Must be a positive number" in issues[0].message

    def test_negative_retry_delay(self) -> None:
        """Test that retry_delay may be zero but not negative."""
        issues = SettingsValidator.validate_settings({"retry": {"retry_delay": -1}})
        assert issues[0].field == "retry.retry_delay"
