"""
Indicator parameter validation and engine settings validation.

ParameterValidator turns an arbitrary, possibly partial user configuration
into a fully populated IndicatorConfig. It never raises: anything invalid is
replaced by its default and reported as a ParameterWarning.
"""

import math
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import Any, Optional

from .defaults import IndicatorConfig, get_default_config

_PERIODS = "periods"
_INT = "int"
_NUMBER = "number"
_BOOL = "bool"


@dataclass(frozen=True)
class ParameterWarning:
    """A single correction applied during validation."""
    parameter: str
    original_value: Any
    corrected_value: Any
    reason: str


@dataclass(frozen=True)
class ValidationResult:
    """Validated configuration plus the corrections that produced it."""
    config: IndicatorConfig
    warnings: list[ParameterWarning] = field(default_factory=list)
    has_custom_settings: bool = False


@dataclass(frozen=True)
class _FieldRule:
    attr: str           # dataclass attribute
    key: str            # public camelCase key
    kind: str
    minimum: float = 0
    maximum: float = 0


@dataclass(frozen=True)
class _SectionRule:
    attr: str
    key: str
    fields: tuple[_FieldRule, ...]


_SECTIONS = (
    _SectionRule("moving_averages", "movingAverages", (
        _FieldRule("periods", "periods", _PERIODS, 1, 365),
    )),
    _SectionRule("rsi", "rsi", (
        _FieldRule("periods", "periods", _PERIODS, 1, 100),
        _FieldRule("overbought", "overbought", _NUMBER, 0, 100),
        _FieldRule("oversold", "oversold", _NUMBER, 0, 100),
    )),
    _SectionRule("macd", "macd", (
        _FieldRule("fast_period", "fastPeriod", _INT, 1, 50),
        _FieldRule("slow_period", "slowPeriod", _INT, 2, 100),
        _FieldRule("signal_period", "signalPeriod", _INT, 1, 50),
    )),
    _SectionRule("bollinger_bands", "bollingerBands", (
        _FieldRule("period", "period", _INT, 2, 100),
        _FieldRule("standard_deviations", "standardDeviations", _NUMBER, 0.1, 5),
    )),
    _SectionRule("stochastic", "stochastic", (
        _FieldRule("k_period", "kPeriod", _INT, 1, 100),
        _FieldRule("d_period", "dPeriod", _INT, 1, 50),
        _FieldRule("overbought", "overbought", _NUMBER, 0, 100),
        _FieldRule("oversold", "oversold", _NUMBER, 0, 100),
    )),
    _SectionRule("volume_analysis", "volumeAnalysis", (
        _FieldRule("period", "period", _INT, 1, 100),
        _FieldRule("spike_threshold", "spikeThreshold", _NUMBER, 1.0, 10.0),
    )),
    _SectionRule("vwap", "vwap", (
        _FieldRule("enable_true_vwap", "enableTrueVWAP", _BOOL),
        _FieldRule("standard_deviations", "standardDeviations", _NUMBER, 0.1, 5),
    )),
    _SectionRule("mvwap", "mvwap", (
        _FieldRule("period", "period", _INT, 1, 100),
        _FieldRule("standard_deviations", "standardDeviations", _NUMBER, 0.1, 5),
    )),
)

_MISSING = object()


def _is_number(value: Any) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _get(mapping: Mapping, *keys: str) -> Any:
    for key in keys:
        if key in mapping:
            return mapping[key]
    return _MISSING


def normalize_keys(partial: Mapping) -> dict[str, Any]:
    """
    Rewrite recognized camelCase section and field names to their snake_case
    attribute names. Unrecognized keys are dropped.
    """
    normalized: dict[str, Any] = {}
    for section in _SECTIONS:
        raw = _get(partial, section.attr, section.key)
        if raw is _MISSING:
            continue
        if not isinstance(raw, Mapping):
            normalized[section.attr] = raw
            continue
        values = {}
        for rule in section.fields:
            value = _get(raw, rule.attr, rule.key)
            if value is not _MISSING:
                values[rule.attr] = value
        normalized[section.attr] = values
    return normalized


class ParameterValidator:
    """Validates indicator parameters and fills in defaults."""

    @staticmethod
    def validate_and_set_defaults(partial: Optional[Mapping] = None) -> ValidationResult:
        """
        Validate a partial configuration.

        Per-field checks run first, then cross-field checks
        (overbought > oversold for RSI and Stochastic, fastPeriod < slowPeriod
        for MACD). A cross-field violation resets both fields of the pair.
        """
        defaults = get_default_config()
        if partial is None:
            return ValidationResult(config=defaults)

        warnings: list[ParameterWarning] = []
        if not isinstance(partial, Mapping):
            warnings.append(ParameterWarning(
                parameter="config",
                original_value=partial,
                corrected_value="defaults",
                reason="configuration must be a mapping",
            ))
            return ValidationResult(config=defaults, warnings=warnings)

        normalized = normalize_keys(partial)
        has_custom = False
        sections: dict[str, Any] = {}

        for section in _SECTIONS:
            default_section = getattr(defaults, section.attr)
            raw = normalized.get(section.attr, _MISSING)
            if raw is _MISSING:
                sections[section.attr] = default_section
                continue
            if not isinstance(raw, Mapping):
                warnings.append(ParameterWarning(
                    parameter=section.key,
                    original_value=raw,
                    corrected_value="defaults",
                    reason="section must be a mapping",
                ))
                sections[section.attr] = default_section
                continue

            updates = {}
            for rule in section.fields:
                if rule.attr not in raw:
                    continue
                has_custom = True
                path = f"{section.key}.{rule.key}"
                default_value = getattr(default_section, rule.attr)
                updates[rule.attr] = ParameterValidator._validate_field(
                    rule, path, raw[rule.attr], default_value, warnings
                )
            sections[section.attr] = replace(default_section, **updates)

        config = IndicatorConfig(**sections)
        config = ParameterValidator._check_cross_fields(config, defaults, warnings)
        return ValidationResult(config=config, warnings=warnings, has_custom_settings=has_custom)

    @staticmethod
    def _validate_field(rule: _FieldRule, path: str, value: Any, default: Any,
                        warnings: list[ParameterWarning]) -> Any:
        if rule.kind == _PERIODS:
            return ParameterValidator._validate_periods(rule, path, value, default, warnings)

        if rule.kind == _BOOL:
            if isinstance(value, bool):
                return value
            reason = "value must be a boolean"
        elif rule.kind == _INT:
            if _is_int(value) and rule.minimum <= value <= rule.maximum:
                return value
            reason = f"value must be an integer between {rule.minimum} and {rule.maximum}"
        else:
            if _is_number(value) and rule.minimum <= value <= rule.maximum:
                return float(value)
            reason = f"value must be a number between {rule.minimum} and {rule.maximum}"

        warnings.append(ParameterWarning(
            parameter=path,
            original_value=value,
            corrected_value=default,
            reason=reason,
        ))
        return default

    @staticmethod
    def _validate_periods(rule: _FieldRule, path: str, value: Any,
                          default: tuple[int, ...],
                          warnings: list[ParameterWarning]) -> tuple[int, ...]:
        if isinstance(value, (str, bytes)) or not isinstance(value, (list, tuple)) or not value:
            warnings.append(ParameterWarning(
                parameter=path,
                original_value=value,
                corrected_value=list(default),
                reason="periods must be a non-empty list of integers",
            ))
            return default

        valid: set[int] = set()
        for period in value:
            if _is_int(period) and rule.minimum <= period <= rule.maximum:
                valid.add(period)
                continue
            warnings.append(ParameterWarning(
                parameter=f"{path}[{period}]",
                original_value=period,
                corrected_value="excluded",
                reason=f"period must be an integer between {rule.minimum} and {rule.maximum}",
            ))

        if not valid:
            warnings.append(ParameterWarning(
                parameter=path,
                original_value=list(value),
                corrected_value=list(default),
                reason="no valid periods found, using defaults",
            ))
            return default
        return tuple(sorted(valid))

    @staticmethod
    def _check_cross_fields(config: IndicatorConfig, defaults: IndicatorConfig,
                            warnings: list[ParameterWarning]) -> IndicatorConfig:
        for attr, key in (("rsi", "rsi"), ("stochastic", "stochastic")):
            section = getattr(config, attr)
            if section.overbought > section.oversold:
                continue
            default_section = getattr(defaults, attr)
            warnings.append(ParameterWarning(
                parameter=f"{key}.overbought/oversold",
                original_value=f"overbought:{section.overbought}, oversold:{section.oversold}",
                corrected_value=(
                    f"overbought:{default_section.overbought}, "
                    f"oversold:{default_section.oversold}"
                ),
                reason="overbought must be greater than oversold",
            ))
            config = replace(config, **{attr: replace(
                section,
                overbought=default_section.overbought,
                oversold=default_section.oversold,
            )})

        macd = config.macd
        if macd.fast_period >= macd.slow_period:
            warnings.append(ParameterWarning(
                parameter="macd.fastPeriod/slowPeriod",
                original_value=f"fastPeriod:{macd.fast_period}, slowPeriod:{macd.slow_period}",
                corrected_value=(
                    f"fastPeriod:{defaults.macd.fast_period}, "
                    f"slowPeriod:{defaults.macd.slow_period}"
                ),
                reason="fastPeriod must be less than slowPeriod",
            ))
            config = replace(config, macd=replace(
                macd,
                fast_period=defaults.macd.fast_period,
                slow_period=defaults.macd.slow_period,
            ))
        return config


def validate_config(partial: Optional[Mapping] = None) -> ValidationResult:
    """Validate a partial indicator configuration. Never raises."""
    return ParameterValidator.validate_and_set_defaults(partial)


@dataclass(frozen=True)
class SettingsIssue:
    """Represents an engine settings validation problem."""
    field: str
    message: str
    value: Any


class SettingsValidator:
    """Validates engine settings loaded from YAML."""

    _POSITIVE_INTS = {
        "cache": ("max_entries", "eviction_batch"),
        "retry": ("max_retries",),
        "errors": ("max_reports",),
        "calculation": ("rsi_warmup", "cross_confirmation", "intraday_expected_points"),
    }
    _POSITIVE_NUMBERS = {
        "cache": ("default_ttl", "price_ttl", "intraday_ttl", "indicator_ttl", "fundamentals_ttl"),
    }

    @staticmethod
    def validate_settings(settings: dict[str, Any]) -> list[SettingsIssue]:
        """Validate a settings dictionary shaped like EngineSettings."""
        issues = []

        sections: dict[str, dict[str, Any]] = {}
        for section in SettingsValidator._POSITIVE_INTS:
            values = settings.get(section)
            if values is not None and not isinstance(values, dict):
                issues.append(SettingsIssue(
                    field=section,
                    message="Must be a mapping",
                    value=values,
                ))
            sections[section] = values if isinstance(values, dict) else {}

        for section, names in SettingsValidator._POSITIVE_INTS.items():
            values = sections[section]
            for name in names:
                if name in values:
                    value = values[name]
                    if not _is_int(value) or value <= 0:
                        issues.append(SettingsIssue(
                            field=f"{section}.{name}",
                            message="Must be a positive integer",
                            value=value,
                        ))

        for section, names in SettingsValidator._POSITIVE_NUMBERS.items():
            values = sections[section]
            for name in names:
                if name in values:
                    value = values[name]
                    if not _is_number(value) or value <= 0:
                        issues.append(SettingsIssue(
                            field=f"{section}.{name}",
                            message="Must be a positive number",
                            value=value,
                        ))

        retry_delay = sections["retry"].get("retry_delay")
        if retry_delay is not None and (not _is_number(retry_delay) or retry_delay < 0):
            issues.append(SettingsIssue(
                field="retry.retry_delay",
                message="Must be a non-negative number",
                value=retry_delay,
            ))

        return issues
