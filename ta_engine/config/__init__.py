"""Indicator configuration defaults, validation and YAML loading."""

from .defaults import (
    BollingerParams,
    CacheParams,
    CalculationParams,
    EngineSettings,
    ErrorHistoryParams,
    IndicatorConfig,
    MACDParams,
    MovingAverageParams,
    MVWAPParams,
    RetryParams,
    RSIParams,
    StochasticParams,
    VolumeParams,
    VWAPParams,
    get_default_config,
    get_default_settings,
)
from .loader import ConfigLoader
from .validation import (
    ParameterValidator,
    ParameterWarning,
    SettingsIssue,
    SettingsValidator,
    ValidationResult,
    normalize_keys,
    validate_config,
)

__all__ = [
    "BollingerParams",
    "CacheParams",
    "CalculationParams",
    "EngineSettings",
    "ErrorHistoryParams",
    "IndicatorConfig",
    "MACDParams",
    "MovingAverageParams",
    "MVWAPParams",
    "RetryParams",
    "RSIParams",
    "StochasticParams",
    "VolumeParams",
    "VWAPParams",
    "get_default_config",
    "get_default_settings",
    "ConfigLoader",
    "ParameterValidator",
    "ParameterWarning",
    "SettingsIssue",
    "SettingsValidator",
    "ValidationResult",
    "normalize_keys",
    "validate_config",
]
