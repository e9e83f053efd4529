"""Configuration loader with 3-tier parameter precedence."""

from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Optional

import yaml

from ..errors import ValidationError
from .defaults import EngineSettings, IndicatorConfig, get_default_config, get_default_settings
from .validation import SettingsValidator, normalize_keys


@dataclass(frozen=True)
class ConfigLoader:
    """Loads engine settings and per-symbol indicator presets from YAML."""

    config_dir: Path
    defaults: IndicatorConfig

    @classmethod
    def create(cls, config_dir: Optional[Path] = None) -> "ConfigLoader":
        """Create a ConfigLoader instance."""
        if config_dir is None:
            config_dir = Path(__file__).parent.parent.parent / "config"

        return cls(
            config_dir=Path(config_dir),
            defaults=get_default_config(),
        )

    def _load_yaml(self, filename: str) -> dict[str, Any]:
        path = self.config_dir / filename
        if not path.exists():
            return {}

        with open(path) as f:
            data = yaml.safe_load(f)

        return data or {}

    def load_engine_settings(self) -> EngineSettings:
        """
        Load engine settings from engine.yaml on top of the defaults.

        Raises:
            ValidationError: if any settings value is out of range
        """
        overrides = self._load_yaml("engine.yaml").get("engine") or {}
        if not isinstance(overrides, dict):
            raise ValidationError(
                "Invalid engine settings: engine: Must be a mapping",
                field="engine",
                context={"value": overrides},
            )
        merged = self._deep_merge(asdict(get_default_settings()), overrides)

        issues = SettingsValidator.validate_settings(merged)
        if issues:
            details = [f"{issue.field}: {issue.message} (got: {issue.value})" for issue in issues]
            raise ValidationError(
                "Invalid engine settings: " + "; ".join(details),
                field=issues[0].field,
                context={"issues": details},
            )

        return EngineSettings(**{
            f.name: self._build_section(f.type, merged.get(f.name, {}))
            for f in fields(EngineSettings)
        })

    def preset_symbols(self) -> list[str]:
        """Symbols that have a preset in symbols.yaml."""
        return sorted(self._load_yaml("symbols.yaml").get("symbols") or {})

    def load_symbol_config(self, symbol: str) -> dict[str, Any]:
        """Load symbol-specific indicator overrides."""
        symbols_config = self._load_yaml("symbols.yaml")
        preset = symbols_config.get("symbols", {}).get(symbol.upper(), {})
        return normalize_keys(preset) if isinstance(preset, dict) else {}

    def merge_config(
        self,
        symbol: str,
        call_overrides: Optional[dict[str, Any]] = None
    ) -> dict[str, Any]:
        """
        Merge the partial configuration for one analysis.

        Priority order:
        1. Per-call overrides (highest priority)
        2. Symbol-specific presets
        3. Global defaults (lowest priority), filled in by the validator

        The result is still a partial configuration; pass it to
        validate_config to obtain a complete IndicatorConfig.
        """
        config = self.load_symbol_config(symbol)

        if call_overrides:
            config = self._deep_merge(config, normalize_keys(call_overrides))

        return config

    def _build_section(self, section_type: Any, values: dict[str, Any]) -> Any:
        """Instantiate a settings dataclass from a dict, ignoring unknown keys."""
        known = {f.name for f in fields(section_type)}
        return section_type(**{k: v for k, v in values.items() if k in known})

    def _deep_merge(self, base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        """Deep merge two dictionaries."""
        result = base.copy()

        for key, value in override.items():
            # An empty YAML section (`cache:`) overrides nothing
            if value is None and isinstance(result.get(key), dict):
                continue
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result
