"""Unit tests for YAML configuration loading."""

from pathlib import Path

import pytest

from ta_engine.config import ConfigLoader, get_default_settings, validate_config
from ta_engine.errors import ValidationError


@pytest.fixture
def config_dir(tmp_path: Path) -> Path:
    (tmp_path / "symbols.yaml").write_text(
        "symbols:\n"
        "  TSLA:\n"
        "    rsi:\n"
        "      overbought: 75\n"
        "      oversold: 25\n"
        "    bollingerBands:\n"
        "      standardDeviations: 2.5\n"
    )
    return tmp_path


class TestEngineSettings:
    """Test suite for engine.yaml loading."""

    def test_missing_file_uses_defaults(self, tmp_path: Path) -> None:
        """Test that no engine.yaml means default settings."""
        loader = ConfigLoader.create(tmp_path)
        assert loader.load_engine_settings() == get_default_settings()

    def test_repository_file_matches_defaults(self) -> None:
        """Test that the shipped engine.yaml mirrors the code defaults."""
        loader = ConfigLoader.create()
        assert isinstance(loader.config_dir, Path)
        assert loader.load_engine_settings() == get_default_settings()

    def test_partial_override(self, tmp_path: Path) -> None:
        """Test that engine.yaml values override only what they name."""
        (tmp_path / "engine.yaml").write_text(
            "engine:\n  cache:\n    max_entries: 50\n  retry:\n    retry_delay: 0.25\n"
        )
        settings = ConfigLoader.create(tmp_path).load_engine_settings()
        assert settings.cache.max_entries == 50
        assert settings.cache.price_ttl == 900.0
        assert settings.retry.retry_delay == 0.25
        assert settings.retry.max_retries == 3

    def test_unknown_keys_ignored(self, tmp_path: Path) -> None:
        """Test that unrecognized settings do not break loading."""
        (tmp_path / "engine.yaml").write_text("engine:\n  cache:\n    flavour: lru\n")
        assert ConfigLoader.create(tmp_path).load_engine_settings() == get_default_settings()

    def test_empty_section_uses_defaults(self, tmp_path: Path) -> None:
        """Test that a section with no keys leaves its defaults in place."""
        (tmp_path / "engine.yaml").write_text("engine:\n  cache:\n  retry:\n    max_retries: 5\n")
        settings = ConfigLoader.create(tmp_path).load_engine_settings()
        assert settings.cache == get_default_settings().cache
        assert settings.retry.max_retries == 5

    def test_non_mapping_section_raises(self, tmp_path: Path) -> None:
        """Test that a scalar section is reported instead of crashing."""
        (tmp_path / "engine.yaml").write_text("engine:\n  cache: 5\n")
        with pytest.raises(ValidationError) as exc_info:
            ConfigLoader.create(tmp_path).load_engine_settings()
        assert exc_info.value.field == "cache"

    def test_non_mapping_engine_block_raises(self, tmp_path: Path) -> None:
        """Test that a scalar engine block is reported instead of crashing."""
        (tmp_path / "engine.yaml").write_text("engine: fast\n")
        with pytest.raises(ValidationError) as exc_info:
            ConfigLoader.create(tmp_path).load_engine_settings()
        assert exc_info.value.field == "engine"

    def test_invalid_settings_raise(self, tmp_path: Path) -> None:
        """Test that out-of-range settings are rejected with every issue listed."""
        (tmp_path / "engine.yaml").write_text(
            "engine:\n  cache:\n    max_entries: -1\n  retry:\n    retry_delay: -2\n"
        )
        with pytest.raises(ValidationError) as exc_info:
            ConfigLoader.create(tmp_path).load_engine_settings()
        assert exc_info.value.field == "cache.max_entries"
        assert len(exc_info.value.context["issues"]) == 2


class TestSymbolPresets:
    """Test suite for per-symbol presets and call overrides."""

    def test_symbol_preset(self, config_dir: Path) -> None:
        """Test that presets are normalized to attribute names."""
        loader = ConfigLoader.create(config_dir)
        assert loader.load_symbol_config("tsla") == {
            "rsi": {"overbought": 75, "oversold": 25},
            "bollinger_bands": {"standard_deviations": 2.5},
        }

    def test_preset_symbols(self, config_dir: Path) -> None:
        """Test listing the symbols that carry a preset."""
        assert ConfigLoader.create(config_dir).preset_symbols() == ["TSLA"]
        assert ConfigLoader.create(config_dir / "missing").preset_symbols() == []

    def test_unknown_symbol(self, config_dir: Path) -> None:
        """Test that a symbol without a preset gets an empty partial config."""
        assert ConfigLoader.create(config_dir).merge_config("AAPL") == {}

    def test_call_overrides_take_precedence(self, config_dir: Path) -> None:
        """Test that per-call values win over the preset field by field."""
        loader = ConfigLoader.create(config_dir)
        merged = loader.merge_config("TSLA", {"rsi": {"overbought": 80}, "macd": {"fastPeriod": 8}})
        assert merged["rsi"] == {"overbought": 80, "oversold": 25}
        assert merged["macd"] == {"fast_period": 8}
        assert merged["bollinger_bands"] == {"standard_deviations": 2.5}

    def test_merged_config_validates(self, config_dir: Path) -> None:
        """Test the full precedence chain through validation."""
        merged = ConfigLoader.create(config_dir).merge_config("TSLA", {"rsi": {"overbought": 80}})
        result = validate_config(merged)
        assert result.config.rsi.overbought == 80.0
        assert result.config.rsi.oversold == 25.0
        assert result.config.bollinger_bands.standard_deviations == 2.5
        assert result.config.macd.fast_period == 12
        assert result.has_custom_settings is True

    def test_repository_presets(self) -> None:
        """Test that the shipped symbol presets validate cleanly."""
        loader = ConfigLoader.create()
        for symbol in ("TSLA", "SPY", "BTC-USD"):
            result = validate_config(loader.merge_config(symbol))
            assert result.warnings == []
            assert result.has_custom_settings is True
