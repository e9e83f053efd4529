#!/usr/bin/env python3
"""Configuration validation script."""

import sys
from pathlib import Path

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from ta_engine.config.loader import ConfigLoader
from ta_engine.config.validation import ParameterWarning, validate_config
from ta_engine.errors import ValidationError


def validate_symbol_config(loader: ConfigLoader, symbol: str) -> list[ParameterWarning]:
    """Validate the merged preset for a specific symbol."""
    return validate_config(loader.merge_config(symbol)).warnings


def main():
    """Main validation function."""
    print("🔍 Validating TA Engine configuration...")

    loader = ConfigLoader.create()
    all_valid = True

    print("\n⚙️  Validating engine.yaml...")
    try:
        settings = loader.load_engine_settings()
        print(f"✅ Engine settings are valid (cache max_entries={settings.cache.max_entries}, "
              f"max_retries={settings.retry.max_retries})")
    except ValidationError as e:
        print(f"❌ {e}")
        all_valid = False

    symbols = loader.preset_symbols()
    symbols.append("UNKNOWN-SYMBOL")  # Should use defaults

    for symbol in symbols:
        print(f"\n📊 Validating {symbol}...")
        warnings = validate_symbol_config(loader, symbol)

        if warnings:
            print(f"❌ Found {len(warnings)} corrections:")
            for warning in warnings:
                print(f"  • {warning.parameter}: {warning.reason} "
                      f"(value: {warning.original_value}, using: {warning.corrected_value})")
            all_valid = False
        else:
            print(f"✅ {symbol} configuration is valid")

    print("\n📋 Testing call-level overrides...")
    overrides = {"rsi": {"periods": [7, 14]}, "macd": {"fastPeriod": 8}}
    warnings = validate_config(loader.merge_config("TSLA", overrides)).warnings
    if warnings:
        print("❌ Call override validation failed:")
        for warning in warnings:
            print(f"  • {warning.parameter}: {warning.reason}")
        all_valid = False
    else:
        print("✅ Call override validation passed")

    if all_valid:
        print("\n🎉 All configuration validation passed!")
        sys.exit(0)
    else:
        print("\n❌ Configuration validation failed!")
        sys.exit(1)


if __name__ == "__main__":
    main()
