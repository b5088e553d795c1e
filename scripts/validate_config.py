#!/usr/bin/env python3
"""Configuration validation script."""

import sys
from pathlib import Path
from typing import Optional

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from power_position.config.loader import ConfigLoader
from power_position.errors import ConfigurationError
from power_position.sources import create_trade_source


def main(config_path: Optional[str] = None) -> None:
    """Main validation function."""
    print("🔍 Validating Power Position configuration...")

    loader = ConfigLoader.create(Path(config_path) if config_path else None)
    print(f"\n📄 Settings file: {loader.config_path}"
          f"{'' if loader.config_path.exists() else ' (not found, using defaults)'}")

    try:
        settings = loader.load()
    except ConfigurationError as e:
        print(f"❌ Found {len(e.errors) or 1} validation errors:")
        for error in e.errors or [e]:
            print(f"  • {error}")
        print(f"\n❌ Configuration validation failed!")
        sys.exit(1)

    print(f"✅ Interval: {settings.scheduler.interval_minutes} minutes")
    print(f"✅ Output directory: {settings.output.output_dir}")

    print(f"\n📡 Checking trade source '{settings.source.name}'...")
    try:
        source = create_trade_source(settings.source.name, **settings.source.options)
        source.close()
    except ConfigurationError as e:
        print(f"❌ {e}")
        sys.exit(1)
    print(f"✅ Trade source can be created")

    print(f"\n🎉 All configuration validation passed!")
    sys.exit(0)


if __name__ == "__main__":
    main(sys.argv[1] if len(sys.argv) > 1 else None)
