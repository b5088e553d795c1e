"""Configuration loader with layered parameter precedence."""

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import yaml

from ..errors import ConfigurationError
from .defaults import AppSettings, get_default_config
from .validation import build_settings

SETTINGS_FILE = "settings.yaml"
ENV_PREFIX = "POWER_POSITION_"

# Environment variable suffix -> (section, key)
ENV_OVERRIDES = {
    "INTERVAL_MINUTES": ("scheduler", "interval_minutes"),
    "SHUTDOWN_TIMEOUT_SECONDS": ("scheduler", "shutdown_timeout_seconds"),
    "OUTPUT_DIR": ("output", "output_dir"),
    "SOURCE": ("source", "name"),
    "SOURCE_TIMEOUT_SECONDS": ("source", "timeout_seconds"),
    "LOG_LEVEL": ("logging", "level"),
    "LOG_JSON": ("logging", "format_json"),
}

# Taken verbatim, never parsed as YAML scalars
STRING_OVERRIDES = {"OUTPUT_DIR", "SOURCE", "LOG_LEVEL"}


@dataclass(frozen=True)
class ConfigLoader:
    """Manages configuration loading with layered precedence."""

    config_path: Path
    defaults: AppSettings

    @classmethod
    def create(cls, config_path: Optional[Path] = None) -> "ConfigLoader":
        """Create a ConfigLoader instance."""
        if config_path is None:
            config_path = Path(__file__).parent.parent.parent / "config" / SETTINGS_FILE

        return cls(
            config_path=Path(config_path),
            defaults=get_default_config(),
        )

    def load_file_config(self) -> dict[str, Any]:
        """Load settings from the YAML file, empty when the file is absent."""
        if not self.config_path.exists():
            return {}

        try:
            with open(self.config_path, encoding="utf-8") as f:
                file_config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Cannot parse {self.config_path}: {e}") from e

        if file_config is None:
            return {}
        if not isinstance(file_config, dict):
            raise ConfigurationError(
                f"{self.config_path} must contain a mapping at top level"
            )
        return file_config

    def load_env_config(self, environ: Optional[Mapping[str, str]] = None) -> dict[str, Any]:
        """Collect ``POWER_POSITION_*`` overrides from the environment."""
        if environ is None:
            environ = os.environ

        config: dict[str, Any] = {}
        for suffix, (section, key) in ENV_OVERRIDES.items():
            raw = environ.get(f"{ENV_PREFIX}{suffix}")
            if raw is None:
                continue
            if suffix in STRING_OVERRIDES or not raw.strip():
                value: Any = raw
            else:
                # YAML scalars give numbers and booleans their natural types
                try:
                    value = yaml.safe_load(raw)
                except yaml.YAMLError:
                    value = raw
            config.setdefault(section, {})[key] = value
        return config

    def merge_config(
        self,
        overrides: Optional[dict[str, Any]] = None,
        environ: Optional[Mapping[str, str]] = None
    ) -> dict[str, Any]:
        """
        Merge configuration layers.

        Priority order:
        1. Explicit overrides such as command-line options (highest priority)
        2. Environment variables
        3. Settings file
        4. Defaults (lowest priority)
        """
        config = self._dataclass_to_dict(self.defaults)
        config = self._deep_merge(config, self.load_file_config())
        config = self._deep_merge(config, self.load_env_config(environ))

        if overrides:
            config = self._deep_merge(config, overrides)

        return config

    def load(
        self,
        overrides: Optional[dict[str, Any]] = None,
        environ: Optional[Mapping[str, str]] = None
    ) -> AppSettings:
        """
        Load and validate settings.

        Raises:
            ConfigurationError: If the merged configuration is invalid
        """
        return build_settings(self.merge_config(overrides, environ))

    def _dataclass_to_dict(self, obj: Any) -> dict[str, Any]:
        """Convert nested dataclasses to dictionary."""
        if hasattr(obj, '__dataclass_fields__'):
            result = {}
            for field_name in obj.__dataclass_fields__:
                value = getattr(obj, field_name)
                if hasattr(value, '__dataclass_fields__'):
                    result[field_name] = self._dataclass_to_dict(value)
                elif isinstance(value, dict):
                    result[field_name] = dict(value)
                else:
                    result[field_name] = value
            return result
        return obj  # type: ignore[no-any-return]

    def _deep_merge(self, base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        """Deep merge two dictionaries."""
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result
