"""Configuration validation utilities."""

from dataclasses import dataclass
from typing import Any

from ..errors import ConfigurationError
from .defaults import (
    AppSettings,
    LoggingSettings,
    OutputSettings,
    SchedulerSettings,
    SourceSettings,
)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class ValidationError:
    """Represents a configuration validation error."""
    field: str
    message: str
    value: Any

    def __str__(self) -> str:
        return f"{self.field}: {self.message} (got: {self.value!r})"


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class ConfigValidator:
    """Validates configuration parameters."""

    @staticmethod
    def validate_scheduler_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate scheduler parameters."""
        errors = []

        # Validate interval_minutes
        value = params.get("interval_minutes")
        if not _is_number(value) or value <= 0:
            errors.append(ValidationError(
                field="scheduler.interval_minutes",
                message="Must be a number greater than zero",
                value=value
            ))

        # Validate shutdown_timeout_seconds
        if "shutdown_timeout_seconds" in params:
            value = params["shutdown_timeout_seconds"]
            if not _is_number(value) or value < 0:
                errors.append(ValidationError(
                    field="scheduler.shutdown_timeout_seconds",
                    message="Must be a non-negative number",
                    value=value
                ))

        # Validate shutdown_poll_seconds
        if "shutdown_poll_seconds" in params:
            value = params["shutdown_poll_seconds"]
            if not _is_number(value) or value <= 0:
                errors.append(ValidationError(
                    field="scheduler.shutdown_poll_seconds",
                    message="Must be a positive number",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_output_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate output parameters."""
        errors = []

        value = params.get("output_dir")
        if not isinstance(value, str) or not value.strip():
            errors.append(ValidationError(
                field="output.output_dir",
                message="Must be a non-blank path",
                value=value
            ))

        return errors

    @staticmethod
    def validate_source_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate trade source parameters."""
        errors = []

        value = params.get("name")
        if not isinstance(value, str) or not value.strip():
            errors.append(ValidationError(
                field="source.name",
                message="Must be a non-blank string",
                value=value
            ))

        if "timeout_seconds" in params:
            value = params["timeout_seconds"]
            if not _is_number(value) or value <= 0:
                errors.append(ValidationError(
                    field="source.timeout_seconds",
                    message="Must be a positive number",
                    value=value
                ))

        if "options" in params and not isinstance(params["options"], dict):
            errors.append(ValidationError(
                field="source.options",
                message="Must be a mapping",
                value=params["options"]
            ))

        return errors

    @staticmethod
    def validate_logging_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate logging parameters."""
        errors = []

        value = params.get("level")
        if not isinstance(value, str) or value.upper() not in LOG_LEVELS:
            errors.append(ValidationError(
                field="logging.level",
                message=f"Must be one of {', '.join(LOG_LEVELS)}",
                value=value
            ))

        for flag in ("format_json", "include_timestamp", "include_caller"):
            if flag in params and not isinstance(params[flag], bool):
                errors.append(ValidationError(
                    field=f"logging.{flag}",
                    message="Must be a boolean",
                    value=params[flag]
                ))

        return errors

    @staticmethod
    def validate_config(config: dict[str, Any]) -> list[ValidationError]:
        """Validate complete configuration."""
        errors = []

        for section, validate in (
            ("scheduler", ConfigValidator.validate_scheduler_params),
            ("output", ConfigValidator.validate_output_params),
            ("source", ConfigValidator.validate_source_params),
            ("logging", ConfigValidator.validate_logging_params),
        ):
            params = config.get(section)
            if not isinstance(params, dict):
                errors.append(ValidationError(
                    field=section,
                    message="Section is missing or not a mapping",
                    value=params
                ))
                continue
            errors.extend(validate(params))

        return errors


def _known(params: dict[str, Any], settings_cls: type) -> dict[str, Any]:
    return {k: v for k, v in params.items() if k in settings_cls.__dataclass_fields__}


def build_settings(config: dict[str, Any]) -> AppSettings:
    """
    Validate a merged configuration and build typed settings.

    Unknown keys are ignored.

    Raises:
        ConfigurationError: If any parameter is invalid
    """
    errors = ConfigValidator.validate_config(config)
    if errors:
        raise ConfigurationError("Invalid configuration", errors=errors)

    logging_params = _known(config["logging"], LoggingSettings)
    logging_params["level"] = logging_params["level"].upper()

    return AppSettings(
        scheduler=SchedulerSettings(**_known(config["scheduler"], SchedulerSettings)),
        output=OutputSettings(**_known(config["output"], OutputSettings)),
        source=SourceSettings(**_known(config["source"], SourceSettings)),
        logging=LoggingSettings(**logging_params),
    )
