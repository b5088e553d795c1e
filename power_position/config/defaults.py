"""Default configuration parameters for the power position service."""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class SchedulerSettings:
    """Extraction schedule and shutdown behaviour."""
    interval_minutes: float = 5.0              # Time between extraction cycles
    shutdown_timeout_seconds: float = 30.0     # Max wait for an in-flight cycle
    shutdown_poll_seconds: float = 0.1         # Poll step while waiting


@dataclass(frozen=True)
class OutputSettings:
    """Report output location."""
    output_dir: str = "reports"


@dataclass(frozen=True)
class SourceSettings:
    """Trade source selection."""
    name: str = "simulated"
    timeout_seconds: float = 60.0              # Fetch longer than this fails the cycle
    options: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class LoggingSettings:
    """Log output parameters."""
    level: str = "INFO"
    format_json: bool = False
    include_timestamp: bool = True
    include_caller: bool = False


@dataclass(frozen=True)
class AppSettings:
    """Complete service configuration."""
    scheduler: SchedulerSettings
    output: OutputSettings
    source: SourceSettings
    logging: LoggingSettings


def get_default_config() -> AppSettings:
    """Get the default configuration instance."""
    return AppSettings(
        scheduler=SchedulerSettings(),
        output=OutputSettings(),
        source=SourceSettings(),
        logging=LoggingSettings(),
    )
