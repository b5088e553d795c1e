"""Configuration errors raised while the service starts up."""

from typing import Any, Optional


class ConfigurationError(Exception):
    """Invalid or missing settings. The process must not start."""

    def __init__(self, message: str, errors: Optional[list[Any]] = None):
        super().__init__(message)
        self.errors = errors or []
        self.recoverable = False

    def __str__(self) -> str:
        base = super().__str__()
        if not self.errors:
            return base
        details = "; ".join(str(err) for err in self.errors)
        return f"{base}: {details}"
