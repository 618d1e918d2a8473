"""Error hierarchy for stageconf."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

__all__ = [
    "StageConfigError",
    "MissingConfigurationError",
    "ConversionError",
    "ConfigError",
    "ConfigNotFoundError",
    "StageFileInvalidError",
    "StageNotFoundError",
    "ErrorCodes",
]


class StageConfigError(Exception):
    """Base error for all stageconf errors."""

    def __init__(
        self,
        code: str,
        message: str,
        details: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details: dict[str, Any] = details or {}
        self.cause = cause
        self.timestamp = datetime.now(timezone.utc).isoformat()

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


class MissingConfigurationError(StageConfigError):
    """Raised when a key resolves to no value and no usable default."""

    def __init__(self, key: str, **kwargs: Any) -> None:
        super().__init__(
            code="CONFIG_MISSING",
            message=f"Stage config '{key}' is missing",
            details={"key": key},
            **kwargs,
        )

    @property
    def key(self) -> str:
        """The configuration key that could not be resolved."""
        return self.details["key"]


class ConversionError(StageConfigError):
    """Raised when a raw string cannot be converted to the target type."""

    def __init__(self, key: str, target: str, value: str, **kwargs: Any) -> None:
        cause = kwargs.get("cause")
        reason = f": {cause}" if cause is not None else ""
        super().__init__(
            code="CONFIG_CONVERSION_FAILED",
            message=f"Cannot convert stage config '{key}' value {value!r} to {target}{reason}",
            details={"key": key, "target": target, "value": value},
            **kwargs,
        )

    @property
    def key(self) -> str:
        """The configuration key whose value failed to convert."""
        return self.details["key"]

    @property
    def target(self) -> str:
        """Name of the requested target type."""
        return self.details["target"]

    @property
    def value(self) -> str:
        """The raw string that failed to convert."""
        return self.details["value"]


class ConfigError(StageConfigError):
    """Raised when the resolver is misused, e.g. with an unsupported target type."""

    def __init__(self, message: str, **kwargs: Any) -> None:
        super().__init__(code="CONFIG_INVALID", message=message, **kwargs)


class ConfigNotFoundError(StageConfigError):
    """Raised when a stage file cannot be found."""

    def __init__(self, config_path: str, **kwargs: Any) -> None:
        super().__init__(
            code="CONFIG_NOT_FOUND",
            message=f"Configuration file not found: {config_path}",
            details={"config_path": config_path},
            **kwargs,
        )


class StageFileInvalidError(StageConfigError):
    """Raised when a stage file has parse errors or an invalid structure."""

    def __init__(self, *, source: str, reason: str, **kwargs: Any) -> None:
        super().__init__(
            code="STAGE_FILE_INVALID",
            message=f"Invalid stage file '{source}': {reason}",
            details={"source": source, "reason": reason},
            **kwargs,
        )


class StageNotFoundError(StageConfigError):
    """Raised when the requested stage is not defined."""

    def __init__(self, stage_name: str, available: list[str], **kwargs: Any) -> None:
        super().__init__(
            code="STAGE_NOT_FOUND",
            message=f"Stage not found: {stage_name} (available: {', '.join(available) or '<none>'})",
            details={"stage_name": stage_name, "available": available},
            **kwargs,
        )

    @property
    def stage_name(self) -> str:
        """The stage name that was requested."""
        return self.details["stage_name"]


class ErrorCodes:
    """All stageconf error codes as constants.

    Example:
        if error.code == ErrorCodes.CONFIG_MISSING:
            use_fallback()
    """

    CONFIG_MISSING = "CONFIG_MISSING"
    CONFIG_CONVERSION_FAILED = "CONFIG_CONVERSION_FAILED"
    CONFIG_INVALID = "CONFIG_INVALID"
    CONFIG_NOT_FOUND = "CONFIG_NOT_FOUND"
    STAGE_FILE_INVALID = "STAGE_FILE_INVALID"
    STAGE_NOT_FOUND = "STAGE_NOT_FOUND"

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError("ErrorCodes is immutable")
