"""Exceptions raised by the configuration core.

Every error carries enough context (variable name, field name, offending
value or path) to diagnose a failure without re-running the tester. None of
them are retried internally.
"""

from __future__ import annotations

import typing as typ

if typ.TYPE_CHECKING:
    from pathlib import Path


class ConfigError(Exception):
    """Base exception for all configuration errors.

    This provides a single catch point for callers that abort a run on any
    configuration failure.
    """


class ReadOnlyViolationError(ConfigError):
    """Raised when the environment tries to set a computed field.

    Attributes
    ----------
    env_name
        Environment variable that targeted the read-only field.
    field_name
        Attribute name of the read-only field.

    """

    def __init__(self, env_name: str, field_name: str, value: str) -> None:
        """Initialise the error from the offending variable."""
        self.env_name = env_name
        self.field_name = field_name
        self.value = value
        msg = (
            f"'{env_name}={value}' targets read-only field {field_name!r}; "
            "it must not be set"
        )
        super().__init__(msg)


class TypeCoercionError(ConfigError):
    """Raised when an environment value cannot be parsed for its field kind.

    Attributes
    ----------
    env_name
        Environment variable holding the malformed value.
    field_name
        Attribute name of the target field.
    value
        The raw string that failed to parse.
    reason
        Parser detail describing the failure.

    """

    def __init__(
        self,
        env_name: str,
        field_name: str,
        value: str,
        reason: str,
    ) -> None:
        """Initialise the error with full parse context."""
        self.env_name = env_name
        self.field_name = field_name
        self.value = value
        self.reason = reason
        msg = (
            f"failed to parse {value!r} (field name {field_name!r}, "
            f"environment variable {env_name!r}): {reason}"
        )
        super().__init__(msg)


class UnsupportedFieldKindError(ConfigError):
    """Raised when a mapping field outside the override whitelist is set."""

    def __init__(self, env_name: str, field_name: str) -> None:
        """Initialise the error for the rejected mapping field."""
        self.env_name = env_name
        self.field_name = field_name
        msg = (
            f"field {field_name!r} does not support mapping overrides "
            f"(environment variable {env_name!r})"
        )
        super().__init__(msg)


class EmptyConfigPathError(ConfigError):
    """Raised when saving a tree that has no ``config_path``."""

    def __init__(self) -> None:
        """Initialise the error with a fixed message."""
        super().__init__("empty config path")


class PathResolutionError(ConfigError):
    """Raised when a path cannot be made absolute."""

    def __init__(self, path: str | Path, detail: str) -> None:
        """Initialise the error with the unresolved path."""
        self.path = path
        super().__init__(f"failed to resolve absolute path for {str(path)!r}: {detail}")


class SerializationError(ConfigError):
    """Raised when the tree cannot be encoded to YAML."""

    @classmethod
    def from_exception(cls, exc: BaseException) -> SerializationError:
        """Create error wrapping an encoder failure.

        Parameters
        ----------
        exc
            The exception raised by the encoder.

        Returns
        -------
        SerializationError
            Error describing the encoding failure.

        """
        return cls(f"failed to encode configuration: {exc}")


class _PathError(ConfigError):
    """Shared shape for I/O errors tied to one file."""

    action: typ.ClassVar[str] = "access"

    def __init__(self, path: str | Path, detail: str) -> None:
        """Initialise the error with the file path and cause."""
        self.path = path
        self.detail = detail
        super().__init__(f"failed to {self.action} {str(path)!r}: {detail}")


class ReadError(_PathError):
    """Raised when the configuration file cannot be read."""

    action = "read"


class WriteError(_PathError):
    """Raised when the configuration file cannot be written."""

    action = "write"


class DecodeError(_PathError):
    """Raised when the configuration file is not a valid tree document."""

    action = "decode"


class UnknownFieldError(DecodeError):
    """Raised when the file contains a key the schema does not define.

    Attributes
    ----------
    field_name
        The unrecognised key, when it could be extracted from the decoder
        message.

    """

    def __init__(
        self, path: str | Path, detail: str, field_name: str | None = None
    ) -> None:
        """Initialise the error with the unrecognised key."""
        self.field_name = field_name
        super().__init__(path, detail)


class ConfigValidationError(ConfigError):
    """Raised when a tree fails semantic validation."""

    def __init__(self, issues: list[str]) -> None:
        """Capture validation issues whilst preserving the aggregated message."""
        message = "\n".join(issues)
        super().__init__(message)
        self.issues = issues


__all__ = [
    "ConfigError",
    "ConfigValidationError",
    "DecodeError",
    "EmptyConfigPathError",
    "PathResolutionError",
    "ReadError",
    "ReadOnlyViolationError",
    "SerializationError",
    "TypeCoercionError",
    "UnknownFieldError",
    "UnsupportedFieldKindError",
    "WriteError",
]
