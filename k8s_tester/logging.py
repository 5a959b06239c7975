"""Logging helpers for femtologging integration.

Log levels in persisted configuration use the tester's historical names
(``debug``, ``info``, ``warn``, ``error``, ``panic``, ``fatal``); this module
maps them onto femtologging levels and emits pre-formatted messages.

Example:
>>> from k8s_tester.logging import get_logger, log_info
>>> logger = get_logger(__name__)
>>> log_info(logger, "Loaded %s", "config.yaml")

"""

from __future__ import annotations

import enum
import typing as typ

from femtologging import basicConfig, get_logger

DEFAULT_LOG_LEVEL = "info"


class LogLevel(enum.StrEnum):
    """Supported log levels for femtologging."""

    TRACE = "TRACE"
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARN = "WARN"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


# Historical names with no femtologging counterpart.
_LEVEL_ALIASES: dict[str, str] = {
    "PANIC": LogLevel.CRITICAL,
    "FATAL": LogLevel.CRITICAL,
}


def normalize_log_level(level: str | None) -> tuple[str, bool]:
    """Normalize a log level string and report invalid inputs.

    Parameters
    ----------
    level : str | None
        Raw log level string to normalize.

    Returns
    -------
    tuple[str, bool]
        The normalized log level and a flag indicating invalid input.

    """
    if not level:
        return ("INFO", True)

    normalized = level.strip().upper()
    if normalized in LogLevel.__members__:
        return (normalized, False)
    if normalized in _LEVEL_ALIASES:
        return (str(_LEVEL_ALIASES[normalized]), False)

    return ("INFO", True)


def configure_logging(level: str, *, force: bool = False) -> tuple[str, bool]:
    """Configure femtologging and return the normalized level.

    Parameters
    ----------
    level : str
        Raw log level string to normalize.
    force : bool, optional
        Whether to replace any existing handler configuration.

    Returns
    -------
    tuple[str, bool]
        The normalized log level and a flag indicating invalid input.

    """
    normalized, invalid = normalize_log_level(level)
    basicConfig(level=normalized, force=force)
    return (normalized, invalid)


class _SupportsLog(typ.Protocol):
    """Protocol for femtologging-compatible loggers."""

    def log(
        self,
        level: str,
        message: str,
        /,
        *,
        exc_info: object | None = None,
        stack_info: bool = False,
    ) -> str | None: ...


def _log_at_level(
    logger: _SupportsLog,
    level: str,
    template: str,
    *args: object,
    exc_info: object | None = None,
) -> None:
    """Format ``template`` and log it at the specified level."""
    logger.log(
        level,
        template % args,
        exc_info=exc_info,
        stack_info=False,
    )


def log_debug(logger: _SupportsLog, template: str, *args: object) -> None:
    """Log a DEBUG message with percent-style formatting."""
    _log_at_level(logger, "DEBUG", template, *args)


def log_info(logger: _SupportsLog, template: str, *args: object) -> None:
    """Log an INFO message with percent-style formatting."""
    _log_at_level(logger, "INFO", template, *args)


def log_warning(
    logger: _SupportsLog,
    template: str,
    *args: object,
    exc_info: object | None = None,
) -> None:
    """Log a WARNING message with percent-style formatting.

    Parameters
    ----------
    logger : _SupportsLog
        Logger that receives the formatted message.
    template : str
        Message template using percent-style placeholders.
    *args : object
        Values to interpolate into the template.
    exc_info : object | None, optional
        Exception information to attach to the log record.

    """
    _log_at_level(logger, "WARNING", template, *args, exc_info=exc_info)


__all__ = [
    "DEFAULT_LOG_LEVEL",
    "LogLevel",
    "configure_logging",
    "get_logger",
    "log_debug",
    "log_info",
    "log_warning",
    "normalize_log_level",
]
