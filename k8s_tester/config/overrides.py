"""Apply environment-variable overrides onto configuration records.

Each serialized field of a record can be overridden by an environment
variable named ``<prefix><FIELD_KEY>``, where ``FIELD_KEY`` is the field's
serialization key upper-cased with dashes turned into underscores. Values
are coerced according to the field's kind:

- strings are taken verbatim;
- booleans accept ``1``, ``t``, ``T``, ``TRUE``, ``true``, ``True`` and the
  matching false spellings;
- integers and unsigned integers are base-10 literals within 64 bits;
- durations use unit literals such as ``"5m"`` or ``"1h30m"``;
- floats are ASCII base-10 literals with an optional exponent, or the
  ``inf``, ``infinity`` and ``nan`` spellings;
- string lists are split on ``,``;
- string maps are JSON objects and are only allowed for whitelisted
  field names.

Unset or empty variables never clobber existing values. Nested records and
other composite kinds are not overridable and are skipped.

Usage
-----
>>> from k8s_tester.addons import JobsPiConfig
>>> cfg = JobsPiConfig()
>>> env = {"K8S_TESTER_JOBS_PI_COMPLETES": "3"}
>>> apply_overrides("K8S_TESTER_JOBS_PI_", cfg, env).completes
3

"""

from __future__ import annotations

import os
import re
import typing as typ

import msgspec

from k8s_tester.logging import get_logger, log_debug

from .durations import parse_duration
from .errors import ReadOnlyViolationError, TypeCoercionError, UnsupportedFieldKindError
from .fields import FieldDescriptor, FieldKind, iter_fields

if typ.TYPE_CHECKING:
    import collections.abc as cabc

logger = get_logger(__name__)

# Mapping-kind fields that may be overridden from the environment.
MAP_OVERRIDE_FIELDS: frozenset[str] = frozenset(
    {
        "tags",
        "node_selector",
        "deployment_node_selector",
        "deployment_node_selector_2048",
    }
)

_TRUE_LITERALS = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE_LITERALS = frozenset({"0", "f", "F", "FALSE", "false", "False"})

_INT_PATTERN = re.compile(r"[+-]?[0-9]+")
_UINT_PATTERN = re.compile(r"[0-9]+")
_FLOAT_PATTERN = re.compile(
    r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf|infinity|nan)",
    re.IGNORECASE,
)

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1
_UINT64_MAX = 2**64 - 1

_MapValue = dict[str, str]

_RecordT = typ.TypeVar("_RecordT", bound=msgspec.Struct)


class EnvironmentOverride(typ.NamedTuple):
    """One matched environment variable and the value it coerces to."""

    env_name: str
    field: FieldDescriptor
    value: object


def parse_bool(raw: str) -> bool:
    """Parse one of the accepted boolean spellings, raising ``ValueError``."""
    if raw in _TRUE_LITERALS:
        return True
    if raw in _FALSE_LITERALS:
        return False
    msg = "invalid boolean syntax"
    raise ValueError(msg)


def _parse_int(raw: str) -> int:
    if _INT_PATTERN.fullmatch(raw) is None:
        msg = "invalid integer syntax"
        raise ValueError(msg)
    value = int(raw)
    if not _INT64_MIN <= value <= _INT64_MAX:
        msg = "value out of range"
        raise ValueError(msg)
    return value


def _parse_uint(raw: str) -> int:
    if _UINT_PATTERN.fullmatch(raw) is None:
        msg = "invalid unsigned integer syntax"
        raise ValueError(msg)
    value = int(raw)
    if value > _UINT64_MAX:
        msg = "value out of range"
        raise ValueError(msg)
    return value


def _parse_float(raw: str) -> float:
    if _FLOAT_PATTERN.fullmatch(raw) is None:
        msg = "invalid float syntax"
        raise ValueError(msg)
    return float(raw)


def _parse_map(raw: str) -> _MapValue:
    try:
        return msgspec.json.decode(raw, type=_MapValue)
    except (msgspec.DecodeError, msgspec.ValidationError) as exc:
        raise ValueError(str(exc)) from exc


_PARSERS: dict[FieldKind, cabc.Callable[[str], object]] = {
    FieldKind.STRING: str,
    FieldKind.BOOL: parse_bool,
    FieldKind.INT: _parse_int,
    FieldKind.DURATION: parse_duration,
    FieldKind.UINT: _parse_uint,
    FieldKind.FLOAT: _parse_float,
    FieldKind.STRING_MAP: _parse_map,
}


def _coerce(descriptor: FieldDescriptor, env_name: str, raw: str) -> object:
    """Convert ``raw`` into a value for ``descriptor``'s kind."""
    if descriptor.kind is FieldKind.STRING_MAP and (
        descriptor.name not in MAP_OVERRIDE_FIELDS
    ):
        raise UnsupportedFieldKindError(env_name, descriptor.name)

    parser = _PARSERS[descriptor.kind]
    try:
        return parser(raw)
    except (ValueError, OverflowError) as exc:
        raise TypeCoercionError(env_name, descriptor.name, raw, str(exc)) from exc


def collect_overrides(
    prefix: str,
    record: msgspec.Struct,
    environ: cabc.Mapping[str, str] | None = None,
) -> cabc.Iterator[EnvironmentOverride]:
    """Yield the overrides the environment requests for ``record``.

    Nothing is written to ``record``; this is the dry-run half of
    :func:`apply_overrides`. Errors are raised lazily, when the offending
    field is reached.

    Parameters
    ----------
    prefix : str
        Environment variable prefix, e.g. ``"K8S_TESTER_JOBS_PI_"``.
    record : msgspec.Struct
        Configuration record whose fields are matched.
    environ : Mapping[str, str] | None, optional
        Environment to read. Defaults to ``os.environ``.

    Yields
    ------
    EnvironmentOverride
        One entry per set, non-empty variable targeting an overridable field.

    Raises
    ------
    ReadOnlyViolationError
        If a variable targets a read-only field.
    UnsupportedFieldKindError
        If a variable targets a mapping field outside the whitelist.
    TypeCoercionError
        If a variable's value cannot be parsed for its field kind.

    """
    env = os.environ if environ is None else environ
    for descriptor in iter_fields(record):
        env_name = f"{prefix}{descriptor.env_key}"
        raw = env.get(env_name, "")
        if not raw:
            continue
        if descriptor.read_only:
            raise ReadOnlyViolationError(env_name, descriptor.name, raw)
        if descriptor.kind is FieldKind.OTHER:
            continue
        if descriptor.kind is FieldKind.STRING_LIST:
            yield EnvironmentOverride(env_name, descriptor, raw.split(","))
            continue
        value = _coerce(descriptor, env_name, raw)
        yield EnvironmentOverride(env_name, descriptor, value)


def apply_overrides(
    prefix: str,
    record: _RecordT,
    environ: cabc.Mapping[str, str] | None = None,
) -> _RecordT:
    """Write environment overrides into ``record`` in place.

    Overrides are applied as they are discovered. On the first error the pass
    stops; fields written earlier in the pass keep their new values and the
    caller is expected to abort the run.

    Parameters
    ----------
    prefix : str
        Environment variable prefix, e.g. ``"K8S_TESTER_"``.
    record : msgspec.Struct
        Configuration record to update.
    environ : Mapping[str, str] | None, optional
        Environment to read. Defaults to ``os.environ``.

    Returns
    -------
    msgspec.Struct
        The same ``record`` instance, for call chaining.

    Raises
    ------
    ReadOnlyViolationError
        If a variable targets a read-only field.
    UnsupportedFieldKindError
        If a variable targets a mapping field outside the whitelist.
    TypeCoercionError
        If a variable's value cannot be parsed for its field kind.

    """
    record_overrides(prefix, record, environ)
    return record


def record_overrides(
    prefix: str,
    record: msgspec.Struct,
    environ: cabc.Mapping[str, str] | None = None,
) -> tuple[EnvironmentOverride, ...]:
    """Apply overrides like :func:`apply_overrides` and return what was applied."""
    applied: list[EnvironmentOverride] = []
    for override in collect_overrides(prefix, record, environ):
        override.field.set(record, override.value)
        applied.append(override)
        log_debug(logger, "Applied override %s", override.env_name)
    return tuple(applied)


__all__ = [
    "MAP_OVERRIDE_FIELDS",
    "EnvironmentOverride",
    "apply_overrides",
    "collect_overrides",
    "parse_bool",
    "record_overrides",
]
