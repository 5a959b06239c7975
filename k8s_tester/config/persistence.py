"""File primitives for reading and writing the configuration document.

Only :mod:`k8s_tester.config.tree` uses this module. Every primitive turns
its low-level failure into a typed :class:`~k8s_tester.config.errors.ConfigError`
and performs no retries.
"""

from __future__ import annotations

import contextlib
import io
import os
import re
import tempfile
import typing as typ
from pathlib import Path

import msgspec
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .errors import (
    DecodeError,
    PathResolutionError,
    ReadError,
    SerializationError,
    UnknownFieldError,
    WriteError,
)

YAML_VERSION = (1, 2)

# Owner read/write only.
FILE_MODE = 0o600

_UNKNOWN_FIELD = re.compile(r"unknown field `([^`]+)`")

_T = typ.TypeVar("_T")


def resolve_absolute(path: str | os.PathLike[str]) -> Path:
    """Return ``path`` as a normalized absolute path.

    Raises
    ------
    PathResolutionError
        If the current working directory cannot be determined.

    """
    try:
        return Path(os.path.abspath(path))  # noqa: PTH100 - keeps symlinks
    except OSError as exc:
        raise PathResolutionError(os.fspath(path), str(exc)) from exc


def read_bytes(path: Path) -> bytes:
    """Read the whole file at ``path``.

    Raises
    ------
    ReadError
        If the file cannot be read.

    """
    try:
        return path.read_bytes()
    except OSError as exc:
        raise ReadError(path, str(exc)) from exc


def write_bytes(path: Path, data: bytes, *, mode: int = FILE_MODE) -> None:
    """Atomically replace ``path`` with ``data``.

    The data is written to a temporary file in the destination directory,
    flushed to disk and then renamed over ``path``, so readers observe either
    the previous document or the new one.

    Raises
    ------
    WriteError
        If any step of the write fails.

    """
    tmp_name: str | None = None
    try:
        fd, tmp_name = tempfile.mkstemp(
            dir=path.parent, prefix=f".{path.name}.", suffix=".tmp"
        )
        with os.fdopen(fd, "wb") as handle:
            os.fchmod(handle.fileno(), mode)
            handle.write(data)
            handle.flush()
            os.fsync(handle.fileno())
        Path(tmp_name).replace(path)
        tmp_name = None
    except OSError as exc:
        raise WriteError(path, str(exc)) from exc
    finally:
        if tmp_name is not None:
            with contextlib.suppress(OSError):
                Path(tmp_name).unlink()


def _loader() -> YAML:
    yaml = YAML(typ="safe")
    yaml.version = YAML_VERSION
    yaml.allow_duplicate_keys = False
    return yaml


def _dumper() -> YAML:
    yaml = YAML(typ="safe")
    yaml.default_flow_style = False
    yaml.sort_base_mapping_type_on_output = False
    return yaml


def encode(record: msgspec.Struct) -> bytes:
    """Encode ``record`` as a YAML document.

    Raises
    ------
    SerializationError
        If the record contains values that cannot be represented.

    """
    try:
        builtins = msgspec.to_builtins(record)
        stream = io.StringIO()
        _dumper().dump(builtins, stream)
    except (TypeError, ValueError, msgspec.EncodeError, YAMLError) as exc:
        raise SerializationError.from_exception(exc) from exc
    return stream.getvalue().encode("utf-8")


def decode(data: bytes, record_type: type[_T], *, path: str | Path) -> _T:
    """Decode a YAML document into ``record_type`` in strict mode.

    Parameters
    ----------
    data : bytes
        Raw document bytes.
    record_type : type
        Target ``msgspec.Struct`` type. Unknown keys are rejected.
    path : str | Path
        Source path, used for error context only.

    Raises
    ------
    UnknownFieldError
        If the document contains a key the schema does not define.
    DecodeError
        If the document is not valid YAML or does not match the schema.

    """
    try:
        loaded = _loader().load(data.decode("utf-8"))
    except (UnicodeDecodeError, YAMLError) as exc:
        raise DecodeError(path, f"failed to parse YAML: {exc}") from exc

    if loaded is None:
        raise DecodeError(path, "document is empty")

    try:
        return msgspec.convert(loaded, type=record_type)
    except msgspec.ValidationError as exc:
        detail = str(exc)
        match = _UNKNOWN_FIELD.search(detail)
        if match is not None:
            raise UnknownFieldError(path, detail, match.group(1)) from exc
        raise DecodeError(path, f"schema validation failed: {detail}") from exc


__all__ = [
    "FILE_MODE",
    "decode",
    "encode",
    "read_bytes",
    "resolve_absolute",
    "write_bytes",
]
