"""Field descriptor tables for configuration records.

A configuration record's schema is its ``msgspec.Struct`` definition. This
module turns that definition into a table of :class:`FieldDescriptor`
entries (serialization key, environment key, kind and read-only marker)
so the override engine never has to special-case an individual record.

Tables are derived once per record type and cached; iterating a record's
fields has no side effects and can be repeated at will.

Example:
>>> from k8s_tester.addons import JobsPiConfig
>>> [d.env_key for d in iter_fields(JobsPiConfig())][:2]
['ENABLE', 'MINIMUM_NODES']

"""

from __future__ import annotations

import dataclasses
import enum
import functools
import typing as typ

import msgspec
import msgspec.inspect as mi

from k8s_tester.schema import READ_ONLY_FLAG

if typ.TYPE_CHECKING:
    import collections.abc as cabc

_OMIT_EMPTY_QUALIFIER = ",omitempty"


class FieldKind(enum.StrEnum):
    """Primitive kinds the override engine knows how to coerce."""

    STRING = "string"
    BOOL = "bool"
    INT = "int"
    DURATION = "duration"
    UINT = "uint"
    FLOAT = "float"
    STRING_LIST = "string_list"
    STRING_MAP = "string_map"
    OTHER = "other"


@dataclasses.dataclass(frozen=True, slots=True)
class FieldDescriptor:
    """Metadata for one serialized field of a configuration record.

    Attributes
    ----------
    name
        Python attribute name on the record.
    key
        Serialization key used in the persisted document.
    env_key
        Suffix used to build the field's environment variable name.
    kind
        Primitive kind driving type coercion.
    read_only
        Whether the field is computed state that must not be overridden.

    """

    name: str
    key: str
    env_key: str
    kind: FieldKind
    read_only: bool = False

    def get(self, record: msgspec.Struct) -> object:
        """Return the field's current value on ``record``."""
        return getattr(record, self.name)

    def set(self, record: msgspec.Struct, value: object) -> None:
        """Write ``value`` into the field on ``record`` in place."""
        setattr(record, self.name, value)


def env_key(key: str) -> str:
    """Derive the environment-variable suffix for a serialization key.

    Parameters
    ----------
    key : str
        Serialization key, optionally carrying an ``,omitempty`` qualifier.

    Returns
    -------
    str
        The key upper-cased with dashes replaced by underscores.

    """
    return key.replace(_OMIT_EMPTY_QUALIFIER, "").replace("-", "_").upper()


def _is_unsigned(int_type: mi.IntType) -> bool:
    if int_type.ge is not None and int_type.ge >= 0:
        return True
    return int_type.gt is not None and int_type.gt >= -1


def _classify(tp: mi.Type) -> tuple[FieldKind, bool]:
    """Resolve a msgspec type node into its kind and read-only marker."""
    read_only = False
    while isinstance(tp, mi.Metadata):
        if tp.extra and tp.extra.get(READ_ONLY_FLAG):
            read_only = True
        tp = tp.type

    if isinstance(tp, mi.UnionType):
        members = [t for t in tp.types if not isinstance(t, mi.NoneType)]
        if len(members) != 1:
            return (FieldKind.OTHER, read_only)
        kind, nested_read_only = _classify(members[0])
        return (kind, read_only or nested_read_only)

    return (_primitive_kind(tp), read_only)


def _primitive_kind(tp: mi.Type) -> FieldKind:  # noqa: PLR0911
    if isinstance(tp, mi.StrType):
        return FieldKind.STRING
    if isinstance(tp, mi.BoolType):
        return FieldKind.BOOL
    if isinstance(tp, mi.IntType):
        return FieldKind.UINT if _is_unsigned(tp) else FieldKind.INT
    if isinstance(tp, mi.TimeDeltaType):
        return FieldKind.DURATION
    if isinstance(tp, mi.FloatType):
        return FieldKind.FLOAT
    if isinstance(tp, mi.ListType) and isinstance(tp.item_type, mi.StrType):
        return FieldKind.STRING_LIST
    if (
        isinstance(tp, mi.DictType)
        and isinstance(tp.key_type, mi.StrType)
        and isinstance(tp.value_type, mi.StrType)
    ):
        return FieldKind.STRING_MAP
    return FieldKind.OTHER


@functools.cache
def field_table(record_type: type[msgspec.Struct]) -> tuple[FieldDescriptor, ...]:
    """Build the descriptor table for a record type.

    Parameters
    ----------
    record_type : type[msgspec.Struct]
        The configuration record class.

    Returns
    -------
    tuple[FieldDescriptor, ...]
        One descriptor per serialized field, in declaration order.

    Raises
    ------
    TypeError
        If ``record_type`` is not a ``msgspec.Struct`` subclass.

    """
    info = mi.type_info(record_type)
    if not isinstance(info, mi.StructType):
        msg = f"expected a msgspec.Struct type, got {record_type!r}"
        raise TypeError(msg)

    descriptors: list[FieldDescriptor] = []
    for field in info.fields:
        if not field.encode_name:
            continue
        kind, read_only = _classify(field.type)
        descriptors.append(
            FieldDescriptor(
                name=field.name,
                key=field.encode_name,
                env_key=env_key(field.encode_name),
                kind=kind,
                read_only=read_only,
            )
        )
    return tuple(descriptors)


def iter_fields(record: msgspec.Struct) -> cabc.Iterator[FieldDescriptor]:
    """Yield the field descriptors of ``record`` in declaration order."""
    yield from field_table(type(record))


__all__ = ["FieldDescriptor", "FieldKind", "env_key", "field_table", "iter_fields"]
