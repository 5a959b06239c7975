"""Shared building blocks for configuration records.

Every configuration record (the root tree and each add-on slot) is a
``msgspec.Struct`` derived from :class:`ConfigRecord`. Field metadata that
the environment override engine needs is attached with ``typing.Annotated``:

>>> import typing as typ
>>> class Example(ConfigRecord):
...     replicas: Uint = 1
...     endpoint: typ.Annotated[str, READ_ONLY] = ""

"""

from __future__ import annotations

import typing as typ

import msgspec

READ_ONLY_FLAG = "read_only"

# Computed fields: persisted, but never set from the environment.
READ_ONLY = msgspec.Meta(extra={READ_ONLY_FLAG: True})

Uint = typ.Annotated[int, msgspec.Meta(ge=0)]


class ConfigRecord(msgspec.Struct, kw_only=True, forbid_unknown_fields=True):
    """Base for persisted configuration records.

    Unknown keys are rejected on decode so that the persisted file can never
    silently drift away from the schema.
    """


__all__ = ["READ_ONLY", "READ_ONLY_FLAG", "ConfigRecord", "Uint"]
