"""Configuration tree, environment overrides and persistence.

The primary entrypoints are:

- ConfigTree.build: create a tree with default settings for every add-on
- ConfigTree.load: read a tree from its YAML document
- ConfigTree.apply_all_overrides: apply ``K8S_TESTER_*`` environment variables
- ConfigTree.save: persist the tree atomically with owner-only permissions

For lower-level operations, import directly from submodules:

- k8s_tester.config.fields: field descriptor tables
- k8s_tester.config.overrides: per-record override passes
- k8s_tester.config.persistence: file and YAML primitives

"""

from __future__ import annotations

from .errors import (
    ConfigError,
    ConfigValidationError,
    DecodeError,
    EmptyConfigPathError,
    PathResolutionError,
    ReadError,
    ReadOnlyViolationError,
    SerializationError,
    TypeCoercionError,
    UnknownFieldError,
    UnsupportedFieldKindError,
    WriteError,
)
from .fields import FieldDescriptor, FieldKind, iter_fields
from .models import ENV_PREFIX, Config
from .overrides import EnvironmentOverride, apply_overrides
from .tree import ConfigTree

__all__ = [
    "ENV_PREFIX",
    "Config",
    "ConfigError",
    "ConfigTree",
    "ConfigValidationError",
    "DecodeError",
    "EmptyConfigPathError",
    "EnvironmentOverride",
    "FieldDescriptor",
    "FieldKind",
    "PathResolutionError",
    "ReadError",
    "ReadOnlyViolationError",
    "SerializationError",
    "TypeCoercionError",
    "UnknownFieldError",
    "UnsupportedFieldKindError",
    "WriteError",
    "apply_overrides",
    "iter_fields",
]
