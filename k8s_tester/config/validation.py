"""Semantic validation rules for a configuration tree."""

from __future__ import annotations

import typing as typ

from k8s_tester.addons import ADDONS
from k8s_tester.logging import normalize_log_level

from .errors import ConfigValidationError
from .overrides import parse_bool

if typ.TYPE_CHECKING:
    from .models import Config


def _validate_globals(config: Config, issues: list[str]) -> None:
    if not config.cluster_name:
        issues.append("cluster_name must not be empty")
    _, invalid_level = normalize_log_level(config.log_level)
    if invalid_level:
        issues.append(f"log-level {config.log_level!r} is not a supported level")
    if config.log_color_override:
        try:
            parse_bool(config.log_color_override)
        except ValueError:
            issues.append(
                f"log_color_override {config.log_color_override!r} is not a boolean"
            )
    if not config.log_outputs:
        issues.append("log-outputs must list at least one sink")
    if config.minimum_nodes < 1:
        issues.append(f"minimum_nodes must be >= 1, got {config.minimum_nodes}")


def _validate_addons(config: Config, issues: list[str]) -> None:
    for spec in ADDONS:
        addon = getattr(config, spec.key)
        if not addon.enable:
            continue
        issues.extend(f"{spec.key}: {issue}" for issue in addon.validate())
        # total_nodes stays 0 until the provisioner has counted the nodes.
        if config.total_nodes and addon.minimum_nodes > config.total_nodes:
            issues.append(
                f"{spec.key}: requires at least {addon.minimum_nodes} nodes, "
                f"cluster has {config.total_nodes}"
            )


def validate_config(config: Config) -> Config:
    """Validate a configuration record, returning it when all checks pass.

    Disabled add-ons are not checked.

    Raises
    ------
    ConfigValidationError
        If any check fails; ``issues`` lists every failure.

    """
    issues: list[str] = []
    _validate_globals(config, issues)
    _validate_addons(config, issues)
    if issues:
        raise ConfigValidationError(issues)
    return config


__all__ = ["validate_config"]
