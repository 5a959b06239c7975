"""Command line for creating and inspecting tester configuration files.

Usage:
    k8s-tester init cfg.yaml     # Write a fresh configuration
    k8s-tester show cfg.yaml     # Print the effective configuration
    k8s-tester check cfg.yaml    # Validate the effective configuration
    k8s-tester kubectl cfg.yaml  # Print kubectl commands for the cluster

Every command applies ``K8S_TESTER_*`` environment overrides before acting.
"""

from __future__ import annotations

import sys
import typing as typ
from pathlib import Path

from cyclopts import App, Parameter

from k8s_tester import __version__
from k8s_tester.config import ConfigError, ConfigTree, ConfigValidationError
from k8s_tester.config.persistence import encode
from k8s_tester.logging import configure_logging, get_logger, log_warning

app = App(
    name="k8s-tester",
    help="Configuration for the cluster add-on test harness",
    version=__version__,
)

logger = get_logger(__name__)

LogLevelOption = typ.Annotated[str, Parameter(env_var="K8S_TESTER_LOG_LEVEL")]


def _setup_logging(log_level: str) -> None:
    normalized, invalid = configure_logging(log_level)
    if invalid:
        log_warning(
            logger,
            "Invalid K8S_TESTER_LOG_LEVEL %r, falling back to %s",
            log_level,
            normalized,
        )


def _report(exc: ConfigError) -> int:
    print(f"error: {exc}", file=sys.stderr)
    return 1


def _load(path: Path) -> ConfigTree:
    tree = ConfigTree.load(path)
    tree.apply_all_overrides()
    return tree


@app.command
def init(path: Path, *, log_level: LogLevelOption = "info") -> int:
    """Write a configuration with defaults and environment overrides.

    Args:
        path: Destination file; made absolute before writing.
        log_level: Log level for this command.

    Returns:
        Exit code (0 for success, 1 on configuration errors).

    """
    _setup_logging(log_level)
    try:
        tree = ConfigTree.build()
        tree.apply_all_overrides()
        with tree.locked() as config:
            config.config_path = str(path)
        written = tree.save()
    except ConfigError as exc:
        return _report(exc)
    print(f"wrote configuration for cluster {tree.cluster_name!r} to {written}")
    return 0


@app.command
def show(path: Path, *, log_level: LogLevelOption = "info") -> int:
    """Print the effective configuration as YAML.

    Args:
        path: Configuration file to load.
        log_level: Log level for this command.

    Returns:
        Exit code (0 for success, 1 on configuration errors).

    """
    _setup_logging(log_level)
    try:
        tree = _load(path)
        document = encode(tree.snapshot())
    except ConfigError as exc:
        return _report(exc)
    sys.stdout.write(document.decode("utf-8"))
    return 0


@app.command
def check(path: Path, *, log_level: LogLevelOption = "info") -> int:
    """Validate the effective configuration.

    Args:
        path: Configuration file to load.
        log_level: Log level for this command.

    Returns:
        Exit code (0 when valid, 1 otherwise).

    """
    _setup_logging(log_level)
    try:
        tree = _load(path)
        tree.validate()
    except ConfigValidationError as exc:
        print(f"configuration {path} is invalid:", file=sys.stderr)
        for issue in exc.issues:
            print(f"  - {issue}", file=sys.stderr)
        return 1
    except ConfigError as exc:
        return _report(exc)

    enabled = [spec.key for spec, _ in tree.enabled_addons()]
    print(
        tree.colorize(
            f"[green]configuration {path} is valid ({len(enabled)} add-ons enabled)"
        )
    )
    return 0


@app.command
def kubectl(path: Path, *, log_level: LogLevelOption = "info") -> int:
    """Print kubectl commands for the configured cluster.

    Args:
        path: Configuration file to load.
        log_level: Log level for this command.

    Returns:
        Exit code (0 for success, 1 on configuration errors).

    """
    _setup_logging(log_level)
    try:
        tree = _load(path)
    except ConfigError as exc:
        return _report(exc)

    commands = tree.kubectl_commands()
    if not commands:
        print(f"configuration {path} has no kubeconfig_path", file=sys.stderr)
        return 1
    sys.stdout.write(commands)
    return 0


def main() -> int:
    """Entry point for the CLI."""
    return app()


if __name__ == "__main__":
    sys.exit(main())
