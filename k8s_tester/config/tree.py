"""The configuration tree shared by every add-on tester in a run.

:class:`ConfigTree` owns the root :class:`~k8s_tester.config.models.Config`
record and keeps concurrency concerns out of it: a lock guards saving and
the accessors below, and a stop event lets long-running add-on operations
cooperate on shutdown.

Lifecycle
---------
A tree is created with :meth:`ConfigTree.build` or :meth:`ConfigTree.load`,
receives environment overrides once via
:meth:`ConfigTree.apply_all_overrides`, and is then handed to the add-on
testers, which read it and persist mutations with :meth:`ConfigTree.save`.

>>> tree = ConfigTree.build()
>>> applied = tree.apply_all_overrides()
>>> tree.config.minimum_nodes
1

"""

from __future__ import annotations

import contextlib
import os
import threading
import typing as typ

import msgspec

from k8s_tester.addons import ADDONS, AddonSpec, get_addon_spec
from k8s_tester.colors import colorize
from k8s_tester.logging import (
    configure_logging,
    get_logger,
    log_debug,
    log_info,
    log_warning,
)

from . import persistence
from .errors import ConfigError, EmptyConfigPathError
from .models import ENV_PREFIX, Config, generate_cluster_name
from .overrides import EnvironmentOverride, parse_bool, record_overrides
from .validation import validate_config

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path

    from k8s_tester.addons import AddonConfigBase

logger = get_logger(__name__)

_KUBECTL_CHECKS = (
    "version",
    "cluster-info",
    "get cs",
    "--namespace=kube-system get pods",
    "--namespace=kube-system get ds",
    "get pods",
    "get csr -o=yaml",
    "get nodes --show-labels -o=wide",
    "get nodes -o=wide",
)


def addon_env_prefix(spec: AddonSpec) -> str:
    """Return the full environment prefix for an add-on slot."""
    return f"{ENV_PREFIX}{spec.env_prefix}_"


class ConfigTree:
    """Owning wrapper around the root configuration record.

    Parameters
    ----------
    config : Config
        The record this tree owns. Callers should not keep other references
        to it once the tree is shared between threads.

    """

    def __init__(self, config: Config) -> None:
        """Take ownership of ``config``."""
        self._config = config
        self._lock = threading.RLock()
        self._stop = threading.Event()

    def __repr__(self) -> str:
        """Return a short identification of the tree."""
        return (
            f"ConfigTree(cluster_name={self._config.cluster_name!r}, "
            f"config_path={self._config.config_path!r})"
        )

    @classmethod
    def build(cls, environ: cabc.Mapping[str, str] | None = None) -> ConfigTree:
        """Create a tree holding default settings for every add-on.

        The cluster name is taken from ``K8S_TESTER_CLUSTER_NAME`` when set,
        otherwise a fresh one is generated.

        Parameters
        ----------
        environ : Mapping[str, str] | None, optional
            Environment to read. Defaults to ``os.environ``.

        Returns
        -------
        ConfigTree
            A tree with no ``config_path``.

        """
        env = os.environ if environ is None else environ
        name = env.get(f"{ENV_PREFIX}CLUSTER_NAME", "") or generate_cluster_name()
        return cls(Config(cluster_name=name))

    @classmethod
    def load(cls, path: str | os.PathLike[str]) -> ConfigTree:
        """Load a tree from the YAML document at ``path``.

        Unknown keys anywhere in the document are rejected. After a
        successful load ``config_path`` is set to the absolute form of
        ``path`` and the document is re-saved on a best-effort basis; a
        failed re-save is logged as a warning.

        Raises
        ------
        ReadError
            If the file cannot be read.
        UnknownFieldError
            If the document contains a key the schema does not define.
        DecodeError
            If the document is not a valid configuration tree.
        PathResolutionError
            If ``path`` cannot be made absolute.

        """
        raw_path = os.fspath(path)
        absolute = persistence.resolve_absolute(raw_path)
        data = persistence.read_bytes(absolute)
        config = persistence.decode(data, Config, path=raw_path)
        config.config_path = str(absolute)

        tree = cls(config)
        try:
            tree.save()
        except ConfigError as exc:
            log_warning(logger, "failed to sync config file %s: %s", raw_path, exc)
        return tree

    @property
    def config(self) -> Config:
        """Return the owned record.

        Reads after the override phase need no lock as long as no writer is
        active; use :meth:`locked` while mutating from concurrent testers.
        """
        return self._config

    @property
    def config_path(self) -> str:
        """Return the persisted location of the tree."""
        with self._lock:
            return self._config.config_path

    @property
    def cluster_name(self) -> str:
        """Return the cluster name."""
        with self._lock:
            return self._config.cluster_name

    @contextlib.contextmanager
    def locked(self) -> cabc.Iterator[Config]:
        """Yield the record while holding the tree's lock.

        The lock is re-entrant: the calling thread may use the other
        accessors, including :meth:`save`, inside the block.
        """
        with self._lock:
            yield self._config

    def snapshot(self) -> Config:
        """Return a detached deep copy of the record taken under the lock."""
        with self._lock:
            return msgspec.convert(msgspec.to_builtins(self._config), type=Config)

    def addon(self, key: str) -> AddonConfigBase:
        """Return the add-on slot registered under ``key``.

        Raises
        ------
        KeyError
            If ``key`` is not a registered add-on slot.

        """
        spec = get_addon_spec(key)
        return getattr(self._config, spec.key)

    def enabled_addons(self) -> cabc.Iterator[tuple[AddonSpec, AddonConfigBase]]:
        """Yield enabled add-on slots in declaration order."""
        for spec in ADDONS:
            addon = getattr(self._config, spec.key)
            if addon.enable:
                yield (spec, addon)

    def save(self) -> Path:
        """Persist the tree to ``config_path`` with owner-only permissions.

        Relative ``config_path`` and ``kubeconfig_path`` values are made
        absolute first.

        Returns
        -------
        Path
            The absolute path written.

        Raises
        ------
        EmptyConfigPathError
            If ``config_path`` is not set.
        PathResolutionError
            If a path cannot be made absolute.
        SerializationError
            If the tree cannot be encoded.
        WriteError
            If the file cannot be written.

        """
        with self._lock:
            return self._save_locked()

    def _save_locked(self) -> Path:
        config = self._config
        if not config.config_path:
            raise EmptyConfigPathError

        target = persistence.resolve_absolute(config.config_path)
        config.config_path = str(target)
        if config.kubeconfig_path:
            config.kubeconfig_path = str(
                persistence.resolve_absolute(config.kubeconfig_path)
            )

        persistence.write_bytes(target, persistence.encode(config))
        log_debug(logger, "Saved configuration to %s", target)
        return target

    def apply_all_overrides(
        self, environ: cabc.Mapping[str, str] | None = None
    ) -> tuple[EnvironmentOverride, ...]:
        """Apply environment overrides to the root record and every slot.

        The root is visited under ``K8S_TESTER_``, then each add-on under
        ``K8S_TESTER_<ADDON_PREFIX>_`` in declaration order. The first error
        aborts the pass.

        Parameters
        ----------
        environ : Mapping[str, str] | None, optional
            Environment to read. Defaults to ``os.environ``.

        Returns
        -------
        tuple[EnvironmentOverride, ...]
            Every override applied, in the order applied.

        Raises
        ------
        ReadOnlyViolationError
            If a variable targets a read-only field.
        UnsupportedFieldKindError
            If a variable targets a mapping field outside the whitelist.
        TypeCoercionError
            If a variable's value cannot be parsed for its field kind.

        """
        env = dict(os.environ) if environ is None else environ
        with self._lock:
            applied = list(record_overrides(ENV_PREFIX, self._config, env))
            for spec in ADDONS:
                slot = getattr(self._config, spec.key)
                applied.extend(record_overrides(addon_env_prefix(spec), slot, env))
        log_info(logger, "Applied %d environment overrides", len(applied))
        return tuple(applied)

    def validate(self) -> Config:
        """Run semantic checks over the tree.

        Raises
        ------
        ConfigValidationError
            If any check fails.

        """
        with self._lock:
            return validate_config(self._config)

    def configure_logging(self, *, force: bool = False) -> str:
        """Configure femtologging from the tree's ``log-level``.

        Returns
        -------
        str
            The normalized level in effect.

        """
        level = self._config.log_level
        normalized, invalid = configure_logging(level, force=force)
        if invalid:
            log_warning(
                logger, "Invalid log-level %r, falling back to %s", level, normalized
            )
        return normalized

    def colorize(self, text: str) -> str:
        """Render colour markup in ``text`` according to the log colour settings.

        A non-empty ``log_color_override`` takes precedence over
        ``log_color``. An override that is not a boolean literal is ignored
        with a warning; :meth:`validate` reports it as an issue.
        """
        with self._lock:
            enabled = self._config.log_color
            override = self._config.log_color_override
        if override:
            try:
                enabled = parse_bool(override)
            except ValueError:
                log_warning(logger, "Ignoring invalid log_color_override %r", override)
        return colorize(text, enabled=enabled)

    @property
    def stop_event(self) -> threading.Event:
        """Return the shutdown signal shared with add-on testers."""
        return self._stop

    @property
    def stopped(self) -> bool:
        """Return whether shutdown has been requested."""
        return self._stop.is_set()

    def request_stop(self) -> None:
        """Signal add-on testers to wind down long-running operations."""
        self._stop.set()

    def kubectl_command(self) -> str:
        """Return the kubectl invocation bound to this tree's kubeconfig."""
        with self._lock:
            return (
                f"{self._config.kubectl_path} "
                f"--kubeconfig={self._config.kubeconfig_path}"
            )

    def kubectl_commands(self) -> str:
        """Render a cheat sheet of kubectl commands for operators.

        Returns an empty string when no kubeconfig path is set.
        """
        with self._lock:
            kubeconfig_path = self._config.kubeconfig_path
        if not kubeconfig_path:
            return ""
        command = self.kubectl_command()
        lines = [
            "###########################",
            "# kubectl commands",
            f"export KUBECONFIG={kubeconfig_path}",
            f'export KUBECTL="{command}"',
            "",
            *(f"{command} {check}" for check in _KUBECTL_CHECKS),
            "###########################",
        ]
        return "\n".join(lines) + "\n"


__all__ = ["ConfigTree", "addon_env_prefix"]
