"""Add-on configuration records and their fixed declaration order.

Each add-on module provides a ``msgspec.Struct`` record, a stable
environment prefix and a ``new_default`` factory. :data:`ADDONS` ties those
together in the order the tester walks them; the root configuration builds
its slots from it and the override pass visits slots in this order.

For the install, verify and delete logic of an individual add-on, see the
tester implementations that consume these records.
"""

from __future__ import annotations

import typing as typ

from . import (
    cloudwatch_agent,
    falco,
    fluent_bit,
    jobs_echo,
    jobs_pi,
    kubernetes_dashboard,
    metrics_server,
    nlb_hello_world,
)
from .base import DEFAULT_MINIMUM_NODES, AddonConfigBase
from .cloudwatch_agent import CloudwatchAgentConfig
from .falco import FalcoConfig
from .fluent_bit import FluentBitConfig
from .jobs_echo import JobsEchoConfig
from .jobs_pi import JobsPiConfig
from .kubernetes_dashboard import KubernetesDashboardConfig
from .metrics_server import MetricsServerConfig
from .nlb_hello_world import NLBHelloWorldConfig

if typ.TYPE_CHECKING:
    import collections.abc as cabc


@typ.runtime_checkable
class AddonConfig(typ.Protocol):
    """Capabilities every add-on slot offers to the tree."""

    enable: bool
    minimum_nodes: int
    namespace: str

    def validate(self) -> list[str]: ...


class AddonSpec(typ.NamedTuple):
    """Registry entry binding a slot key to its prefix and factory."""

    key: str
    env_prefix: str
    factory: cabc.Callable[[], AddonConfigBase]


ADDONS: tuple[AddonSpec, ...] = (
    AddonSpec(
        "add_on_cloudwatch_agent",
        cloudwatch_agent.ENV_PREFIX,
        cloudwatch_agent.new_default,
    ),
    AddonSpec(
        "add_on_metrics_server",
        metrics_server.ENV_PREFIX,
        metrics_server.new_default,
    ),
    AddonSpec("add_on_fluent_bit", fluent_bit.ENV_PREFIX, fluent_bit.new_default),
    AddonSpec(
        "add_on_kubernetes_dashboard",
        kubernetes_dashboard.ENV_PREFIX,
        kubernetes_dashboard.new_default,
    ),
    AddonSpec(
        "add_on_nlb_hello_world",
        nlb_hello_world.ENV_PREFIX,
        nlb_hello_world.new_default,
    ),
    AddonSpec("add_on_jobs_pi", jobs_pi.ENV_PREFIX, jobs_pi.new_default),
    AddonSpec(
        "add_on_jobs_echo",
        jobs_echo.env_prefix("Job"),
        jobs_echo.new_default,
    ),
    AddonSpec(
        "add_on_cron_jobs_echo",
        jobs_echo.env_prefix("CronJob"),
        jobs_echo.new_default_cron,
    ),
    AddonSpec("add_on_falco", falco.ENV_PREFIX, falco.new_default),
)

_ADDONS_BY_KEY: dict[str, AddonSpec] = {spec.key: spec for spec in ADDONS}


def get_addon_spec(key: str) -> AddonSpec:
    """Return the registry entry for ``key``.

    Raises
    ------
    KeyError
        If no add-on is registered under ``key``.

    """
    try:
        return _ADDONS_BY_KEY[key]
    except KeyError:
        known = ", ".join(sorted(_ADDONS_BY_KEY))
        msg = f"unknown add-on {key!r}; known add-ons: {known}"
        raise KeyError(msg) from None


__all__ = [
    "ADDONS",
    "DEFAULT_MINIMUM_NODES",
    "AddonConfig",
    "AddonConfigBase",
    "AddonSpec",
    "CloudwatchAgentConfig",
    "FalcoConfig",
    "FluentBitConfig",
    "JobsEchoConfig",
    "JobsPiConfig",
    "KubernetesDashboardConfig",
    "MetricsServerConfig",
    "NLBHelloWorldConfig",
    "get_addon_spec",
]
