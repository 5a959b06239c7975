"""Root configuration record for one tester run.

The root record holds global settings plus one slot per add-on. Slot keys,
prefixes and declaration order come from :data:`k8s_tester.addons.ADDONS`.
"""

from __future__ import annotations

import platform
import secrets
import string
import time
import typing as typ

import msgspec

from k8s_tester.addons import (
    DEFAULT_MINIMUM_NODES,
    CloudwatchAgentConfig,
    FalcoConfig,
    FluentBitConfig,
    JobsEchoConfig,
    JobsPiConfig,
    KubernetesDashboardConfig,
    MetricsServerConfig,
    NLBHelloWorldConfig,
    cloudwatch_agent,
    falco,
    fluent_bit,
    jobs_echo,
    jobs_pi,
    kubernetes_dashboard,
    metrics_server,
    nlb_hello_world,
)
from k8s_tester.logging import DEFAULT_LOG_LEVEL
from k8s_tester.schema import READ_ONLY, ConfigRecord

ENV_PREFIX = "K8S_TESTER_"

KUBECTL_VERSION = "v1.21.0"
DEFAULT_KUBECTL_PATH = f"/tmp/kubectl-test-{KUBECTL_VERSION}"  # noqa: S108
DEFAULT_LOG_OUTPUTS = ("stderr",)

_KUBECTL_URL_TEMPLATE = (
    "https://storage.googleapis.com/kubernetes-release/release/"
    "{version}/bin/{os}/{arch}/kubectl"
)
_ARCH_ALIASES = {"x86_64": "amd64", "aarch64": "arm64"}
_CLUSTER_NAME_ALPHABET = string.ascii_lowercase + string.digits
_CLUSTER_NAME_TS_LEN = 10
_CLUSTER_NAME_SUFFIX_LEN = 12


def default_kubectl_download_url() -> str:
    """Return the kubectl download URL for the host OS and architecture."""
    machine = platform.machine().lower()
    return _KUBECTL_URL_TEMPLATE.format(
        version=KUBECTL_VERSION,
        os=platform.system().lower(),
        arch=_ARCH_ALIASES.get(machine, machine),
    )


def generate_cluster_name() -> str:
    """Return a fresh ``k8s-<timestamp>-<random>`` cluster name."""
    ts = time.strftime("%Y%m%d%H%M%S", time.gmtime())[:_CLUSTER_NAME_TS_LEN]
    suffix = "".join(
        secrets.choice(_CLUSTER_NAME_ALPHABET) for _ in range(_CLUSTER_NAME_SUFFIX_LEN)
    )
    return f"k8s-{ts}-{suffix}"


class Config(ConfigRecord):
    """Global tester settings and add-on slots.

    Attributes
    ----------
    prompt : bool
        Ask for confirmation before mutating the cluster.
    cluster_name : str
        Kubernetes cluster name.
    config_path : str
        Path of this document on disk; absolute once loaded or saved.
    log_color : bool
        Emit coloured log output.
    log_color_override : str
        When non-empty, used instead of terminal colour detection.
    log_level : str
        One of ``debug``, ``info``, ``warn``, ``error``, ``panic``, ``fatal``.
    log_outputs : list[str]
        Log sinks: ``default``, ``stderr``, ``stdout`` or file names.
    kubectl_download_url : str
        Where to fetch kubectl from when ``kubectl_path`` is missing.
    kubectl_path : str
        Location of the kubectl binary.
    kubeconfig_path : str
        Location of the kubeconfig; absolute once saved.
    kubeconfig_context : str
        Optional kubeconfig context name.
    minimum_nodes : int
        Minimum number of nodes required for the run.
    total_nodes : int
        Nodes across all node groups, computed by the provisioner. Read-only.

    """

    prompt: bool = True
    cluster_name: str = ""
    config_path: str = ""
    log_color: bool = True
    log_color_override: str = ""
    log_level: str = msgspec.field(default=DEFAULT_LOG_LEVEL, name="log-level")
    log_outputs: list[str] = msgspec.field(
        default_factory=lambda: list(DEFAULT_LOG_OUTPUTS), name="log-outputs"
    )
    kubectl_download_url: str = msgspec.field(
        default_factory=default_kubectl_download_url, name="kubectl-download-url"
    )
    kubectl_path: str = DEFAULT_KUBECTL_PATH
    kubeconfig_path: str = ""
    kubeconfig_context: str = ""
    minimum_nodes: int = DEFAULT_MINIMUM_NODES
    total_nodes: typ.Annotated[int, READ_ONLY] = 0

    add_on_cloudwatch_agent: CloudwatchAgentConfig = msgspec.field(
        default_factory=cloudwatch_agent.new_default
    )
    add_on_metrics_server: MetricsServerConfig = msgspec.field(
        default_factory=metrics_server.new_default
    )
    add_on_fluent_bit: FluentBitConfig = msgspec.field(
        default_factory=fluent_bit.new_default
    )
    add_on_kubernetes_dashboard: KubernetesDashboardConfig = msgspec.field(
        default_factory=kubernetes_dashboard.new_default
    )
    add_on_nlb_hello_world: NLBHelloWorldConfig = msgspec.field(
        default_factory=nlb_hello_world.new_default
    )
    add_on_jobs_pi: JobsPiConfig = msgspec.field(default_factory=jobs_pi.new_default)
    add_on_jobs_echo: JobsEchoConfig = msgspec.field(
        default_factory=jobs_echo.new_default
    )
    add_on_cron_jobs_echo: JobsEchoConfig = msgspec.field(
        default_factory=jobs_echo.new_default_cron
    )
    add_on_falco: FalcoConfig = msgspec.field(default_factory=falco.new_default)


__all__ = [
    "DEFAULT_KUBECTL_PATH",
    "DEFAULT_LOG_OUTPUTS",
    "ENV_PREFIX",
    "KUBECTL_VERSION",
    "Config",
    "default_kubectl_download_url",
    "generate_cluster_name",
]
