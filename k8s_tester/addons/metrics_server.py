"""metrics-server add-on configuration."""

from __future__ import annotations

import datetime as dt

import msgspec

from k8s_tester.schema import Uint

from .base import AddonConfigBase

ENV_PREFIX = "METRICS_SERVER"

DEFAULT_NAMESPACE = "kube-system"


class MetricsServerConfig(AddonConfigBase):
    """Settings for installing and verifying metrics-server.

    Attributes
    ----------
    deployment_replicas : int
        Number of metrics-server replicas.
    cpu_utilization_threshold : float
        Fraction of node CPU above which ``kubectl top`` output is flagged.
    verify_timeout : datetime.timedelta
        How long to wait for the metrics API to report node metrics.

    """

    namespace: str = DEFAULT_NAMESPACE
    deployment_replicas: Uint = 1
    cpu_utilization_threshold: float = 0.8
    verify_timeout: dt.timedelta = msgspec.field(
        default_factory=lambda: dt.timedelta(minutes=5)
    )

    def validate(self) -> list[str]:
        """Return human-readable issues; an empty list means valid."""
        issues = AddonConfigBase.validate(self)
        if self.deployment_replicas < 1:
            issues.append("deployment_replicas must be >= 1")
        if not 0.0 < self.cpu_utilization_threshold <= 1.0:
            issues.append(
                "cpu_utilization_threshold must be in (0, 1], "
                f"got {self.cpu_utilization_threshold}"
            )
        return issues


def new_default() -> MetricsServerConfig:
    """Return the default metrics-server configuration."""
    return MetricsServerConfig()
