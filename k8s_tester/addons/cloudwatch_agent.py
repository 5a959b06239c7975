"""CloudWatch agent add-on configuration."""

from __future__ import annotations

import datetime as dt

import msgspec

from .base import AddonConfigBase

ENV_PREFIX = "CLOUDWATCH_AGENT"

DEFAULT_NAMESPACE = "test-cloudwatch-agent"
DEFAULT_REGION = "us-west-2"


class CloudwatchAgentConfig(AddonConfigBase):
    """Settings for the CloudWatch agent DaemonSet.

    Attributes
    ----------
    region : str
        AWS region the agent publishes metrics to.
    metrics_collection_interval : datetime.timedelta
        How often the agent scrapes node metrics.
    tags : dict[str, str]
        Extra dimensions attached to every published metric.

    """

    namespace: str = DEFAULT_NAMESPACE
    region: str = DEFAULT_REGION
    metrics_collection_interval: dt.timedelta = msgspec.field(
        default_factory=lambda: dt.timedelta(seconds=60)
    )
    tags: dict[str, str] = msgspec.field(default_factory=dict)

    def validate(self) -> list[str]:
        """Return human-readable issues; an empty list means valid."""
        issues = AddonConfigBase.validate(self)
        if not self.region:
            issues.append("region must not be empty")
        if self.metrics_collection_interval <= dt.timedelta(0):
            issues.append("metrics_collection_interval must be positive")
        return issues


def new_default() -> CloudwatchAgentConfig:
    """Return the default CloudWatch agent configuration."""
    return CloudwatchAgentConfig()
