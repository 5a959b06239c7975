"""Falco runtime-security add-on configuration."""

from __future__ import annotations

import datetime as dt

import msgspec

from .base import AddonConfigBase

ENV_PREFIX = "FALCO"

DEFAULT_NAMESPACE = "falco"
DEFAULT_HELM_CHART_REPO_URL = "https://falcosecurity.github.io/charts"


class FalcoConfig(AddonConfigBase):
    """Settings for the Falco Helm chart.

    Attributes
    ----------
    helm_chart_repo_url : str
        Helm repository hosting the ``falco`` chart.
    install_timeout : datetime.timedelta
        How long the chart install may take before it is abandoned.

    """

    namespace: str = DEFAULT_NAMESPACE
    helm_chart_repo_url: str = DEFAULT_HELM_CHART_REPO_URL
    install_timeout: dt.timedelta = msgspec.field(
        default_factory=lambda: dt.timedelta(minutes=10)
    )

    def validate(self) -> list[str]:
        """Return human-readable issues; an empty list means valid."""
        issues = AddonConfigBase.validate(self)
        if not self.helm_chart_repo_url:
            issues.append("helm_chart_repo_url must not be empty")
        return issues


def new_default() -> FalcoConfig:
    """Return the default Falco configuration."""
    return FalcoConfig()
