"""Kubernetes dashboard add-on configuration."""

from __future__ import annotations

import typing as typ

from k8s_tester.schema import READ_ONLY

from .base import AddonConfigBase

ENV_PREFIX = "KUBERNETES_DASHBOARD"

DEFAULT_NAMESPACE = "kubernetes-dashboard"


class KubernetesDashboardConfig(AddonConfigBase):
    """Settings for the Kubernetes dashboard.

    ``url`` and ``authentication_token`` are recorded by the installer once
    the dashboard is reachable.
    """

    namespace: str = DEFAULT_NAMESPACE
    url: typ.Annotated[str, READ_ONLY] = ""
    authentication_token: typ.Annotated[str, READ_ONLY] = ""


def new_default() -> KubernetesDashboardConfig:
    """Return the default dashboard configuration."""
    return KubernetesDashboardConfig()
