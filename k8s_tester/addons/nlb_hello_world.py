"""NLB hello-world add-on configuration."""

from __future__ import annotations

import typing as typ

import msgspec

from k8s_tester.schema import READ_ONLY, Uint

from .base import AddonConfigBase

ENV_PREFIX = "NLB_HELLO_WORLD"

DEFAULT_NAMESPACE = "test-nlb-hello-world"


class NLBHelloWorldConfig(AddonConfigBase):
    """Settings for the hello-world service behind a network load balancer.

    Attributes
    ----------
    deployment_node_selector : dict[str, str]
        Node labels the hello-world pods are scheduled onto.
    deployment_replicas : int
        Number of hello-world pods.
    elb_arn : str
        ARN of the provisioned load balancer. Read-only.
    elb_name : str
        Name of the provisioned load balancer. Read-only.
    elb_url : str
        Public URL of the provisioned load balancer. Read-only.

    """

    namespace: str = DEFAULT_NAMESPACE
    deployment_node_selector: dict[str, str] = msgspec.field(default_factory=dict)
    deployment_replicas: Uint = 2
    elb_arn: typ.Annotated[str, READ_ONLY] = ""
    elb_name: typ.Annotated[str, READ_ONLY] = ""
    elb_url: typ.Annotated[str, READ_ONLY] = ""

    def validate(self) -> list[str]:
        """Return human-readable issues; an empty list means valid."""
        issues = AddonConfigBase.validate(self)
        if self.deployment_replicas < 1:
            issues.append("deployment_replicas must be >= 1")
        return issues


def new_default() -> NLBHelloWorldConfig:
    """Return the default NLB hello-world configuration."""
    return NLBHelloWorldConfig()
