"""Fluent Bit add-on configuration."""

from __future__ import annotations

import datetime as dt

import msgspec

from k8s_tester.schema import Uint

from .base import AddonConfigBase

ENV_PREFIX = "FLUENT_BIT"

DEFAULT_NAMESPACE = "test-fluent-bit"


class FluentBitConfig(AddonConfigBase):
    """Settings for the Fluent Bit log forwarder.

    Attributes
    ----------
    outputs : list[str]
        Fluent Bit output plugins to enable, in order.
    flush_interval : datetime.timedelta
        Interval between buffer flushes.
    mem_buf_limit_mb : int
        Memory buffer limit per input, in MiB.
    node_selector : dict[str, str]
        Node labels the DaemonSet is restricted to.

    """

    namespace: str = DEFAULT_NAMESPACE
    outputs: list[str] = msgspec.field(default_factory=lambda: ["stdout"])
    flush_interval: dt.timedelta = msgspec.field(
        default_factory=lambda: dt.timedelta(seconds=5)
    )
    mem_buf_limit_mb: Uint = 5
    node_selector: dict[str, str] = msgspec.field(default_factory=dict)

    def validate(self) -> list[str]:
        """Return human-readable issues; an empty list means valid."""
        issues = AddonConfigBase.validate(self)
        if not self.outputs:
            issues.append("outputs must list at least one plugin")
        return issues


def new_default() -> FluentBitConfig:
    """Return the default Fluent Bit configuration."""
    return FluentBitConfig()
