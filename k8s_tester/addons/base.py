"""Fields and checks shared by every add-on configuration."""

from __future__ import annotations

from k8s_tester.schema import ConfigRecord

DEFAULT_MINIMUM_NODES = 1


class AddonConfigBase(ConfigRecord):
    """Common add-on settings.

    Attributes
    ----------
    enable : bool
        Whether the add-on is installed and verified during a run.
    minimum_nodes : int
        Minimum number of cluster nodes required to install the add-on.
    namespace : str
        Kubernetes namespace the add-on is installed into.

    """

    enable: bool = False
    minimum_nodes: int = DEFAULT_MINIMUM_NODES
    namespace: str = ""

    def validate(self) -> list[str]:
        """Return human-readable issues; an empty list means valid."""
        issues: list[str] = []
        if self.minimum_nodes < 1:
            issues.append(f"minimum_nodes must be >= 1, got {self.minimum_nodes}")
        if not self.namespace:
            issues.append("namespace must not be empty")
        return issues
