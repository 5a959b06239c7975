"""Pi-computing Job add-on configuration."""

from __future__ import annotations

from .base import AddonConfigBase

ENV_PREFIX = "JOBS_PI"

DEFAULT_NAMESPACE = "test-jobs-pi"


class JobsPiConfig(AddonConfigBase):
    """Settings for the Job that computes pi to many digits.

    Attributes
    ----------
    completes : int
        Number of successful completions the Job waits for.
    parallels : int
        Number of pods run in parallel.

    """

    namespace: str = DEFAULT_NAMESPACE
    completes: int = 10
    parallels: int = 10

    def validate(self) -> list[str]:
        """Return human-readable issues; an empty list means valid."""
        issues = AddonConfigBase.validate(self)
        if self.completes < 1:
            issues.append(f"completes must be >= 1, got {self.completes}")
        if self.parallels < 1:
            issues.append(f"parallels must be >= 1, got {self.parallels}")
        return issues


def new_default() -> JobsPiConfig:
    """Return the default pi Job configuration."""
    return JobsPiConfig()
