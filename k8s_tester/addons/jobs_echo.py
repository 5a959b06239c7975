"""Echo Job and CronJob add-on configuration.

The same record backs two slots: a plain ``Job`` and a ``CronJob``. Each
kind has its own environment prefix and default namespace.
"""

from __future__ import annotations

import typing as typ

from k8s_tester.schema import READ_ONLY, Uint

from .base import AddonConfigBase

JobType = typ.Literal["Job", "CronJob"]

JOB_ENV_PREFIX = "JOBS_ECHO"
CRON_JOB_ENV_PREFIX = "CRON_JOBS_ECHO"

# Upper bound on the payload each pod echoes, in bytes.
MAX_ECHO_SIZE = 250 * 1024

_NAMESPACES: dict[str, str] = {
    "Job": "test-jobs-echo",
    "CronJob": "test-cron-jobs-echo",
}


class JobsEchoConfig(AddonConfigBase):
    """Settings for Jobs (or CronJobs) that echo a fixed-size payload.

    Attributes
    ----------
    job_type : str
        ``"Job"`` or ``"CronJob"``. Fixed by the slot; read-only.
    completes : int
        Number of successful completions per Job.
    parallels : int
        Number of pods run in parallel per Job.
    echo_size : int
        Payload size in bytes.
    schedule : str
        Cron schedule; only used by ``CronJob``.
    successful_jobs_history_limit : int
        Finished CronJob runs kept around.
    failed_jobs_history_limit : int
        Failed CronJob runs kept around.

    """

    job_type: typ.Annotated[str, READ_ONLY] = "Job"
    completes: int = 10
    parallels: int = 10
    echo_size: int = 100 * 1024
    schedule: str = "*/10 * * * *"
    successful_jobs_history_limit: Uint = 3
    failed_jobs_history_limit: Uint = 1

    def validate(self) -> list[str]:
        """Return human-readable issues; an empty list means valid."""
        issues = AddonConfigBase.validate(self)
        if self.job_type not in _NAMESPACES:
            issues.append(f"job_type must be 'Job' or 'CronJob', got {self.job_type!r}")
        if self.completes < 1:
            issues.append(f"completes must be >= 1, got {self.completes}")
        if self.parallels < 1:
            issues.append(f"parallels must be >= 1, got {self.parallels}")
        if not 0 < self.echo_size <= MAX_ECHO_SIZE:
            issues.append(
                f"echo_size must be in (0, {MAX_ECHO_SIZE}], got {self.echo_size}"
            )
        if self.job_type == "CronJob" and not self.schedule:
            issues.append("schedule must not be empty for CronJob")
        return issues


def env_prefix(job_type: JobType) -> str:
    """Return the environment prefix for the given job kind."""
    return CRON_JOB_ENV_PREFIX if job_type == "CronJob" else JOB_ENV_PREFIX


def new_default(job_type: JobType = "Job") -> JobsEchoConfig:
    """Return the default configuration for ``job_type``."""
    return JobsEchoConfig(job_type=job_type, namespace=_NAMESPACES[job_type])


def new_default_cron() -> JobsEchoConfig:
    """Return the default ``CronJob`` configuration."""
    return new_default("CronJob")
