"""Runtime settings for the quality gate tooling.

The evaluation engine reads no configuration itself; callers (the CLI, the issue-sync
trigger) resolve these settings and pass the values down.
"""

from pydantic import Field
from pydantic_settings import BaseSettings

from quality_gate.types import NEW_METRIC_PREFIX

BRANCH_ISSUE_SYNC = "ISSUE_SYNC"


class GateSettings(BaseSettings):
    """Main configuration, read from ``QUALITY_GATE_*`` environment variables."""

    new_metric_prefix: str = Field(
        default=NEW_METRIC_PREFIX,
        description="Metric key prefix whose conditions compare the variation",
    )
    hours_per_day: int = Field(
        default=8,
        gt=0,
        description="Length of a working day when displaying work durations",
    )

    # Issue sync
    issue_sync_task_type: str = Field(
        default=BRANCH_ISSUE_SYNC,
        description="Task type of branch issue-sync tasks in the queue",
    )
    database_dsn: str | None = Field(
        default=None,
        description="PostgreSQL DSN of the store holding branches and the task queue",
    )

    log_level: str = Field(default="INFO", description="Root logging level")

    model_config = {"env_prefix": "QUALITY_GATE_"}
