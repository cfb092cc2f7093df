"""Task records.

A task carries a ``logs`` mapping of log name (``task_log``, ``agent_log``,
``system_log``, ``all_log``, ...) to the URL serving that log.
"""

from datetime import datetime

from pydantic import AliasChoices, Field

from .base import EvgModel

__all__ = ["EvgTask", "EvgTaskArtifact", "EvgTaskStatusDetails"]


class EvgTaskArtifact(EvgModel):
    name: str
    url: str
    visibility: str
    ignore_for_fetch: bool


class EvgTaskStatusDetails(EvgModel):
    status: str
    status_type: str = Field(validation_alias=AliasChoices("status_type", "type"))
    desc: str
    timed_out: bool


class EvgTask(EvgModel):
    activated: bool
    activated_by: str
    artifacts: list[EvgTaskArtifact] | None = None
    build_id: str
    build_variant: str
    create_time: datetime
    dispatch_time: datetime | None = None
    display_name: str
    display_only: bool
    distro_id: str
    est_wait_to_start_ms: int
    execution: int
    execution_tasks: list[str] | None = None
    expected_duration_ms: int
    finish_time: datetime | None = None
    generate_task: bool
    generated_by: str
    host_id: str
    ingest_time: datetime | None = None
    logs: dict[str, str]
    mainline: bool | None = None
    order: int
    project_id: str
    priority: int
    restarts: int | None = None
    revision: str
    scheduled_time: datetime | None = None
    start_time: datetime | None = None
    status: str
    status_details: EvgTaskStatusDetails
    task_group: str | None = None
    task_group_max_hosts: int | None = None
    task_id: str
    time_taken_ms: int
    version_id: str
