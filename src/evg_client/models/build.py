"""Build records."""

from datetime import datetime

from pydantic import AliasChoices, Field

from .base import EvgModel

__all__ = ["BuildStatusCounts", "EvgBuild"]


class BuildStatusCounts(EvgModel):
    """Per-status task counts of a build."""

    model_config = EvgModel.model_config | {"frozen": False}

    succeeded: int = 0
    failed: int = 0
    started: int = 0
    undispatched: int = 0
    inactivate: int | None = None
    dispatched: int = 0
    timed_out: int = 0

    def add(self, other: "BuildStatusCounts") -> None:
        """Accumulate another build's counts into this one."""
        self.succeeded += other.succeeded
        self.failed += other.failed
        self.started += other.started
        self.undispatched += other.undispatched
        self.dispatched += other.dispatched
        self.timed_out += other.timed_out

    def total_task_count(self) -> int:
        return (
            self.undispatched
            + self.dispatched
            + self.started
            + self.failed
            + self.succeeded
            + self.timed_out
        )

    def finished_task_count(self) -> int:
        return self.succeeded + self.failed + self.timed_out

    def pending_task_count(self) -> int:
        return self.started + self.undispatched

    def completed_task_count(self) -> int:
        return self.failed + self.succeeded + self.timed_out

    def percent_complete(self) -> float:
        """Fraction of tasks finished, 0.0 for a build without tasks."""
        total = self.total_task_count()
        if total == 0:
            return 0.0
        return self.finished_task_count() / total


class EvgBuild(EvgModel):
    id: str = Field(validation_alias=AliasChoices("id", "_id"))
    project_id: str
    create_time: datetime | None = None
    start_time: datetime | None = None
    finish_time: datetime | None = None
    version: str
    branch: str | None = None
    git_hash: str
    build_variant: str
    status: str
    activated: bool
    activated_by: str
    activated_time: datetime | None = None
    order: int
    tasks: list[str]
    time_taken_ms: int
    display_name: str
    predicted_makespan_ms: int
    actual_makespan_ms: int
    origin: str
    status_counts: BuildStatusCounts
