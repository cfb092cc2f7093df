"""Project records, as returned by the project listing endpoint."""

from pydantic import Field

from .base import EvgModel

__all__ = ["CommitQueue", "EvgProject", "TaskSync"]


class CommitQueue(EvgModel):
    enabled: bool | None = None
    merge_method: str = ""
    patch_type: str = ""
    message: str = ""


class TaskSync(EvgModel):
    config_enabled: bool | None = None
    patch_enabled: bool | None = None


class EvgProject(EvgModel):
    identifier: str
    display_name: str = ""
    owner_name: str = ""
    repo_name: str = ""
    branch_name: str = ""
    repo_kind: str = ""
    enabled: bool | None = None
    private: bool | None = None
    batch_time: int = 0
    remote_path: str = ""
    spawn_host_script_path: str = ""
    deactivate_previous: bool | None = None
    tracks_push_events: bool | None = None
    pr_testing_enabled: bool | None = None
    git_tag_versions_enabled: bool | None = None
    default_logger: str = ""
    tracked: bool | None = None
    patching_disabled: bool | None = None
    repotracker_disabled: bool | None = None
    dispatching_disabled: bool | None = None
    disabled_stats_cache: bool | None = None
    admins: list[str] = Field(default_factory=list)
    commit_queue: CommitQueue | None = None
    task_sync: TaskSync | None = None
