"""Test and task statistics: query parameters and result rows.

The stats endpoints answer a query with one complete result set; they are
not walked with cursors.
"""

from pydantic import BaseModel, ConfigDict

from .base import EvgModel

__all__ = [
    "EvgTaskStats",
    "EvgTaskStatsRequest",
    "EvgTestStats",
    "EvgTestStatsRequest",
]


class _StatsRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    def to_params(self) -> dict[str, str]:
        """Serialize as query parameters: None fields dropped, bools lower-cased."""
        params: dict[str, str] = {}
        for name, value in self.model_dump(exclude_none=True).items():
            if isinstance(value, bool):
                params[name] = "true" if value else "false"
            else:
                params[name] = str(value)
        return params


class EvgTestStatsRequest(_StatsRequest):
    """Query for /projects/{id}/test_stats.

    Attributes:
        after_date: Start of the window (YYYY-MM-DD)
        before_date: End of the window (YYYY-MM-DD)
        group_days: Group results into a single bucket instead of per day
        group_by_test: Aggregate across tasks and variants per test
        variant: Build variant filter
        task_name: Task name filter
        test_name: Optional test file filter
        presto: Query the presto-backed stats store
    """

    after_date: str = ""
    before_date: str = ""
    group_days: bool = False
    group_by_test: bool = False
    variant: str = ""
    task_name: str = ""
    test_name: str | None = None
    presto: bool = False


class EvgTestStats(EvgModel):
    test_file: str
    task_name: str
    variant: str
    distro: str | None = None
    date: str
    num_pass: int
    num_fail: int
    avg_duration_pass: float


class EvgTaskStatsRequest(_StatsRequest):
    """Query for /projects/{id}/task_stats."""

    after_date: str = ""
    before_date: str = ""
    group_num_days: int = 1
    variants: str = ""
    tasks: str = ""


class EvgTaskStats(EvgModel):
    task_name: str
    variant: str
    distro: str | None = None
    date: str
    num_success: int
    num_failed: int
    num_total: int
    num_timeout: int
    num_test_failed: int
    num_system_failed: int
    num_setup_failed: int
    avg_duration_success: float

    def pass_rate(self) -> float:
        """Share of successful runs, 0.0 when there were no runs."""
        if self.num_total == 0:
            return 0.0
        return self.num_success / self.num_total
