"""Test result records."""

from datetime import datetime

from .base import EvgModel

__all__ = ["EvgTest", "EvgTestLog"]


class EvgTestLog(EvgModel):
    """Log locations of a single test result."""

    url: str
    line_num: int
    url_raw: str
    log_id: str | None = None
    url_raw_display: str | None = None
    url_html_display: str | None = None


class EvgTest(EvgModel):
    task_id: str
    status: str
    test_file: str
    exit_code: int
    start_time: datetime
    end_time: datetime
    logs: EvgTestLog
    duration: float
