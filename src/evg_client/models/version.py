"""Version (mainline commit) records."""

from datetime import datetime

from .base import EvgModel

__all__ = ["BuildVariantStatus", "EvgVersion"]


class BuildVariantStatus(EvgModel):
    build_variant: str
    build_id: str


class EvgVersion(EvgModel):
    version_id: str
    create_time: datetime
    start_time: datetime | None = None
    finish_time: datetime | None = None
    revision: str
    order: int
    project: str
    author: str
    author_email: str
    message: str
    status: str
    repo: str
    branch: str
    errors: list[str] | None = None
    ignored: bool | None = None
    requester: str | None = None
    build_variants_status: list[BuildVariantStatus] | None = None
