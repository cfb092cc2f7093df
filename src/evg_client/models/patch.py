"""Patch records."""

from datetime import datetime

from .base import EvgModel

__all__ = ["EvgPatch"]


class EvgPatch(EvgModel):
    patch_id: str
    description: str
    project_id: str
    project_identifier: str
    branch: str
    git_hash: str
    patch_number: int
    author: str
    version: str
    status: str
    create_time: datetime
    start_time: datetime | None = None
    finish_time: datetime | None = None
