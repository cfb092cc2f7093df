"""Typed records for Evergreen REST resources.

Each model is a pure deserialization target; decode_one() and
decode_batch() turn response bodies into models or raise DecodeError.
"""

from .base import EvgModel, decode_batch, decode_one
from .build import BuildStatusCounts, EvgBuild
from .patch import EvgPatch
from .project import CommitQueue, EvgProject, TaskSync
from .stats import EvgTaskStats, EvgTaskStatsRequest, EvgTestStats, EvgTestStatsRequest
from .task import EvgTask, EvgTaskArtifact, EvgTaskStatusDetails
from .test import EvgTest, EvgTestLog
from .version import BuildVariantStatus, EvgVersion

__all__ = [
    "BuildStatusCounts",
    "BuildVariantStatus",
    "CommitQueue",
    "EvgBuild",
    "EvgModel",
    "EvgPatch",
    "EvgProject",
    "EvgTask",
    "EvgTaskArtifact",
    "EvgTaskStats",
    "EvgTaskStatsRequest",
    "EvgTaskStatusDetails",
    "EvgTest",
    "EvgTestLog",
    "EvgTestStats",
    "EvgTestStatsRequest",
    "EvgVersion",
    "TaskSync",
    "decode_batch",
    "decode_one",
]
