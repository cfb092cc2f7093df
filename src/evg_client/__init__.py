"""evg-client - async client for the Evergreen CI REST API.

Provides:
- EvgClient: authenticated access to tasks, versions, builds, patches,
  tests, statistics and projects
- Eager (fetch_all) and lazy (PageStream) walking of Link-paginated
  collections
- Line streaming of task and test logs
- Configuration from ~/.evergreen.yml or EVG_* environment variables

Python Version: 3.10+ required
"""

from .__version__ import __version__
from .client import EvgApiClient, EvgClient
from .config import EvgConfig, get_config, reset_config
from .errors import (
    ConfigError,
    DecodeError,
    EncodingError,
    EvgClientError,
    LogNotFoundError,
    ResponseStatusError,
    TransportError,
)
from .links import Link, next_link, parse_link_header
from .logging_config import StructuredFormatter, configure_logging
from .logs import iter_lines
from .models import (
    EvgBuild,
    EvgPatch,
    EvgProject,
    EvgTask,
    EvgTaskStats,
    EvgTaskStatsRequest,
    EvgTest,
    EvgTestStats,
    EvgTestStatsRequest,
    EvgVersion,
)
from .pagination import Page, PageStream, fetch_all, read_page
from .urls import build_url

__all__ = [
    "ConfigError",
    "DecodeError",
    "EncodingError",
    "EvgApiClient",
    "EvgBuild",
    "EvgClient",
    "EvgClientError",
    "EvgConfig",
    "EvgPatch",
    "EvgProject",
    "EvgTask",
    "EvgTaskStats",
    "EvgTaskStatsRequest",
    "EvgTest",
    "EvgTestStats",
    "EvgTestStatsRequest",
    "EvgVersion",
    "Link",
    "LogNotFoundError",
    "Page",
    "PageStream",
    "ResponseStatusError",
    "StructuredFormatter",
    "TransportError",
    "__version__",
    "build_url",
    "configure_logging",
    "fetch_all",
    "get_config",
    "iter_lines",
    "next_link",
    "parse_link_header",
    "read_page",
    "reset_config",
]
