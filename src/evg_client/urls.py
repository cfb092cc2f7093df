"""Endpoint URL construction for the Evergreen REST API.

Identifiers are embedded verbatim: callers pass ids that are already URL-safe
(task ids, build ids, project identifiers). Ids containing reserved URL
characters are outside the supported contract.
"""

from collections.abc import Mapping
from typing import Any

import httpx

__all__ = ["API_PREFIX", "build_url", "child_url", "collection_url", "with_query"]

API_PREFIX = "rest/v2"


def collection_url(host: str, resource_kind: str) -> str:
    """Build the URL of a top-level collection (e.g. all projects)."""
    return f"{host}/{API_PREFIX}/{resource_kind}"


def build_url(host: str, resource_kind: str, identifier: str) -> str:
    """Build the absolute URL of a single resource.

    Example:
        >>> build_url("https://evergreen.mongodb.com", "tasks", "t1")
        'https://evergreen.mongodb.com/rest/v2/tasks/t1'
    """
    return f"{host}/{API_PREFIX}/{resource_kind}/{identifier}"


def child_url(host: str, resource_kind: str, identifier: str, collection: str) -> str:
    """Build the URL of a collection nested under a resource (e.g. a task's tests)."""
    return f"{build_url(host, resource_kind, identifier)}/{collection}"


def with_query(url: str, params: Mapping[str, Any]) -> str:
    """Append query parameters to an initial request URL.

    None values are dropped so optional filters can be passed through as-is.
    Only used on the first request of a walk; cursors returned by the server
    already carry the filters.
    """
    present = {k: v for k, v in params.items() if v is not None}
    if not present:
        return url
    return str(httpx.URL(url).copy_merge_params(present))
