"""Evergreen REST API client.

Provides an async httpx-based client for the Evergreen REST API v2 with
static Api-User / Api-Key authentication. Implements Link header pagination
(eager and lazy) and line streaming of task and test logs.

Nothing here retries, rate limits or caches: a failed request surfaces to
the caller immediately. Requests carry no timeout unless EvgConfig.timeout
is set, so a hung server suspends the awaiting caller indefinitely.

Reference: https://github.com/evergreen-ci/evergreen/wiki/REST-V2-Usage
"""

import logging
from collections.abc import AsyncIterator
from functools import partial
from pathlib import Path
from typing import Any, Protocol

import httpx

from .__version__ import __version__
from .config import EvgConfig, get_config
from .errors import LogNotFoundError, ResponseStatusError, TransportError
from .logs import iter_response_lines
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
    decode_batch,
    decode_one,
)
from .pagination import PageStream, fetch_all
from .urls import build_url, child_url, collection_url, with_query

logger = logging.getLogger("evg_client.client")

__all__ = ["EvgApiClient", "EvgClient"]

# Requester filter used for mainline (commit-triggered) versions
GITTER_REQUESTER = "gitter_request"


class EvgApiClient(Protocol):
    """Operations offered by an Evergreen API client.

    EvgClient implements this; tests and callers can supply any other
    object with the same shape.
    """

    async def get_task(self, task_id: str) -> EvgTask: ...

    async def get_version(self, version_id: str) -> EvgVersion: ...

    async def get_build(self, build_id: str) -> EvgBuild | None: ...

    async def get_tests(self, task_id: str) -> list[EvgTest]: ...

    async def get_test_stats(
        self, project_id: str, query: EvgTestStatsRequest
    ) -> list[EvgTestStats]: ...

    async def get_task_stats(
        self, project_id: str, query: EvgTaskStatsRequest
    ) -> list[EvgTaskStats]: ...

    def stream_versions(self, project_id: str) -> AsyncIterator[EvgVersion]: ...

    def stream_user_patches(
        self, user_id: str, limit: int | None = None
    ) -> AsyncIterator[EvgPatch]: ...

    def stream_project_patches(
        self, project_id: str, limit: int | None = None
    ) -> AsyncIterator[EvgPatch]: ...

    def stream_build_tasks(
        self, build_id: str, status: str | None = None
    ) -> AsyncIterator[EvgTask]: ...

    def stream_log(self, task: EvgTask, log_name: str) -> AsyncIterator[str]: ...

    def stream_test_log(self, test: EvgTest) -> AsyncIterator[str]: ...


class EvgClient:
    """Evergreen REST API client using httpx with Api-User/Api-Key headers.

    Uses one long-lived httpx.AsyncClient shared by every call and stream, so
    several calls may run concurrently on the same instance. Each stream
    owns its own cursor and buffer state.

    Lazy streams (stream_*) make no request when created; the first page or
    log chunk is requested on the first pull.

    Attributes:
        config: EvgConfig with credentials and API host
        base_url: API server host, without trailing slash

    Example:
        >>> async with EvgClient.from_file("~/.evergreen.yml") as client:
        ...     task = await client.get_task("my_task_id")
        ...     async for line in client.stream_log(task, "task_log"):
        ...         print(line)
    """

    def __init__(
        self,
        config: EvgConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            config: Optional EvgConfig. Uses get_config() if not provided.
            transport: Optional httpx transport, e.g. httpx.MockTransport in tests
        """
        self.config = config or get_config()
        self.base_url = self.config.api_server_host

        self._client = httpx.AsyncClient(
            headers={
                **self.config.auth_headers(),
                "Accept": "application/json",
                "User-Agent": f"evg-client/{__version__}",
            },
            timeout=httpx.Timeout(self.config.timeout),
            transport=transport,
        )

    @classmethod
    def from_file(
        cls,
        path: Path | str,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "EvgClient":
        """Create a client from an Evergreen auth file."""
        return cls(EvgConfig.from_file(path), transport=transport)

    async def __aenter__(self) -> "EvgClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the httpx client and release connections."""
        await self._client.aclose()

    # --- Single objects ---

    async def get_task(self, task_id: str) -> EvgTask:
        """Get details about a task.

        Raises:
            ResponseStatusError: If the task does not exist (404) or the API
                answers with another error status
            TransportError: If the request fails
            DecodeError: If the body is not a task
        """
        response = await self._get(build_url(self.base_url, "tasks", task_id))
        return decode_one(EvgTask, response.content)

    async def get_version(self, version_id: str) -> EvgVersion:
        """Get details about a version. A missing version is an error."""
        response = await self._get(build_url(self.base_url, "versions", version_id))
        return decode_one(EvgVersion, response.content)

    async def get_build(self, build_id: str) -> EvgBuild | None:
        """Get details about a build.

        Returns:
            The build, or None when the API reports it does not exist.
        """
        url = build_url(self.base_url, "builds", build_id)
        response = await self._send(url)
        if response.status_code == httpx.codes.NOT_FOUND:
            logger.info("evg_build_not_found", extra={"build_id": build_id})
            return None
        self._raise_for_status(response)
        return decode_one(EvgBuild, response.content)

    # --- Eager collections ---

    async def get_tests(self, task_id: str) -> list[EvgTest]:
        """Get every test result of a task, walking all pages."""
        url = child_url(self.base_url, "tasks", task_id, "tests")
        return await fetch_all(self._get, url, partial(decode_batch, EvgTest))

    async def get_projects(self) -> list[EvgProject]:
        """Get every project visible to the authenticated user."""
        url = collection_url(self.base_url, "projects")
        return await fetch_all(self._get, url, partial(decode_batch, EvgProject))

    async def get_test_stats(
        self,
        project_id: str,
        query: EvgTestStatsRequest,
    ) -> list[EvgTestStats]:
        """Get test statistics of a project for the given query.

        The endpoint answers with one complete result set; no cursor is
        followed.
        """
        url = child_url(self.base_url, "projects", project_id, "test_stats")
        response = await self._get(url, params=query.to_params())
        return decode_batch(EvgTestStats, response.content)

    async def get_task_stats(
        self,
        project_id: str,
        query: EvgTaskStatsRequest,
    ) -> list[EvgTaskStats]:
        """Get task statistics of a project for the given query."""
        url = child_url(self.base_url, "projects", project_id, "task_stats")
        response = await self._get(url, params=query.to_params())
        return decode_batch(EvgTaskStats, response.content)

    # --- Lazy collections ---

    def stream_versions(self, project_id: str) -> PageStream[EvgVersion]:
        """Stream the mainline versions of a project, newest first."""
        url = with_query(
            child_url(self.base_url, "projects", project_id, "versions"),
            {"requester": GITTER_REQUESTER},
        )
        return PageStream(self._get, url, partial(decode_batch, EvgVersion))

    def stream_user_patches(
        self,
        user_id: str,
        limit: int | None = None,
    ) -> PageStream[EvgPatch]:
        """Stream the patches submitted by a user.

        Args:
            user_id: Evergreen user id
            limit: Page size requested from the server. The stream itself is
                not truncated; it still follows every cursor.
        """
        url = with_query(
            child_url(self.base_url, "users", user_id, "patches"),
            {"limit": limit},
        )
        return PageStream(self._get, url, partial(decode_batch, EvgPatch))

    def stream_project_patches(
        self,
        project_id: str,
        limit: int | None = None,
    ) -> PageStream[EvgPatch]:
        """Stream the patches of a project. See stream_user_patches for limit."""
        url = with_query(
            child_url(self.base_url, "projects", project_id, "patches"),
            {"limit": limit},
        )
        return PageStream(self._get, url, partial(decode_batch, EvgPatch))

    def stream_build_tasks(
        self,
        build_id: str,
        status: str | None = None,
    ) -> PageStream[EvgTask]:
        """Stream the tasks of a build, optionally filtered by status."""
        url = with_query(
            child_url(self.base_url, "builds", build_id, "tasks"),
            {"status": status},
        )
        return PageStream(self._get, url, partial(decode_batch, EvgTask))

    def stream_projects(self) -> PageStream[EvgProject]:
        """Stream every project visible to the authenticated user."""
        url = collection_url(self.base_url, "projects")
        return PageStream(self._get, url, partial(decode_batch, EvgProject))

    # --- Logs ---

    def stream_log(self, task: EvgTask, log_name: str) -> AsyncIterator[str]:
        """Stream a task-level log line by line.

        Args:
            task: Task whose ``logs`` mapping names the log URL
            log_name: Key into ``task.logs`` (e.g. "task_log", "agent_log")

        Raises:
            LogNotFoundError: Immediately, if the task has no such log.
        """
        try:
            log_url = task.logs[log_name]
        except KeyError:
            raise LogNotFoundError(log_name, sorted(task.logs)) from None
        return self._stream_lines(with_query(log_url, {"text": "true"}))

    def stream_test_log(self, test: EvgTest) -> AsyncIterator[str]:
        """Stream the raw log of a test result line by line."""
        return self._stream_lines(test.logs.url_raw)

    # --- Core HTTP methods ---

    async def _send(self, url: str, params: dict[str, str] | None = None) -> httpx.Response:
        """Issue a GET and return the response whatever its status.

        Raises:
            TransportError: If no response was received.
        """
        try:
            response = await self._client.get(url, params=params)
        except httpx.HTTPError as e:
            logger.error(
                "evg_request_failed",
                extra={"url": url, "error": str(e), "error_type": type(e).__name__},
            )
            raise TransportError(f"Request to {url} failed: {e}") from e

        logger.debug(
            "evg_request",
            extra={"url": url, "status_code": response.status_code},
        )
        return response

    async def _get(self, url: str, params: dict[str, str] | None = None) -> httpx.Response:
        """Issue a GET and require a success status."""
        response = await self._send(url, params=params)
        self._raise_for_status(response)
        return response

    @staticmethod
    def _raise_for_status(response: httpx.Response) -> None:
        if response.is_success:
            return

        message = ""
        try:
            body = response.json()
            if isinstance(body, dict):
                message = str(body.get("message") or body.get("error") or "")
        except ValueError:
            message = response.text[:200]

        logger.warning(
            "evg_error_status",
            extra={"url": str(response.request.url), "status_code": response.status_code},
        )
        raise ResponseStatusError(response.status_code, str(response.request.url), message)

    async def _stream_lines(self, url: str) -> AsyncIterator[str]:
        """Request url and yield its body as text lines while it arrives."""
        try:
            async with self._client.stream("GET", url) as response:
                if not response.is_success:
                    await response.aread()
                    self._raise_for_status(response)
                async for line in iter_response_lines(response):
                    yield line
        except httpx.HTTPError as e:
            logger.error(
                "evg_log_request_failed",
                extra={"url": url, "error": str(e), "error_type": type(e).__name__},
            )
            raise TransportError(f"Log request to {url} failed: {e}") from e
