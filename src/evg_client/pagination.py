"""Cursor-driven pagination over Link headers.

Two ways to walk a paginated collection, built on the same page read:

- fetch_all(): eager, returns every item of every page as one list
- PageStream: lazy async iterator, fetches the next page only when the
  current one has been consumed

Each page is requested, its "next" cursor is read from the response headers,
and only then is the body decoded into a batch of items. Walking stops when
a response carries no cursor. There is no page cap: a server that hands out
a cursor cycle keeps the walk going forever.

Example:
    >>> stream = PageStream(client.get, url, decode)
    >>> async for version in stream:
    ...     print(version.version_id)
"""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

import httpx

from .links import next_link

logger = logging.getLogger("evg_client.pagination")

__all__ = ["Decode", "Fetch", "Page", "PageStream", "fetch_all", "read_page"]

T = TypeVar("T")

# Issues a GET for an absolute URL; raises TransportError on failure
Fetch = Callable[[str], Awaitable[httpx.Response]]
# Turns one response body into a batch; raises DecodeError on schema mismatch
Decode = Callable[[bytes], list[T]]


@dataclass(frozen=True)
class Page(Generic[T]):
    """One decoded page of a collection.

    Attributes:
        items: Items in response order
        next_url: Cursor to the following page, None on the last page
    """

    items: list[T]
    next_url: str | None


async def read_page(fetch: Fetch, url: str, decode: Decode[T]) -> Page[T]:
    """Fetch one page and decode it.

    The cursor is taken from the headers before the body is decoded.
    """
    response = await fetch(url)
    cursor = next_link(response.headers)
    items = decode(response.content)
    logger.debug(
        "evg_page_fetched",
        extra={"url": url, "items": len(items), "has_next": cursor is not None},
    )
    return Page(items=items, next_url=cursor)


async def fetch_all(fetch: Fetch, url: str, decode: Decode[T]) -> list[T]:
    """Walk every page starting at url and return all items in page order.

    Empty pages are not a stop signal; only a missing cursor is.

    Raises:
        TransportError: If any request fails. No partial result is returned.
        DecodeError: If any body does not decode as a batch.
    """
    items: list[T] = []
    pages = 0
    cursor: str | None = url

    while cursor is not None:
        page = await read_page(fetch, cursor, decode)
        items.extend(page.items)
        pages += 1
        cursor = page.next_url

    logger.debug(
        "evg_pagination_complete",
        extra={"url": url, "pages": pages, "items": len(items)},
    )
    return items


class PageStream(Generic[T]):
    """Lazy, single-pass stream of items across pages.

    No request is made when the stream is created; the first page is fetched
    on the first pull. Afterwards a request is issued only when the current
    batch is used up and the server supplied a cursor.

    A failed fetch or decode is raised from the pull that triggered it.
    Items already yielded stay valid, and the stream is finished from then on.
    Iterating a second time yields nothing: the stream is not restartable.

    Attributes:
        start_url: URL of the first page, including any initial filters
        pages_fetched: Number of pages successfully read so far
    """

    def __init__(self, fetch: Fetch, url: str, decode: Decode[T]) -> None:
        self.start_url = url
        self.pages_fetched = 0
        self._fetch = fetch
        self._decode = decode
        self._batch: list[T] = []
        self._index = 0
        self._next_url: str | None = url
        self._exhausted = False

    @property
    def exhausted(self) -> bool:
        """True once the stream has ended, normally or through a failure."""
        return self._exhausted

    def __aiter__(self) -> "PageStream[T]":
        return self

    async def __anext__(self) -> T:
        # Loop so that empty pages with a cursor are skipped over
        while self._index >= len(self._batch):
            if self._exhausted or self._next_url is None:
                self._finish()
                raise StopAsyncIteration
            await self._advance()

        item = self._batch[self._index]
        self._index += 1
        return item

    async def _advance(self) -> None:
        url = self._next_url
        try:
            page = await read_page(self._fetch, url, self._decode)
        except Exception as e:
            logger.warning(
                "evg_page_stream_failed",
                extra={
                    "url": url,
                    "pages_fetched": self.pages_fetched,
                    "error": str(e),
                    "error_type": type(e).__name__,
                },
            )
            self._finish()
            raise

        self._batch = page.items
        self._index = 0
        self._next_url = page.next_url
        self.pages_fetched += 1

    def _finish(self) -> None:
        if not self._exhausted:
            logger.debug(
                "evg_page_stream_finished",
                extra={"url": self.start_url, "pages_fetched": self.pages_fetched},
            )
        self._exhausted = True
        self._batch = []
        self._index = 0
        self._next_url = None

    async def collect(self) -> list[T]:
        """Drain the remaining items into a list."""
        return [item async for item in self]
