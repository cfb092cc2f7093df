"""Unit tests for the pagination engine.

Tests fetch_all / PageStream with:
- Page walking driven by Link "next" cursors
- Request counts (one request per page, none at stream creation)
- Eager/lazy equivalence
- Empty pages with and without a cursor
- Mid-walk transport and decode failures
"""

import asyncio
from functools import partial

import httpx
import pytest

from evg_client.errors import DecodeError, TransportError
from evg_client.models import EvgModel, decode_batch
from evg_client.pagination import PageStream, fetch_all, read_page


class Item(EvgModel):
    id: int


decode_items = partial(decode_batch, Item)


def _page_url(n: int) -> str:
    return f"https://evg.example.com/rest/v2/things?start_at={n}"


class FakePages:
    """Serves a fixed list of pages; page i links to page i+1."""

    def __init__(self, pages, bodies=None, fail_at=None):
        self.pages = pages
        self.bodies = bodies or {}
        self.fail_at = fail_at
        self.calls: list[str] = []

    async def fetch(self, url: str) -> httpx.Response:
        self.calls.append(url)
        index = int(url.rsplit("=", 1)[1])
        if index == self.fail_at:
            raise TransportError(f"Request to {url} failed: connection reset")
        headers = {}
        if index + 1 < len(self.pages):
            headers["Link"] = f'<{_page_url(index + 1)}>; rel="next"'
        if index in self.bodies:
            return httpx.Response(200, headers=headers, content=self.bodies[index])
        return httpx.Response(
            200, headers=headers, json=[{"id": i} for i in self.pages[index]]
        )


class TestReadPage:
    @pytest.mark.asyncio
    async def test_reads_items_and_cursor(self):
        fake = FakePages([[1, 2], [3]])
        page = await read_page(fake.fetch, _page_url(0), decode_items)
        assert [item.id for item in page.items] == [1, 2]
        assert page.next_url == _page_url(1)

    @pytest.mark.asyncio
    async def test_last_page_has_no_cursor(self):
        fake = FakePages([[1]])
        page = await read_page(fake.fetch, _page_url(0), decode_items)
        assert page.next_url is None

    @pytest.mark.asyncio
    async def test_malformed_link_header_ends_pagination(self):
        """A malformed Link header ends pagination instead of failing."""

        async def fetch(url):
            return httpx.Response(200, headers={"Link": "<<broken"}, json=[{"id": 1}])

        page = await read_page(fetch, _page_url(0), decode_items)
        assert [item.id for item in page.items] == [1]
        assert page.next_url is None


class TestFetchAll:
    """Test eager pagination."""

    @pytest.mark.asyncio
    async def test_concatenates_pages_in_order(self):
        fake = FakePages([[1, 2], [3, 4], [5]])
        items = await fetch_all(fake.fetch, _page_url(0), decode_items)
        assert [item.id for item in items] == [1, 2, 3, 4, 5]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("page_count", [1, 2, 5])
    async def test_one_request_per_page(self, page_count):
        fake = FakePages([[i] for i in range(page_count)])
        await fetch_all(fake.fetch, _page_url(0), decode_items)
        assert fake.calls == [_page_url(i) for i in range(page_count)]

    @pytest.mark.asyncio
    async def test_empty_page_with_cursor_continues(self):
        fake = FakePages([[1], [], [], [2]])
        items = await fetch_all(fake.fetch, _page_url(0), decode_items)
        assert [item.id for item in items] == [1, 2]
        assert len(fake.calls) == 4

    @pytest.mark.asyncio
    async def test_empty_last_page_terminates(self):
        fake = FakePages([[1, 2], []])
        items = await fetch_all(fake.fetch, _page_url(0), decode_items)
        assert [item.id for item in items] == [1, 2]

    @pytest.mark.asyncio
    async def test_single_empty_page(self):
        fake = FakePages([[]])
        assert await fetch_all(fake.fetch, _page_url(0), decode_items) == []

    @pytest.mark.asyncio
    async def test_decode_failure_on_page_two(self):
        """A bad page aborts the walk with DecodeError and no partial result."""
        fake = FakePages([[1], [2], [3]], bodies={1: b'{"error": "not a list"}'})
        with pytest.raises(DecodeError):
            await fetch_all(fake.fetch, _page_url(0), decode_items)
        assert len(fake.calls) == 2

    @pytest.mark.asyncio
    async def test_transport_failure_propagates(self):
        fake = FakePages([[1], [2]], fail_at=1)
        with pytest.raises(TransportError):
            await fetch_all(fake.fetch, _page_url(0), decode_items)


class TestPageStream:
    """Test lazy pagination."""

    @pytest.mark.asyncio
    async def test_no_request_until_first_pull(self):
        fake = FakePages([[1], [2]])
        stream = PageStream(fake.fetch, _page_url(0), decode_items)
        assert fake.calls == []
        assert stream.pages_fetched == 0

        first = await stream.__anext__()
        assert first.id == 1
        assert fake.calls == [_page_url(0)]

    @pytest.mark.asyncio
    async def test_fetches_next_page_only_when_batch_consumed(self):
        fake = FakePages([[1, 2], [3]])
        stream = PageStream(fake.fetch, _page_url(0), decode_items)

        assert (await stream.__anext__()).id == 1
        assert (await stream.__anext__()).id == 2
        assert len(fake.calls) == 1

        assert (await stream.__anext__()).id == 3
        assert len(fake.calls) == 2

    @pytest.mark.asyncio
    async def test_matches_eager_result(self):
        pages = [[1, 2, 3], [], [4], [5, 6]]
        eager = await fetch_all(FakePages(pages).fetch, _page_url(0), decode_items)

        fake = FakePages(pages)
        lazy = [item async for item in PageStream(fake.fetch, _page_url(0), decode_items)]

        assert lazy == eager
        assert len(fake.calls) == len(pages)

    @pytest.mark.asyncio
    async def test_empty_stream(self):
        fake = FakePages([[]])
        stream = PageStream(fake.fetch, _page_url(0), decode_items)
        assert await stream.collect() == []
        assert stream.exhausted

    @pytest.mark.asyncio
    async def test_not_restartable(self):
        fake = FakePages([[1], [2]])
        stream = PageStream(fake.fetch, _page_url(0), decode_items)
        assert [item.id for item in await stream.collect()] == [1, 2]
        assert await stream.collect() == []
        assert len(fake.calls) == 2

    @pytest.mark.asyncio
    async def test_decode_failure_after_first_page(self):
        """Page one's items are yielded, then the pull for page two raises."""
        fake = FakePages([[1, 2], [3], [4]], bodies={1: b"<html>oops</html>"})
        stream = PageStream(fake.fetch, _page_url(0), decode_items)

        received = []
        with pytest.raises(DecodeError):
            async for item in stream:
                received.append(item.id)

        assert received == [1, 2]
        assert stream.exhausted
        assert stream.pages_fetched == 1
        # Finished for good: no further requests
        assert await stream.collect() == []
        assert len(fake.calls) == 2

    @pytest.mark.asyncio
    async def test_transport_failure_mid_stream(self):
        fake = FakePages([[1], [2], [3]], fail_at=2)
        stream = PageStream(fake.fetch, _page_url(0), decode_items)

        assert (await stream.__anext__()).id == 1
        assert (await stream.__anext__()).id == 2
        with pytest.raises(TransportError):
            await stream.__anext__()

    @pytest.mark.asyncio
    async def test_abandoned_stream_makes_no_more_requests(self):
        fake = FakePages([[1, 2], [3]])
        stream = PageStream(fake.fetch, _page_url(0), decode_items)
        async for item in stream:
            break
        assert len(fake.calls) == 1

    @pytest.mark.asyncio
    async def test_concurrent_streams_are_independent(self):
        fake_a = FakePages([[1], [2]])
        fake_b = FakePages([[10, 11], [], [12]])
        a, b = await asyncio.gather(
            PageStream(fake_a.fetch, _page_url(0), decode_items).collect(),
            PageStream(fake_b.fetch, _page_url(0), decode_items).collect(),
        )
        assert [i.id for i in a] == [1, 2]
        assert [i.id for i in b] == [10, 11, 12]
