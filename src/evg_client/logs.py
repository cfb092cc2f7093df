"""Line-oriented decoding of streamed log bodies.

Log endpoints answer with a plain-text body that can be very large, so lines
are produced as chunks arrive instead of after the whole body is read.
Chunk boundaries are arbitrary; the tail after the last newline of a chunk
is carried over and prefixed onto the next one.

Known limitations:
- Each chunk is decoded on its own, so a multi-byte character split across
  two chunks fails the stream with EncodingError.
- A transport error while reading ends the stream quietly; the pending
  partial line is dropped (logged as a warning).
"""

import logging
from collections.abc import AsyncIterable, AsyncIterator

import httpx

from .errors import EncodingError

logger = logging.getLogger("evg_client.logs")

__all__ = ["LINE_DELIMITER", "iter_lines", "iter_response_lines"]

LINE_DELIMITER = "\n"


async def iter_lines(
    chunks: AsyncIterable[bytes],
    encoding: str = "utf-8",
) -> AsyncIterator[str]:
    """Yield text lines from a stream of byte chunks.

    Lines are yielded without their delimiter. When the source is exhausted
    the carried-over tail is yielded exactly once, even when empty, so the
    output matches ``body.decode().split("\\n")`` for the full body.

    Args:
        chunks: Byte chunks in arrival order
        encoding: Text encoding of the body

    Yields:
        Decoded lines in order

    Raises:
        EncodingError: If a chunk is not valid text in the given encoding.
    """
    pending = ""
    emitted = 0
    source = chunks.__aiter__()

    while True:
        try:
            chunk = await source.__anext__()
        except StopAsyncIteration:
            break
        except (httpx.TransportError, httpx.StreamError) as e:
            logger.warning(
                "evg_log_stream_truncated",
                extra={
                    "lines_emitted": emitted,
                    "pending_chars": len(pending),
                    "error": str(e),
                    "error_type": type(e).__name__,
                },
            )
            return

        try:
            text = chunk.decode(encoding)
        except UnicodeDecodeError as e:
            raise EncodingError(
                f"Log chunk is not valid {encoding} after {emitted} lines: {e}"
            ) from e

        parts = (pending + text).split(LINE_DELIMITER)
        pending = parts.pop()
        for line in parts:
            emitted += 1
            yield line

    yield pending


async def iter_response_lines(
    response: httpx.Response,
    encoding: str = "utf-8",
) -> AsyncIterator[str]:
    """Yield lines from a streamed httpx response body."""
    async for line in iter_lines(response.aiter_bytes(), encoding=encoding):
        yield line
