"""Link header parsing for cursor-based pagination.

The Evergreen API paginates collections with an RFC 8288 style header:

    Link: <https://evergreen.example.com/rest/v2/tasks/t1/tests?start_at=abc&limit=100>; rel="next"

Only the existence and value of the "next" relation matter to callers. The
parser fails open: an absent, malformed or next-less header all mean "this
was the last page".
"""

import logging
import re
from collections.abc import Mapping
from typing import NamedTuple

from .errors import HeaderParseError

logger = logging.getLogger("evg_client.links")

__all__ = ["LINK_HEADER", "Link", "next_link", "parse_link_header"]

LINK_HEADER = "Link"

_SEPARATOR_RE = re.compile(r"[\s,]*")
_TARGET_RE = re.compile(r"\s*<([^>]*)>\s*")
_PARAM_RE = re.compile(
    r";\s*([!#$%&'*+.^_`|~0-9A-Za-z-]+)\s*"
    r"(?:=\s*(\"(?:[^\"\\]|\\.)*\"|[^;,\s\"]*))?\s*"
)
_ESCAPE_RE = re.compile(r"\\(.)")


class Link(NamedTuple):
    """One (target, relation) pair from a Link header.

    Attributes:
        uri: Link target as sent by the server
        rel: Lower-cased relation type, or None when the link has no rel
    """

    uri: str
    rel: str | None


def parse_link_header(value: str) -> list[Link]:
    """Parse a Link header value into (uri, rel) pairs, in header order.

    A link carrying several space-separated relations (rel="next last")
    produces one pair per relation.

    Raises:
        HeaderParseError: If the value is not valid link syntax.
    """
    links: list[Link] = []
    pos = 0
    end = len(value)

    while True:
        pos = _SEPARATOR_RE.match(value, pos).end()
        if pos >= end:
            break

        target = _TARGET_RE.match(value, pos)
        if target is None:
            raise HeaderParseError(f"expected '<uri>' at offset {pos}: {value!r}")
        uri = target.group(1).strip()
        if not uri:
            raise HeaderParseError(f"empty link target at offset {pos}")
        pos = target.end()

        rels: list[str] | None = None
        while (param := _PARAM_RE.match(value, pos)) is not None:
            name = param.group(1).lower()
            raw = param.group(2) or ""
            if raw.startswith('"'):
                raw = _ESCAPE_RE.sub(r"\1", raw[1:-1])
            # Only the first rel parameter counts
            if name == "rel" and rels is None:
                rels = raw.lower().split()
            pos = param.end()

        if pos < end and value[pos] != ",":
            raise HeaderParseError(f"unexpected {value[pos]!r} at offset {pos}")

        if rels:
            links.extend(Link(uri, rel) for rel in rels)
        else:
            links.append(Link(uri, None))

    return links


def next_link(headers: Mapping[str, str]) -> str | None:
    """Return the "next" page URL from response headers, if any.

    Args:
        headers: Response headers (httpx.Headers or a plain mapping)

    Returns:
        The next page URL, or None when the header is absent, malformed,
        or has no "next" relation.
    """
    value = headers.get(LINK_HEADER) or headers.get(LINK_HEADER.lower())
    if not value:
        return None

    try:
        links = parse_link_header(value)
    except HeaderParseError as e:
        logger.debug("evg_link_header_unparseable", extra={"error": str(e)})
        return None

    for link in links:
        if link.rel == "next":
            return link.uri
    return None
