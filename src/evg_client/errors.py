"""Exception hierarchy for evg-client.

Every error raised by the client derives from EvgClientError so callers can
catch a single type. Nothing in this package retries; errors surface at the
call (or, for lazy streams, the pull) that triggered them.
"""

__all__ = [
    "ConfigError",
    "DecodeError",
    "EncodingError",
    "EvgClientError",
    "HeaderParseError",
    "LogNotFoundError",
    "ResponseStatusError",
    "TransportError",
]


class EvgClientError(Exception):
    """Base class for all evg-client errors."""

    pass


class ConfigError(EvgClientError):
    """Raised when the credentials file cannot be read or validated."""

    pass


class TransportError(EvgClientError):
    """Raised when a request could not be sent or no response was received.

    Wraps httpx errors for consistent error handling.
    """

    pass


class ResponseStatusError(TransportError):
    """Raised when the API answers with a non-success status code.

    Attributes:
        status_code: HTTP status returned by the server
        url: Request URL that produced the status
    """

    def __init__(self, status_code: int, url: str, message: str = ""):
        self.status_code = status_code
        self.url = url
        detail = f": {message}" if message else ""
        super().__init__(f"Evergreen API error {status_code} for {url}{detail}")


class DecodeError(EvgClientError):
    """Raised when a response body does not match the expected shape."""

    pass


class EncodingError(EvgClientError):
    """Raised when a log chunk is not valid text in the expected encoding."""

    pass


class LogNotFoundError(EvgClientError, KeyError):
    """Raised when a task carries no log under the requested name."""

    def __init__(self, log_name: str, available: list[str]):
        self.log_name = log_name
        self.available = available
        super().__init__(
            f"Unknown log {log_name!r}; available: {', '.join(available) or 'none'}"
        )

    def __str__(self) -> str:
        return self.args[0]


class HeaderParseError(ValueError):
    """Raised by the Link header parser on malformed input.

    Internal: next_link() swallows it and treats the page as the last one.
    """

    pass
