"""
Fetch error taxonomy.

Every failure to turn a URL into a parsed document is raised as a
``FetchError`` subclass so workers can classify it without inspecting
library-specific exceptions.
"""
from typing import Optional


class FetchError(Exception):
    """Base class for classified fetch failures."""

    kind = "fetch"

    def __init__(
        self,
        url: str,
        message: str = "",
        status: Optional[int] = None,
        cause: Optional[BaseException] = None,
    ):
        self.url = url
        self.status = status
        self.cause = cause
        self.message = message or (str(cause) if cause else self.kind)
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"{self.kind}: {self.message}"


class InvalidURLError(FetchError):
    """The URL is not an absolute http(s) URL; no request was made."""

    kind = "invalid_url"


class HTTPStatusError(FetchError):
    """The server answered with a status other than 200."""

    kind = "status"

    def __init__(self, url: str, status: int, reason: str = ""):
        message = f"HTTP {status}" + (f" {reason}" if reason else "")
        super().__init__(url, message, status=status)

    @property
    def retryable(self) -> bool:
        return self.status >= 500 or self.status in (408, 429)


class TransportError(FetchError):
    """DNS, connection, TLS or timeout failure."""

    kind = "transport"


class ParseError(FetchError):
    """The body could not be decoded or parsed."""

    kind = "parse"


def is_retryable(error: BaseException) -> bool:
    """Return True if repeating the request could plausibly succeed."""
    if isinstance(error, InvalidURLError):
        return False
    if isinstance(error, HTTPStatusError):
        return error.retryable
    return isinstance(error, FetchError)


class ExtractionError(Exception):
    """Site extraction rules raised while processing a fetched page."""

    kind = "extract"

    def __init__(self, url: str, cause: BaseException):
        self.url = url
        self.cause = cause
        super().__init__(f"{type(cause).__name__}: {cause}")

    def __str__(self) -> str:
        return f"{self.kind}: {self.args[0]}"
