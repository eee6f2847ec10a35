"""
HTTP fetcher.

Turns a URL into a parsed scrapy ``TextResponse`` (``HtmlResponse`` for
pages, plain ``TextResponse`` for JSON APIs) so site rules can query it
with ``.css()``/``.xpath()``/``.json()`` exactly as a spider callback would.
One ``Fetcher`` is shared by all workers of a run; its connection pool is
the only shared mutable resource.
"""
import logging
import time
from typing import Dict, Mapping, Optional
from urllib.parse import urlparse

import requests
from requests.adapters import HTTPAdapter
from scrapy.http import HtmlResponse, TextResponse
from urllib3.exceptions import HTTPError as Urllib3Error

from mediaparse.errors import (
    HTTPStatusError,
    InvalidURLError,
    ParseError,
    TransportError,
)


logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36"
)

DEFAULT_HEADERS = {
    "Accept": (
        "text/html,application/xhtml+xml,"
        "application/xml;q=0.9,image/avif,image/webp,*/*;q=0.8"
    ),
    "Accept-Language": "ru-RU,ru;q=0.9,en-US;q=0.8,en;q=0.7",
}

JSON_HEADERS = {"Accept": "application/json"}

CHUNK_SIZE = 64 * 1024

Document = TextResponse


def validate_url(url: str) -> None:
    """Raise InvalidURLError unless ``url`` is an absolute http(s) URL."""
    if not url or not isinstance(url, str):
        raise InvalidURLError(str(url), "empty url")
    try:
        parsed = urlparse(url)
        host = parsed.hostname
    except ValueError as e:
        raise InvalidURLError(url, "malformed url", cause=e) from e
    if parsed.scheme not in ("http", "https"):
        raise InvalidURLError(url, f"unsupported scheme '{parsed.scheme}'")
    if not host:
        raise InvalidURLError(url, "missing host")


def build_document(
    url: str,
    body: bytes,
    headers: Optional[Mapping[str, str]] = None,
    kind: str = "html",
    encoding: Optional[str] = None,
    status: int = 200,
) -> Document:
    """
    Wrap a response body into a parsed document.

    Parsing is forced here so malformed bodies surface as ParseError
    instead of failing later inside extraction rules.
    """
    response_cls = HtmlResponse if kind == "html" else TextResponse
    try:
        document = response_cls(
            url=url,
            status=status,
            headers=dict(headers or {}),
            body=body,
            encoding=encoding,
        )
        if kind == "json":
            document.json()
        else:
            document.selector.root
    except Exception as e:
        raise ParseError(url, f"cannot parse {kind} body: {e}", cause=e) from e
    return document


def build_session(
    user_agent: str = DEFAULT_USER_AGENT,
    max_idle_connections: int = 100,
    max_connections_per_host: int = 10,
    headers: Optional[Dict[str, str]] = None,
) -> requests.Session:
    """Create a session whose pool blocks instead of exceeding the host limit."""
    session = requests.Session()
    adapter = HTTPAdapter(
        pool_connections=max_idle_connections,
        pool_maxsize=max_connections_per_host,
        pool_block=True,
        max_retries=0,
    )
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    session.headers.update(DEFAULT_HEADERS)
    session.headers["User-Agent"] = user_agent
    if headers:
        session.headers.update(headers)
    return session


class Fetcher:
    """Thread-safe HTTP GET returning parsed documents or raising FetchError."""

    def __init__(
        self,
        timeout: float = 30.0,
        user_agent: str = DEFAULT_USER_AGENT,
        max_idle_connections: int = 100,
        max_connections_per_host: int = 10,
        headers: Optional[Dict[str, str]] = None,
        session: Optional[requests.Session] = None,
    ):
        self.timeout = timeout
        self.max_connections_per_host = max_connections_per_host
        self.session = session or build_session(
            user_agent=user_agent,
            max_idle_connections=max_idle_connections,
            max_connections_per_host=max_connections_per_host,
            headers=headers,
        )

    def fetch(self, url: str, kind: str = "html", encoding: Optional[str] = None) -> Document:
        validate_url(url)
        extra_headers = JSON_HEADERS if kind == "json" else None
        deadline = time.monotonic() + self.timeout
        try:
            with self.session.get(
                url,
                headers=extra_headers,
                timeout=self.timeout,
                allow_redirects=True,
                stream=True,
            ) as response:
                if response.status_code != 200:
                    raise HTTPStatusError(url, response.status_code, response.reason or "")
                body = self.read_body(url, response, deadline)
                final_url = response.url or url
                headers = dict(response.headers)
        except (requests.RequestException, Urllib3Error) as e:
            raise TransportError(url, cause=e) from e

        logger.debug(f"Fetched {url} ({len(body)} bytes)")
        return build_document(final_url, body, headers, kind=kind, encoding=encoding)

    def read_body(self, url: str, response, deadline: float) -> bytes:
        """
        Read a streamed body, giving up once ``deadline`` passes.

        The requests timeout only bounds each socket read. ``read1`` returns
        after at most one read, so the deadline is checked as bytes arrive.
        """
        chunks = []
        while True:
            chunk = response.raw.read1(CHUNK_SIZE, decode_content=True)
            if not chunk:
                break
            chunks.append(chunk)
            if time.monotonic() > deadline:
                raise TransportError(url, f"timed out after {self.timeout:g}s")
        return b"".join(chunks)

    def close(self) -> None:
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()
