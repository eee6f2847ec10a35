import time
from unittest.mock import MagicMock

import pytest
import requests
from scrapy.http import HtmlResponse, TextResponse
from urllib3.exceptions import ProtocolError

from mediaparse.errors import (
    HTTPStatusError,
    InvalidURLError,
    ParseError,
    TransportError,
    is_retryable,
)
from mediaparse.fetcher import Fetcher, build_document, build_session, validate_url


URL = "https://news.example.com/a"


def make_session(status=200, body=b"<html><body><h1>Hi</h1></body></html>",
                 content_type="text/html; charset=utf-8", url=URL, reason="OK"):
    session = MagicMock()
    response = MagicMock()
    response.status_code = status
    response.reason = reason
    response.raw.read1.side_effect = [body, b""]
    response.url = url
    response.headers = {"Content-Type": content_type}
    session.get.return_value.__enter__.return_value = response
    return session


@pytest.mark.parametrize("url", [
    "",
    "not a url",
    "ftp://example.com/file",
    "mailto:someone@example.com",
    "http://",
    "http://[::1",
])
def test_validate_url_rejects(url):
    with pytest.raises(InvalidURLError):
        validate_url(url)


def test_invalid_url_makes_no_request():
    session = make_session()
    fetcher = Fetcher(session=session)

    with pytest.raises(InvalidURLError) as exc_info:
        fetcher.fetch("://broken")

    session.get.assert_not_called()
    assert exc_info.value.kind == "invalid_url"
    assert not is_retryable(exc_info.value)


def test_fetch_returns_html_document():
    session = make_session()
    fetcher = Fetcher(session=session, timeout=5)

    document = fetcher.fetch(URL)

    assert isinstance(document, HtmlResponse)
    assert document.css("h1::text").get() == "Hi"
    _, kwargs = session.get.call_args
    assert kwargs["timeout"] == 5
    assert kwargs["allow_redirects"] is True
    assert kwargs["stream"] is True


def test_fetch_uses_final_url_after_redirect():
    session = make_session(url="https://news.example.com/final")
    document = Fetcher(session=session).fetch(URL)
    assert document.url == "https://news.example.com/final"
    assert document.urljoin("b") == "https://news.example.com/b"


def test_fetch_releases_response():
    session = make_session()
    Fetcher(session=session).fetch(URL)
    assert session.get.return_value.__exit__.called


@pytest.mark.parametrize("status,retryable", [(404, False), (403, False), (500, True), (503, True), (429, True)])
def test_non_200_status_is_status_error(status, retryable):
    session = make_session(status=status, reason="Reason")

    with pytest.raises(HTTPStatusError) as exc_info:
        Fetcher(session=session).fetch(URL)

    error = exc_info.value
    assert error.status == status
    assert error.kind == "status"
    assert str(error) == f"status: HTTP {status} Reason"
    assert is_retryable(error) is retryable
    assert session.get.return_value.__exit__.called


@pytest.mark.parametrize("exc", [
    requests.ConnectionError("connection refused"),
    requests.Timeout("read timed out"),
    requests.exceptions.SSLError("bad certificate"),
])
def test_transport_failures(exc):
    session = MagicMock()
    session.get.side_effect = exc

    with pytest.raises(TransportError) as exc_info:
        Fetcher(session=session).fetch(URL)

    assert exc_info.value.cause is exc
    assert exc_info.value.url == URL
    assert is_retryable(exc_info.value)


def test_json_kind_sends_accept_header():
    session = make_session(body=b'{"items": []}', content_type="application/json")

    document = Fetcher(session=session).fetch(URL, kind="json")

    assert isinstance(document, TextResponse)
    assert document.json() == {"items": []}
    _, kwargs = session.get.call_args
    assert kwargs["headers"] == {"Accept": "application/json"}


def test_malformed_json_is_parse_error():
    session = make_session(body=b"<html>not json</html>", content_type="application/json")

    with pytest.raises(ParseError) as exc_info:
        Fetcher(session=session).fetch(URL, kind="json")

    assert exc_info.value.kind == "parse"


def test_forced_encoding():
    body = "<html><body><h1>Новости</h1></body></html>".encode("windows-1251")
    session = make_session(body=body, content_type="text/html")

    document = Fetcher(session=session).fetch(URL, encoding="windows-1251")

    assert document.css("h1::text").get() == "Новости"


def test_build_session_pool_settings():
    session = build_session(user_agent="test-agent", max_idle_connections=7, max_connections_per_host=3)
    adapter = session.get_adapter("https://example.com")

    assert session.headers["User-Agent"] == "test-agent"
    assert "ru-RU" in session.headers["Accept-Language"]
    assert adapter._pool_connections == 7
    assert adapter._pool_maxsize == 3
    assert adapter._pool_block is True
    session.close()


def test_fetcher_context_manager_closes_session():
    session = make_session()
    with Fetcher(session=session) as fetcher:
        fetcher.fetch(URL)
    session.close.assert_called_once()


def test_build_document_json_and_html_kinds():
    html = build_document(URL, b"<p>text</p>", {"Content-Type": "text/html"})
    assert html.css("p::text").get() == "text"

    data = build_document(URL, b'{"a": 1}', {"Content-Type": "application/json"}, kind="json")
    assert data.json() == {"a": 1}

    with pytest.raises(ParseError):
        build_document(URL, b"{broken", {"Content-Type": "application/json"}, kind="json")


def test_body_read_in_chunks():
    session = make_session()
    session.get.return_value.__enter__.return_value.raw.read1.side_effect = [
        b"<html><body>", b"<h1>Hi</h1>", b"</body></html>", b"",
    ]

    document = Fetcher(session=session).fetch(URL)

    assert document.css("h1::text").get() == "Hi"


def test_trickling_body_hits_page_deadline():
    session = make_session()

    def trickle(amt, decode_content=True):
        time.sleep(0.1)
        return b"x"

    session.get.return_value.__enter__.return_value.raw.read1.side_effect = trickle
    fetcher = Fetcher(session=session, timeout=0.3)

    start = time.monotonic()
    with pytest.raises(TransportError) as exc_info:
        fetcher.fetch(URL)
    elapsed = time.monotonic() - start

    assert elapsed < 1.0
    assert str(exc_info.value) == "transport: timed out after 0.3s"
    assert session.get.return_value.__exit__.called


def test_broken_body_read_is_transport_error():
    session = make_session()
    session.get.return_value.__enter__.return_value.raw.read1.side_effect = ProtocolError(
        "Connection broken"
    )

    with pytest.raises(TransportError):
        Fetcher(session=session).fetch(URL)
