from unittest.mock import MagicMock, patch

import pytest
from playwright.sync_api import Error as PlaywrightError

from mediaparse.browser import BrowserFetcher
from mediaparse.errors import HTTPStatusError, InvalidURLError, TransportError


URL = "https://tass.ru/politika/1"


@pytest.fixture
def page():
    with patch("mediaparse.browser.sync_playwright") as mock_playwright, \
            patch("mediaparse.browser.stealth_sync") as mock_stealth:
        playwright = mock_playwright.return_value.__enter__.return_value
        browser = playwright.chromium.launch.return_value
        page = browser.new_context.return_value.new_page.return_value
        page.goto.return_value.status = 200
        page.content.return_value = "<html><body><h1>Заголовок</h1></body></html>"
        page.url = URL
        page.browser = browser
        page.stealth = mock_stealth
        yield page


def test_fetch_renders_page(page):
    fetcher = BrowserFetcher(wait_for_selector="h1")

    document = fetcher.fetch(URL)

    assert document.css("h1::text").get() == "Заголовок"
    assert document.url == URL
    page.stealth.assert_called_once_with(page)
    page.wait_for_selector.assert_called_once_with("h1", timeout=60000.0)
    page.browser.close.assert_called_once()


def test_fetch_waits_fixed_time_without_selector(page):
    BrowserFetcher(wait_ms=500).fetch(URL)
    page.wait_for_timeout.assert_called_once_with(500)


def test_non_200_status(page):
    page.goto.return_value.status = 404
    page.goto.return_value.status_text = "Not Found"

    with pytest.raises(HTTPStatusError) as exc_info:
        BrowserFetcher().fetch(URL)

    assert exc_info.value.status == 404
    page.browser.close.assert_called_once()


def test_playwright_error_is_transport(page):
    page.goto.side_effect = PlaywrightError("Timeout 60000ms exceeded")

    with pytest.raises(TransportError):
        BrowserFetcher().fetch(URL)

    page.browser.close.assert_called_once()


def test_invalid_url_skips_browser(page):
    with pytest.raises(InvalidURLError):
        BrowserFetcher().fetch("tass.ru")
    page.browser.new_context.assert_not_called()


def test_json_kind_reads_response_body(page):
    page.goto.return_value.text.return_value = '{"items": [{"url": "/a"}]}'
    page.content.return_value = "<html><body><pre>{...}</pre></body></html>"

    document = BrowserFetcher(wait_for_selector="div.feed").fetch(URL, kind="json")

    assert document.json() == {"items": [{"url": "/a"}]}
    page.content.assert_not_called()
    page.wait_for_selector.assert_not_called()
