import logging
from typing import Optional

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import sync_playwright
from playwright_stealth import stealth_sync

from mediaparse.errors import HTTPStatusError, TransportError
from mediaparse.fetcher import DEFAULT_USER_AGENT, Document, build_document, validate_url


logger = logging.getLogger(__name__)

CONTENT_TYPES = {
    "html": "text/html; charset=utf-8",
    "json": "application/json; charset=utf-8",
}


class BrowserFetcher:
    """
    Fetcher backed by a headless Chromium for sites that render their
    content with JavaScript.

    Same contract as ``Fetcher.fetch``. Every call runs its own Playwright
    instance because sync Playwright objects are bound to the thread that
    created them, and each worker thread fetches independently.
    """

    def __init__(
        self,
        timeout: float = 60.0,
        user_agent: str = DEFAULT_USER_AGENT,
        wait_for_selector: Optional[str] = None,
        wait_ms: int = 2000,
        locale: str = "ru-RU",
        timezone_id: str = "Europe/Moscow",
    ):
        self.timeout = timeout
        self.user_agent = user_agent
        self.wait_for_selector = wait_for_selector
        self.wait_ms = wait_ms
        self.locale = locale
        self.timezone_id = timezone_id

    def fetch(self, url: str, kind: str = "html", encoding: Optional[str] = None) -> Document:
        validate_url(url)
        timeout_ms = self.timeout * 1000
        try:
            with sync_playwright() as p:
                browser = p.chromium.launch(
                    headless=True,
                    args=["--blink-settings=imagesEnabled=false"],
                )
                try:
                    context = browser.new_context(
                        user_agent=self.user_agent,
                        locale=self.locale,
                        timezone_id=self.timezone_id,
                    )
                    page = context.new_page()
                    stealth_sync(page)
                    response = page.goto(url, timeout=timeout_ms)
                    if response is not None and response.status != 200:
                        raise HTTPStatusError(url, response.status, response.status_text)
                    if kind == "json" and response is not None:
                        # page.content() would wrap the payload in a viewer document
                        html = response.text()
                    else:
                        if self.wait_for_selector:
                            page.wait_for_selector(self.wait_for_selector, timeout=timeout_ms)
                        elif self.wait_ms:
                            page.wait_for_timeout(self.wait_ms)
                        html = page.content()
                    final_url = page.url or url
                finally:
                    browser.close()
        except PlaywrightError as e:
            raise TransportError(url, cause=e) from e

        logger.debug(f"Rendered {url} ({len(html)} chars)")
        return build_document(
            final_url,
            html.encode("utf-8"),
            {"Content-Type": CONTENT_TYPES.get(kind, CONTENT_TYPES["html"])},
            kind=kind,
            encoding="utf-8",
        )

    def close(self) -> None:
        pass
