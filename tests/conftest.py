import threading
import time

import pytest
from scrapy.http import HtmlResponse

from mediaparse.extractors.base import SelectorExtractor
from mediaparse.siteconfig import SiteConfig


def make_document(url: str, html: str) -> HtmlResponse:
    return HtmlResponse(url=url, body=html, encoding="utf-8")


def article_html(title="Title", body="Body text", date="2025-10-19T14:30:00+03:00", tags=("Politics",)):
    paragraphs = "".join(f"<p>{part}</p>" for part in body.split("\n\n")) if body else ""
    tag_links = "".join(f'<a class="tag" href="/tag/{t}">{t}</a>' for t in tags)
    date_node = f'<time datetime="{date}">{date}</time>' if date else ""
    return (
        "<html><body>"
        f"<h1>{title}</h1>"
        f"{date_node}"
        f'<div class="body">{paragraphs}</div>'
        f'<div class="tags">{tag_links}</div>'
        "</body></html>"
    )


class StubFetcher:
    """Serves canned pages and records how it was called, thread-safely."""

    def __init__(self, pages, delay=0.0):
        self.pages = pages
        self.delay = delay
        self.calls = []
        self.threads = set()
        self.in_flight = 0
        self.max_in_flight = 0
        self.closed = False
        self._lock = threading.Lock()

    def fetch(self, url, kind="html", encoding=None):
        with self._lock:
            self.calls.append(url)
            self.threads.add(threading.current_thread().name)
            self.in_flight += 1
            self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.delay:
                time.sleep(self.delay)
            page = self.pages[url]
            if isinstance(page, Exception):
                raise page
            return make_document(url, page)
        finally:
            with self._lock:
                self.in_flight -= 1

    def close(self):
        self.closed = True


@pytest.fixture
def site_config():
    return SiteConfig(
        name="example",
        title="Example News",
        site_url="https://news.example.com",
        listing_url="https://news.example.com/latest/",
        link_selector="a.item",
        link_prefixes=["https://news.example.com/"],
        next_page_template="https://news.example.com/latest/{page}/",
        max_pages=5,
        target_count=10,
        title_selectors=["h1"],
        body_selector="div.body p",
        date_selectors=["time::attr(datetime)"],
        date_formats=["iso"],
        tag_selector="div.tags a.tag",
        workers=4,
    )


@pytest.fixture
def extractor(site_config):
    return SelectorExtractor(site_config)
