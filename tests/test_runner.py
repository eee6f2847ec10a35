from unittest.mock import patch

import pytest

from mediaparse.browser import BrowserFetcher
from mediaparse.config import Settings
from mediaparse.errors import HTTPStatusError, TransportError
from mediaparse.fetcher import Fetcher
from mediaparse.runner import SiteScraper
from mediaparse.sites import get_site
from mediaparse.storage import ArticleStorage

from conftest import StubFetcher, article_html


LISTING = "https://news.example.com/latest/"


def listing_html(*hrefs):
    return "".join(f'<a class="item" href="{href}">x</a>' for href in hrefs)


def site_pages():
    a = "https://news.example.com/a.html"
    b = "https://news.example.com/b.html"
    c = "https://news.example.com/c.html"
    return a, b, c, {
        LISTING: listing_html(a, b, a, c),
        "https://news.example.com/latest/2/": listing_html(),
        a: article_html(title="A"),
        b: HTTPStatusError(b, 404, "Not Found"),
        c: article_html(title="C", body=""),
    }


def test_run_end_to_end(site_config):
    a, b, c, pages = site_pages()
    fetcher = StubFetcher(pages)

    with SiteScraper(site_config, Settings(), fetcher=fetcher) as scraper:
        report = scraper.run()

    assert report.links == [a, b, c]
    assert not report.discovery_failed
    assert [record.url for record in report.result.records] == [a]
    assert sorted(report.result.diagnostics) == [
        f"{b} (status: HTTP 404 Not Found)",
        f"{c} (no data: body missing)",
    ]
    assert report.stored == 0
    assert report.elapsed >= 0
    assert fetcher.closed


def test_run_target_override(site_config):
    a, _, _, pages = site_pages()
    fetcher = StubFetcher(pages)

    report = SiteScraper(site_config, Settings(target_count=1), fetcher=fetcher).run()

    assert report.links == [a]
    assert report.result.total == 1


def test_run_stores_records(site_config, tmp_path):
    _, _, _, pages = site_pages()
    storage = ArticleStorage(str(tmp_path / "articles.json"))

    scraper = SiteScraper(site_config, Settings(), fetcher=StubFetcher(pages), storage=storage)
    first = scraper.run()
    second = scraper.run()

    assert first.stored == 1
    assert second.stored == 0
    assert storage.count_records() == 1
    storage.close()


def test_listing_unavailable(site_config):
    fetcher = StubFetcher({LISTING: TransportError(LISTING, "connection refused")})

    report = SiteScraper(site_config, Settings(), fetcher=fetcher).run()

    assert report.discovery_failed
    assert report.links == []
    assert report.result.total == 0
    assert fetcher.calls == [LISTING]


def test_listing_retries_use_site_delays(site_config):
    config = site_config.model_copy(update={"listing_retry_delays": [1, 2]})
    fetcher = StubFetcher({LISTING: TransportError(LISTING, "connection refused")})

    with patch("mediaparse.retry.time.sleep") as sleep:
        report = SiteScraper(config, Settings(), fetcher=fetcher).run()

    assert fetcher.calls == [LISTING] * 3
    assert [c.args[0] for c in sleep.call_args_list] == [1, 2]
    assert report.discovery_failed


def test_builds_http_fetcher_sized_for_workers(site_config):
    scraper = SiteScraper(site_config, Settings(workers=20, max_connections_per_host=10))

    assert isinstance(scraper.fetcher, Fetcher)
    assert scraper.listing_fetcher is scraper.fetcher
    assert scraper.workers == 20
    assert scraper.fetcher.max_connections_per_host == 20
    scraper.close()


def test_browser_site_uses_browser_fetchers():
    config = get_site("tass")
    scraper = SiteScraper(config, Settings())

    assert isinstance(scraper.fetcher, BrowserFetcher)
    assert isinstance(scraper.listing_fetcher, BrowserFetcher)
    assert scraper.fetcher.wait_for_selector == config.wait_for_selector
    assert scraper.listing_fetcher.wait_for_selector == config.link_selector


@pytest.mark.parametrize("name", ["ria", "lenta", "gazeta", "rbc", "interfax", "tass"])
def test_every_site_builds(name):
    scraper = SiteScraper(get_site(name), Settings())
    assert scraper.extractor.listing_url() == get_site(name).listing_url
    scraper.close()
