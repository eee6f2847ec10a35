"""
Site pipeline: discover links, fetch and extract them with the worker
pool, aggregate outcomes and optionally store the records.
"""
import logging
import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from mediaparse.aggregate import RunResult, aggregate
from mediaparse.browser import BrowserFetcher
from mediaparse.config import Settings
from mediaparse.errors import FetchError
from mediaparse.fetcher import Fetcher
from mediaparse.links import LinkCollector
from mediaparse.pool import WorkerPool
from mediaparse.retry import with_retries
from mediaparse.siteconfig import SiteConfig
from mediaparse.sites import get_extractor
from mediaparse.storage import ArticleStorage
from mediaparse.utils.print import format_duration


logger = logging.getLogger(__name__)


@dataclass
class RunReport:
    site: str
    links: List[str] = field(default_factory=list)
    result: RunResult = field(default_factory=RunResult)
    discovery_error: Optional[FetchError] = None
    elapsed: float = 0.0
    stored: int = 0

    @property
    def discovery_failed(self) -> bool:
        """True when not even the first listing page could be fetched."""
        return self.discovery_error is not None and not self.links


class SiteScraper:
    """Runs the whole pipeline for one site."""

    def __init__(
        self,
        config: SiteConfig,
        settings: Optional[Settings] = None,
        fetcher=None,
        listing_fetcher=None,
        extractor=None,
        storage: Optional[ArticleStorage] = None,
    ):
        self.config = config
        self.settings = settings or Settings()
        self.extractor = extractor or get_extractor(config)
        self.storage = storage
        self.workers = self.settings.workers or config.workers
        self.fetcher = fetcher or self._build_fetcher(wait_for_selector=config.wait_for_selector)
        if listing_fetcher is not None:
            self.listing_fetcher = listing_fetcher
        elif config.fetcher == "browser" and fetcher is None:
            self.listing_fetcher = self._build_fetcher(wait_for_selector=config.link_selector)
        else:
            self.listing_fetcher = self.fetcher

    def _build_fetcher(self, wait_for_selector: Optional[str] = None):
        if self.config.fetcher == "browser":
            return BrowserFetcher(
                timeout=self.settings.browser_timeout,
                user_agent=self.settings.user_agent,
                wait_for_selector=wait_for_selector,
            )
        return Fetcher(
            timeout=self.settings.timeout,
            user_agent=self.settings.user_agent,
            max_idle_connections=self.settings.max_idle_connections,
            max_connections_per_host=max(self.settings.max_connections_per_host, self.workers),
        )

    def listing_fetch(self) -> Callable:
        """Listing fetch function, wrapped with the site's retry delays if any."""
        def fetch_listing(url: str):
            return self.listing_fetcher.fetch(
                url, kind=self.config.listing_kind, encoding=self.config.encoding
            )

        if self.config.listing_retry_delays:
            return with_retries(fetch_listing, delays=self.config.listing_retry_delays)
        return fetch_listing

    def run(self, target_count: Optional[int] = None) -> RunReport:
        start_time = time.time()
        target = target_count or self.settings.target_count or self.config.target_count
        max_pages = self.settings.max_pages or self.config.max_pages

        collector = LinkCollector(
            self.listing_fetch(),
            self.extractor,
            max_pages=max_pages,
            strip_query=self.config.strip_query,
        )
        links = collector.collect(target)
        logger.info(
            f"[{self.config.name}] Collected {len(links)} links from {collector.pages} listing pages"
        )

        pool = WorkerPool(self.fetcher, workers=self.workers)
        result = aggregate(pool.run(links, self.extractor))

        stored = 0
        if self.storage is not None and result.records:
            stored = self.storage.save(result.records)

        report = RunReport(
            site=self.config.name,
            links=links,
            result=result,
            discovery_error=collector.error,
            elapsed=time.time() - start_time,
            stored=stored,
        )
        self.log_summary(report)
        return report

    def log_summary(self, report: RunReport) -> None:
        name = self.config.name
        if report.discovery_failed:
            logger.error(f"[{name}] Listing unavailable: {report.discovery_error}")
            return

        result = report.result
        logger.info(
            f"[{name}] Finished with {len(result.records)}/{len(report.links)} articles "
            f"in {format_duration(report.elapsed)}"
        )
        if result.diagnostics:
            level = logging.WARNING if result.records else logging.ERROR
            logger.log(
                level,
                f"[{name}] {len(result.diagnostics)} of {len(report.links)} pages "
                f"failed or had no data:"
            )
            for idx, line in enumerate(result.diagnostics, start=1):
                logger.log(level, f"  {idx}. {line}")

    def close(self) -> None:
        self.fetcher.close()
        if self.listing_fetcher is not self.fetcher:
            self.listing_fetcher.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()
