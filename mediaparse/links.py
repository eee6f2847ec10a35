"""
Link discovery.

``LinkCollector`` walks a site's listing pages (or JSON API pages) with the
site extractor, keeping the first-seen order of unique article URLs until
it has enough of them or the source runs dry.
"""
import logging
from typing import Callable, Iterable, Iterator, List, Optional
from urllib.parse import parse_qsl, urldefrag, urlencode, urlparse, urlunparse

from mediaparse.errors import FetchError


logger = logging.getLogger(__name__)

TRACKING_PARAMS = {
    "utm_source",
    "utm_medium",
    "utm_campaign",
    "utm_term",
    "utm_content",
    "utm_id",
    "utm_referrer",
    "gclid",
    "fbclid",
    "yclid",
    "mc_cid",
    "mc_eid",
    "from",
    "ref",
    "ref_src",
}


def canonicalize_url(url: str, strip_query: bool = False) -> str:
    """
    Canonicalize a URL for dedup.

    - Lowercase scheme + hostname
    - Remove fragments
    - Strip tracking query parameters (or the whole query)
    - Keep the order of remaining query params
    """
    if not url:
        return ""
    p = urlparse(url.strip())
    scheme = (p.scheme or "https").lower()
    netloc = (p.netloc or "").lower()
    path = p.path or "/"
    query = ""
    if not strip_query:
        kept = [
            (k, v) for k, v in parse_qsl(p.query, keep_blank_values=True)
            if k.lower() not in TRACKING_PARAMS
        ]
        query = urlencode(kept, doseq=True)
    return urlunparse((scheme, netloc, path, "", query, ""))


class LinkSet:
    """
    Insertion-ordered set of discovered URLs.

    Canonical forms are only used as membership keys; the URLs handed out
    are the discovered ones without their fragment.
    """

    def __init__(self, strip_query: bool = False):
        self.strip_query = strip_query
        self._seen = set()
        self._urls: List[str] = []

    def add(self, url: str) -> bool:
        """Add ``url``; return False if it (or an equivalent URL) was seen."""
        key = canonicalize_url(url, strip_query=self.strip_query)
        if not key or key in self._seen:
            return False
        self._seen.add(key)
        self._urls.append(urldefrag(url.strip())[0])
        return True

    def extend(self, urls: Iterable[str]) -> int:
        return sum(1 for url in urls if self.add(url))

    def take(self, n: int) -> List[str]:
        return self._urls[:n]

    def __contains__(self, url: str) -> bool:
        return canonicalize_url(url, strip_query=self.strip_query) in self._seen

    def __len__(self) -> int:
        return len(self._urls)

    def __iter__(self) -> Iterator[str]:
        return iter(self._urls)


class LinkCollector:
    """
    Drives discovery for one site.

    ``fetch_listing(url)`` returns a document (it may be wrapped with
    retries); the extractor provides ``listing_url()``, ``find_links(doc)``
    and ``next_page_url(doc, page)``.
    """

    def __init__(
        self,
        fetch_listing: Callable,
        extractor,
        max_pages: int = 1,
        strip_query: bool = False,
    ):
        self.fetch_listing = fetch_listing
        self.extractor = extractor
        self.max_pages = max(1, max_pages)
        self.strip_query = strip_query
        self.error: Optional[FetchError] = None
        self.pages = 0

    def collect(self, target_count: int) -> List[str]:
        self.error = None
        self.pages = 0
        links = LinkSet(strip_query=self.strip_query)
        url = self.extractor.listing_url()

        while url and len(links) < target_count and self.pages < self.max_pages:
            try:
                document = self.fetch_listing(url)
            except FetchError as e:
                self.error = e
                if self.pages == 0:
                    logger.warning(f"Listing page {url} unavailable, nothing to scrape: {e}")
                else:
                    logger.warning(
                        f"Stopping discovery at page {self.pages + 1} ({url}): {e}. "
                        f"Keeping {len(links)} links"
                    )
                break

            self.pages += 1
            added = links.extend(self.extractor.find_links(document))
            logger.debug(f"Page {self.pages} ({url}): {added} new links, {len(links)} total")
            if added == 0:
                if self.pages == 1:
                    logger.warning(f"No article links found on {url}")
                break
            url = self.extractor.next_page_url(document, self.pages + 1)

        return links.take(target_count)
