import logging
from abc import ABC, abstractmethod
from typing import Any, List, Optional, Tuple
from urllib.parse import urlparse

from mediaparse.extractors.dates import parse_date
from mediaparse.extractors.text import (
    extract_markdown_from_html,
    join_paragraphs,
    node_text,
    select_first,
)
from mediaparse.models import ExtractedFields
from mediaparse.siteconfig import SiteConfig


logger = logging.getLogger(__name__)


def json_path(data: Any, path: str) -> List[Any]:
    """
    Resolve a dotted path such as ``items.*.url`` against decoded JSON.

    ``*`` fans out over a list, numeric keys index into one. Missing keys
    produce no values rather than an error.
    """
    values = [data]
    for key in path.split("."):
        resolved = []
        for value in values:
            if key == "*":
                if isinstance(value, list):
                    resolved.extend(value)
            elif isinstance(value, dict):
                if key in value:
                    resolved.append(value[key])
            elif isinstance(value, list) and key.isdigit():
                if int(key) < len(value):
                    resolved.append(value[int(key)])
        values = resolved
    return values


class Extractor(ABC):
    """
    Site strategy used by the pipeline: discovery (``listing_url``,
    ``find_links``, ``next_page_url``) and extraction (``extract_fields``).
    """

    site: str = ""
    encoding: Optional[str] = None
    require_date: bool = True
    require_tags: bool = False

    @abstractmethod
    def listing_url(self) -> str:
        pass

    @abstractmethod
    def find_links(self, document) -> List[str]:
        pass

    @abstractmethod
    def extract_fields(self, document) -> ExtractedFields:
        pass

    def next_page_url(self, document, page: int) -> Optional[str]:
        return None


class SelectorExtractor(Extractor):
    """Generic extractor driven entirely by a ``SiteConfig``."""

    def __init__(self, config: SiteConfig):
        self.config = config
        self.site = config.site_url
        self.encoding = config.encoding
        self.require_date = config.require_date
        self.require_tags = config.require_tags

    # Discovery

    def listing_url(self) -> str:
        return self.config.listing_url

    def find_links(self, document) -> List[str]:
        if self.config.listing_kind == "json":
            candidates = [
                str(value).strip()
                for value in json_path(document.json(), self.config.json_links_path or "")
                if value
            ]
        else:
            candidates = [
                node.attrib.get("href", "").strip()
                for node in document.css(self.config.link_selector or "a[href]")
            ]

        links = []
        for href in candidates:
            if not href:
                continue
            url = document.urljoin(href)
            if self.accepts_link(url):
                links.append(url)
        return links

    def accepts_link(self, url: str) -> bool:
        if urlparse(url).scheme not in ("http", "https"):
            return False
        if self.config.link_prefixes and not any(
            url.startswith(prefix) for prefix in self.config.link_prefixes
        ):
            return False
        return not any(marker in url for marker in self.config.link_excludes)

    def next_page_url(self, document, page: int) -> Optional[str]:
        if self.config.listing_kind == "json" and self.config.json_next_path:
            values = [v for v in json_path(document.json(), self.config.json_next_path) if v]
            return document.urljoin(str(values[0])) if values else None
        if self.config.next_page_selector:
            href = select_first(document, self.config.next_page_selector)
            return document.urljoin(href) if href else None
        if self.config.next_page_template:
            return self.config.next_page_template.format(page=page)
        return None

    # Extraction

    def extract_fields(self, document) -> ExtractedFields:
        date, date_raw, date_error = self.extract_date(document)
        return ExtractedFields(
            title=self.extract_title(document),
            body=self.extract_body(document),
            date=date,
            date_raw=date_raw,
            date_error=date_error,
            tags=self.extract_tags(document),
        )

    def extract_title(self, document) -> Optional[str]:
        for selector in self.config.title_selectors:
            title = select_first(document, selector)
            if title:
                return title
        return None

    def extract_body(self, document) -> str:
        if not self.config.body_selector:
            return extract_markdown_from_html(document.text)
        return join_paragraphs(
            document.css(self.config.body_selector),
            excludes=self.config.body_excludes,
            skip_prefixes=self.config.body_skip_prefixes,
        )

    def extract_date(self, document) -> Tuple[Optional[Any], Optional[str], Optional[str]]:
        """Return (date, raw string, parse error) using the first parsable selector."""
        first_raw, first_error = None, None
        for selector in self.config.date_selectors:
            raw = select_first(document, selector)
            if not raw:
                continue
            try:
                return parse_date(raw, self.config.date_formats, self.config.timezone), raw, None
            except ValueError as e:
                logger.debug(f"Date '{raw}' from {selector} on {document.url}: {e}")
                if first_raw is None:
                    first_raw, first_error = raw, str(e)
        return None, first_raw, first_error

    def extract_tags(self, document) -> List[str]:
        if not self.config.tag_selector:
            return []
        tags = []
        for node in document.css(self.config.tag_selector):
            tag = node_text(node)
            if tag and tag not in tags:
                tags.append(tag)
        return tags
