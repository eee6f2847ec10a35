from typing import Optional

from mediaparse.extractors.base import SelectorExtractor
from mediaparse.retry import LISTING_RETRY_DELAYS
from mediaparse.siteconfig import SiteConfig


NEXT_PAGE_URL = "https://www.gazeta.ru/news/?p=main&d={pubtime}&page={page}"

CONFIG = SiteConfig(
    name="gazeta",
    title="Gazeta.ru",
    site_url="https://www.gazeta.ru",
    listing_url="https://www.gazeta.ru/news/",
    link_selector="a.b_ear.m_techlisting",
    link_prefixes=["https://www.gazeta.ru/"],
    max_pages=10,
    target_count=100,
    listing_retry_delays=list(LISTING_RETRY_DELAYS),
    title_selectors=[".headline"],
    body_selector=".b_article-text > p",
    body_excludes=["Что думаешь?"],
    body_skip_prefixes=["Ранее "],
    date_selectors=[
        "time[itemprop='datePublished']::attr(datetime)",
        "meta[property='article:published_time']::attr(content)",
    ],
    date_formats=["iso"],
    require_date=False,
    workers=10,
)


class GazetaExtractor(SelectorExtractor):
    """
    The news feed pages by publication time: page N is requested with the
    oldest ``data-pubtime`` seen on the previous page.
    """

    def next_page_url(self, document, page: int) -> Optional[str]:
        stamps = [
            int(value)
            for value in document.css(f"{self.config.link_selector}::attr(data-pubtime)").getall()
            if value.strip().isdigit()
        ]
        if not stamps:
            return None
        return NEXT_PAGE_URL.format(pubtime=min(stamps), page=page)

    def extract_body(self, document) -> str:
        body = super().extract_body(document)
        title = self.extract_title(document)
        # The headline is sometimes repeated as the first paragraph
        if title and title in body:
            body = body.replace(title, "", 1).strip()
        return body


EXTRACTOR = GazetaExtractor
