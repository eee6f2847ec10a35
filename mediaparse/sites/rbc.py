import json
import logging
from typing import Optional

from mediaparse.extractors.base import SelectorExtractor, json_path
from mediaparse.extractors.dates import parse_date
from mediaparse.extractors.text import clean_markdown, clean_text
from mediaparse.models import ExtractedFields
from mediaparse.siteconfig import SiteConfig


logger = logging.getLogger(__name__)

TELEGRAM_PROMO = "Читайте РБК в Telegram"

CONFIG = SiteConfig(
    name="rbc",
    title="RBC",
    site_url="https://www.rbc.ru",
    listing_url="https://www.rbc.ru/",
    link_selector=".js-news-feed-list a.news-feed__item",
    link_prefixes=[
        "https://www.rbc.ru/",
        "https://trends.rbc.ru/trends/",
        "https://sportrbc.ru/",
        "https://pro.rbc.ru/",
        "https://realty.rbc.ru/",
    ],
    link_excludes=[
        "editorial.rbc.ru",
        "rbc.group",
        "productstar.ru",
        "companies.rbc.ru",
        "ra.rbc.ru",
    ],
    strip_query=True,
    title_selectors=[
        "h1.article__header__title-in",
        ".article__header__title-in",
        "h1.article__title",
        "h1.article-title",
        "h1.article-entry-title",
    ],
    body_selector=(
        ".article__text p, .article__text_free p, .article-body__content p, "
        ".l-col-main .article__content p, .article-item-content p.paragraph, "
        "div[itemprop='articleBody'] p"
    ),
    body_excludes=[TELEGRAM_PROMO],
    date_selectors=[
        "time.article__header__date::attr(datetime)",
        "meta[itemprop='datePublished']::attr(content)",
    ],
    date_formats=["iso"],
    tag_selector="a.article__tags__item",
    require_tags=False,
    workers=10,
)


class RbcExtractor(SelectorExtractor):
    """Prefers the article JSON embedded by Next.js, falls back to the markup."""

    def extract_fields(self, document) -> ExtractedFields:
        fields = self.extract_next_data(document)
        if fields is not None and fields.title and fields.body:
            return fields
        return super().extract_fields(document)

    def extract_next_data(self, document) -> Optional[ExtractedFields]:
        raw = document.css("script#__NEXT_DATA__::text").get()
        if not raw:
            return None
        try:
            data = json.loads(raw)
        except ValueError as e:
            logger.debug(f"Bad __NEXT_DATA__ on {document.url}: {e}")
            return None

        items = json_path(data, "props.pageProps.articleItem")
        if not items or not isinstance(items[0], dict):
            return None
        item = items[0]

        stamp = item.get("publishDateT") or item.get("firstPublishDateT") or item.get("modifDateT")
        date, date_raw, date_error = None, None, None
        if stamp:
            date_raw = str(stamp)
            try:
                date = parse_date(date_raw, ["timestamp"], self.config.timezone)
            except ValueError as e:
                date_error = str(e)

        body = clean_markdown("\n".join(
            line for line in (item.get("bodyMd") or "").splitlines()
            if TELEGRAM_PROMO not in line
        ))
        tags = [
            clean_text(tag.get("title"))
            for tag in item.get("tags") or []
            if isinstance(tag, dict) and clean_text(tag.get("title"))
        ]
        return ExtractedFields(
            title=clean_text(item.get("title")),
            body=body,
            date=date,
            date_raw=date_raw,
            date_error=date_error,
            tags=tags,
        )


EXTRACTOR = RbcExtractor
