from mediaparse.siteconfig import SiteConfig


CONFIG = SiteConfig(
    name="ria",
    title="RIA Novosti",
    site_url="https://ria.ru",
    listing_url="https://ria.ru/lenta/",
    link_selector="a.list-item__title.color-font-hover-only",
    link_prefixes=["https://ria.ru"],
    title_selectors=[".article__title"],
    body_selector=".article__text, .article__quote-text",
    date_selectors=["div.article__info-date > a::text"],
    date_formats=["%H:%M %d.%m.%Y"],
    tag_selector="div.article__tags a.article__tags-item",
    require_tags=True,
    workers=10,
)
