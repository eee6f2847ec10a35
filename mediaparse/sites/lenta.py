from mediaparse.siteconfig import SiteConfig


CONFIG = SiteConfig(
    name="lenta",
    title="Lenta.ru",
    site_url="https://lenta.ru",
    listing_url="https://lenta.ru/parts/news/",
    link_selector="a.card-full-news._parts-news",
    link_prefixes=["https://lenta.ru/"],
    next_page_template="https://lenta.ru/parts/news/{page}/",
    max_pages=3,
    title_selectors=[".topic-body__title"],
    body_selector=".topic-body__content > p",
    date_selectors=["a.topic-header__item.topic-header__time::text"],
    # '14:30, 19 октября 2025' once the month name is replaced by its number
    date_formats=["%H:%M, %d %m %Y"],
    tag_selector="a.topic-header__item.topic-header__rubric",
    require_tags=True,
    workers=10,
)
