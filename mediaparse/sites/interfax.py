from mediaparse.siteconfig import SiteConfig


CONFIG = SiteConfig(
    name="interfax",
    title="Interfax",
    site_url="https://www.interfax.ru",
    listing_url="https://www.interfax.ru/news/",
    link_selector="div.an > div > a",
    link_prefixes=["https://www.interfax.ru/"],
    link_excludes=["sport-interfax.ru", "realty.interfax.ru"],
    title_selectors=["article[itemprop='articleBody'] h1[itemprop='headline']"],
    body_selector="article[itemprop='articleBody'] p",
    date_selectors=[
        "meta[itemprop='datePublished']::attr(content)",
        "time[datetime]::attr(datetime)",
        "time a.time::text",
    ],
    date_formats=["%Y-%m-%dT%H:%M:%S", "iso", "%H:%M, %d %m %Y"],
    tag_selector=".textMTags a",
    require_tags=False,
    # Pages are served in cp1251, sometimes without a charset header
    encoding="windows-1251",
    workers=10,
)
