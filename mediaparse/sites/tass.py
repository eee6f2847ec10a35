from mediaparse.siteconfig import SiteConfig


CONFIG = SiteConfig(
    name="tass",
    title="TASS",
    site_url="https://tass.ru",
    listing_url="https://tass.ru/novosti-dnya",
    link_selector="div#infinite_listing a.tass_pkg_link-v5WdK",
    link_prefixes=["https://tass.ru/"],
    title_selectors=["h1.NewsHeader_titles__uKY5F"],
    body_selector="article.Content_wrapper__DiAVL p.Paragraph_paragraph__9WAFK",
    date_selectors=["div.PublishedMark_date__LG42P"],
    # '19 октября 2025, 14:30'
    date_formats=["%d %m %Y, %H:%M", "%d %m %Y %H:%M"],
    tag_selector="div.Tags_container__wP7Lb a.Tags_tag__o7Dqc",
    require_tags=True,
    fetcher="browser",
    wait_for_selector="div.PublishedMark_date__LG42P",
    workers=5,
)
