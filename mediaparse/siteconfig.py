from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class SiteConfig(BaseModel):
    """
    Everything the pipeline needs to know about one news site.

    Selectors are CSS expressions evaluated with scrapy selectors, so the
    ``::text`` and ``::attr(name)`` pseudo-elements are available wherever a
    single string value is expected (dates, next-page links).
    """

    name: str = Field(..., description="Registry key, e.g. 'ria'.")
    title: str = Field(..., description="Human-readable site name.")
    site_url: str = Field(..., description="Base URL stored on every record.")

    # Discovery
    listing_url: str
    listing_kind: str = Field("html", description="'html' or 'json'.")
    link_selector: Optional[str] = Field(None, description="CSS selector of <a> elements on listing pages.")
    link_prefixes: List[str] = Field(default_factory=list, description="Accepted absolute URL prefixes.")
    link_excludes: List[str] = Field(default_factory=list, description="Substrings that reject a link.")
    strip_query: bool = False
    json_links_path: Optional[str] = Field(None, description="Dotted path to article URLs, '*' maps lists.")
    json_next_path: Optional[str] = Field(None, description="Dotted path to the next page URL.")
    next_page_template: Optional[str] = Field(None, description="Listing URL with a '{page}' placeholder.")
    next_page_selector: Optional[str] = Field(None, description="CSS expression yielding the next page href.")
    max_pages: int = Field(1, ge=1)
    target_count: int = Field(100, ge=1)
    listing_retry_delays: List[float] = Field(default_factory=list)

    # Extraction
    title_selectors: List[str] = Field(default_factory=list)
    body_selector: Optional[str] = Field(None, description="Paragraph nodes; unset falls back to main content extraction.")
    body_excludes: List[str] = Field(default_factory=list, description="Paragraphs containing these are dropped.")
    body_skip_prefixes: List[str] = Field(default_factory=list, description="Paragraphs starting with these are dropped.")
    date_selectors: List[str] = Field(default_factory=list)
    date_formats: List[str] = Field(default_factory=lambda: ["iso"])
    timezone: str = "Europe/Moscow"
    tag_selector: Optional[str] = None

    # Policy
    require_date: bool = True
    require_tags: bool = False

    # Fetching
    workers: int = Field(10, ge=1)
    encoding: Optional[str] = None
    fetcher: str = Field("http", description="'http' or 'browser'.")
    wait_for_selector: Optional[str] = Field(None, description="Browser fetcher waits for this on article pages.")

    @field_validator("listing_kind")
    @classmethod
    def validate_listing_kind(cls, v: str) -> str:
        if v not in ("html", "json"):
            raise ValueError(f"Invalid listing_kind '{v}'")
        return v

    @field_validator("fetcher")
    @classmethod
    def validate_fetcher(cls, v: str) -> str:
        if v not in ("http", "browser"):
            raise ValueError(f"Invalid fetcher '{v}'")
        return v

    @field_validator("next_page_template")
    @classmethod
    def validate_template(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and "{page}" not in v:
            raise ValueError("next_page_template must contain '{page}'")
        return v
