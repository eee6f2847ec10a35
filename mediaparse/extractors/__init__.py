"""
Site extraction strategies.

``SelectorExtractor`` covers most sites from configuration alone; sites
with quirks subclass it next to their ``SiteConfig``.
"""

from .base import Extractor, SelectorExtractor, json_path
from .dates import parse_date, replace_month_names
from .text import clean_markdown, clean_text, extract_markdown_from_html

__all__ = [
    "Extractor",
    "SelectorExtractor",
    "json_path",
    "parse_date",
    "replace_month_names",
    "clean_markdown",
    "clean_text",
    "extract_markdown_from_html",
]
