"""Text clean-up helpers shared by extraction rules."""
import re
from typing import Iterable, Optional, Sequence

from main_content_extractor import MainContentExtractor


_WS = re.compile(r"\s+")


def clean_text(text: Optional[str]) -> str:
    """Collapse whitespace (including non-breaking spaces) and strip."""
    if not text:
        return ""
    return _WS.sub(" ", text.replace("\xa0", " ")).strip()


def node_text(node) -> str:
    """Full text content of a scrapy selector node."""
    return clean_text(node.xpath("string()").get())


def select_first(document, selector: str) -> Optional[str]:
    """
    Return the first non-empty value for ``selector``.

    Selectors using a ``::text``/``::attr()`` pseudo-element yield the
    value directly; plain element selectors yield the node's text content.
    """
    if "::" in selector:
        for value in document.css(selector).getall():
            value = clean_text(value)
            if value:
                return value
        return None
    for node in document.css(selector):
        value = node_text(node)
        if value:
            return value
    return None


def join_paragraphs(
    nodes: Iterable,
    excludes: Sequence[str] = (),
    skip_prefixes: Sequence[str] = (),
    separator: str = "\n\n",
) -> str:
    parts = []
    for node in nodes:
        text = node_text(node)
        if not text:
            continue
        if any(marker in text for marker in excludes):
            continue
        if any(text.startswith(prefix) for prefix in skip_prefixes):
            continue
        parts.append(text)
    return separator.join(parts)


def clean_markdown(text: str) -> str:
    # Remove images but preserve alt text if present
    text = re.sub(r'!\[([^\]]*?)\]\(.*?\)', r'\1', text, flags=re.DOTALL)

    # Remove links but keep the link text
    text = re.sub(r'\[([^\]]+?)\]\([^\)]*\)', r'\1', text, flags=re.DOTALL)

    # Bold / italic markers
    text = re.sub(r'\*\*([^\*]+)\*\*', r'\1', text)
    text = re.sub(r'__([^_]+)__', r'\1', text)
    text = re.sub(r'(?<!\w)[\*_]([^\*_\n]+)[\*_](?!\w)', r'\1', text)

    # Remove HTML tags and leftover entities
    text = re.sub(r'<[^>]+>', '', text)
    text = re.sub(r'&[a-zA-Z0-9#]+;', ' ', text)

    # Headings and lines made only of markup characters
    text = re.sub(r'^[ \t]*#+[ \t]*', '', text, flags=re.MULTILINE)
    text = re.sub(r'^[ \*#\-]*$', '', text, flags=re.MULTILINE)

    # Normalize whitespace and line breaks
    text = text.replace("\xa0", " ")
    text = re.sub(r'[ \t]+', ' ', text)
    text = re.sub(r' *\n *', '\n', text)
    text = re.sub(r'\n{3,}', '\n\n', text)

    return text.strip()


def extract_markdown_from_html(html: str) -> str:
    """Extract the main content of an HTML page as cleaned plain text."""
    extracted = MainContentExtractor.extract(html, output_format="markdown")
    return clean_markdown(extracted or "")
