"""
Concurrent fetch-and-extract pipeline for news sites.

Discovery (``LinkCollector``) feeds a bounded ``WorkerPool`` whose
per-page outcomes are folded into records and diagnostics by ``aggregate``.
"""

from .aggregate import RunResult, aggregate
from .errors import (
    ExtractionError,
    FetchError,
    HTTPStatusError,
    InvalidURLError,
    ParseError,
    TransportError,
)
from .fetcher import Fetcher
from .links import LinkCollector, LinkSet, canonicalize_url
from .models import ArticleRecord, ExtractedFields
from .outcomes import Empty, Failure, PageOutcome, Success, classify
from .pool import WorkerPool
from .retry import with_retries
from .siteconfig import SiteConfig

__all__ = [
    "ArticleRecord",
    "Empty",
    "ExtractedFields",
    "ExtractionError",
    "Failure",
    "FetchError",
    "Fetcher",
    "HTTPStatusError",
    "InvalidURLError",
    "LinkCollector",
    "LinkSet",
    "PageOutcome",
    "ParseError",
    "RunResult",
    "SiteConfig",
    "Success",
    "TransportError",
    "WorkerPool",
    "aggregate",
    "canonicalize_url",
    "classify",
    "with_retries",
]
