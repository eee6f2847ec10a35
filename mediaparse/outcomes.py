"""
Per-URL outcome classification.

A worker turns every URL it claims into exactly one of ``Success``,
``Empty`` or ``Failure``. ``Empty`` means the page was fetched but the
site's rules found no value for a mandatory field; ``Failure`` means the
page could not be fetched or parsed at all.
"""
from dataclasses import dataclass, field
from typing import List, Union

from mediaparse.models import ArticleRecord, ExtractedFields


@dataclass(frozen=True)
class Success:
    record: ArticleRecord

    @property
    def url(self) -> str:
        return self.record.url


@dataclass(frozen=True)
class Empty:
    url: str
    reasons: List[str] = field(default_factory=list)

    def describe(self) -> str:
        return f"{self.url} (no data: {', '.join(self.reasons)})"


@dataclass(frozen=True)
class Failure:
    url: str
    error: BaseException

    @property
    def kind(self) -> str:
        return getattr(self.error, "kind", "error")

    def describe(self) -> str:
        return f"{self.url} ({self.error})"


PageOutcome = Union[Success, Empty, Failure]


def classify(
    site: str,
    url: str,
    fields: ExtractedFields,
    require_date: bool = True,
    require_tags: bool = False,
) -> PageOutcome:
    """Build a record from ``fields`` or explain which mandatory fields are absent."""
    reasons = fields.missing(require_date=require_date, require_tags=require_tags)
    if reasons:
        return Empty(url=url, reasons=reasons)
    return Success(ArticleRecord.from_fields(site, url, fields))
