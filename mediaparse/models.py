from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

from mediaparse.utils.hash import sha256_key


class ExtractedFields(BaseModel):
    """Raw result of applying a site's extraction rules to one page."""

    title: Optional[str] = None
    body: Optional[str] = None
    date: Optional[datetime] = None
    tags: List[str] = Field(default_factory=list)
    date_raw: Optional[str] = Field(None, description="Date string found on the page, if any.")
    date_error: Optional[str] = Field(None, description="Why date_raw could not be parsed.")

    def missing(self, require_date: bool = True, require_tags: bool = False) -> List[str]:
        """Return the reason codes of every absent mandatory field."""
        reasons = []
        if not (self.title or "").strip():
            reasons.append("title missing")
        if not (self.body or "").strip():
            reasons.append("body missing")
        if require_date and self.date is None:
            if self.date_error:
                reasons.append(f"date unparsable: {self.date_error}, '{self.date_raw}'")
            else:
                reasons.append("date missing")
        if require_tags and not self.tags:
            reasons.append("tags missing")
        return reasons


class ArticleRecord(BaseModel):
    """A successfully extracted article. Immutable once built."""

    model_config = ConfigDict(frozen=True)

    site: str = Field(..., description="Base URL of the source site.")
    url: str = Field(..., description="Canonical article URL.")
    title: str
    body: str
    published_at: Optional[datetime] = None
    tags: List[str] = Field(default_factory=list)

    @field_validator("title", "body")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v

    @field_validator("published_at")
    @classmethod
    def validate_aware(cls, v: Optional[datetime]) -> Optional[datetime]:
        if v is not None and v.tzinfo is None:
            raise ValueError("published_at must be timezone-aware")
        return v

    @computed_field
    @property
    def content_hash(self) -> str:
        stamp = str(int(self.published_at.timestamp())) if self.published_at else ""
        return sha256_key(self.title, self.body, stamp)

    @classmethod
    def from_fields(cls, site: str, url: str, fields: ExtractedFields) -> "ArticleRecord":
        return cls(
            site=site,
            url=url,
            title=fields.title or "",
            body=fields.body or "",
            published_at=fields.date,
            tags=list(fields.tags),
        )
