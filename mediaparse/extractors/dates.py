"""
Publication date parsing driven by per-site format tables.

Russian month names (genitive and nominative, any case) are replaced by
their two-digit number before the formats are tried, so a site showing
'19 октября 2025, 14:30' is described by the format '%d %m %Y, %H:%M'.
"""
import re
from datetime import datetime, timezone
from typing import Optional, Sequence

from dateutil.parser import isoparse

from mediaparse.extractors.text import clean_text
from mediaparse.utils.date import localize


RUSSIAN_MONTHS = {
    "января": "01", "февраля": "02", "марта": "03", "апреля": "04",
    "мая": "05", "июня": "06", "июля": "07", "августа": "08",
    "сентября": "09", "октября": "10", "ноября": "11", "декабря": "12",
    "январь": "01", "февраль": "02", "март": "03", "апрель": "04",
    "май": "05", "июнь": "06", "июль": "07", "август": "08",
    "сентябрь": "09", "октябрь": "10", "ноябрь": "11", "декабрь": "12",
}

_MONTH_RE = re.compile(
    r"(?<!\w)(" + "|".join(sorted(RUSSIAN_MONTHS, key=len, reverse=True)) + r")(?!\w)",
    re.IGNORECASE,
)


def replace_month_names(text: str) -> str:
    return _MONTH_RE.sub(lambda m: RUSSIAN_MONTHS[m.group(1).lower()], text)


def _from_timestamp(raw: str) -> datetime:
    value = float(raw)
    # Millisecond epochs are 13 digits long
    if value > 1e11:
        value /= 1000
    if value <= 0:
        raise ValueError(f"non-positive timestamp {raw}")
    return datetime.fromtimestamp(value, tz=timezone.utc)


def parse_date(raw: str, formats: Sequence[str], zone: Optional[str] = None) -> datetime:
    """
    Parse ``raw`` with the first matching format and return an aware datetime.

    Besides strptime patterns, ``formats`` may contain ``"iso"`` (ISO 8601)
    and ``"timestamp"`` (Unix seconds or milliseconds). Naive results are
    attached to ``zone``. Raises ValueError when nothing matches.
    """
    text = replace_month_names(clean_text(raw))
    if not text:
        raise ValueError("empty date string")

    for fmt in formats:
        try:
            if fmt == "iso":
                parsed = isoparse(text)
            elif fmt == "timestamp":
                parsed = _from_timestamp(text)
            else:
                parsed = datetime.strptime(text, fmt)
        except (ValueError, OverflowError):
            continue
        return localize(parsed, zone)

    raise ValueError(f"no format in {list(formats)} matches '{text}'")
