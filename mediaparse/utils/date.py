"""Date utilities."""
from datetime import datetime, timezone
from typing import Optional

from dateutil import tz


def localize(dt: datetime, zone: Optional[str]) -> datetime:
    """Attach ``zone`` to a naive datetime; aware datetimes are returned as-is."""
    if dt.tzinfo is not None:
        return dt
    tzinfo = tz.gettz(zone) if zone else None
    if tzinfo is None:
        tzinfo = timezone.utc
    return dt.replace(tzinfo=tzinfo)
