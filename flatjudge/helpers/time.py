from datetime import datetime, timezone
from zoneinfo import ZoneInfo
from typing import Optional


def utc_now() -> datetime:
    """Naive UTC 'now', matching how timestamps are stored in the DB."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_contest_tz(dt: Optional[datetime], tz_name: Optional[str]) -> Optional[datetime]:
    if not dt:
        return None

    # Treat naive DB values as UTC
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)

    return dt.astimezone(ZoneInfo(tz_name or "UTC"))


def iso(dt: Optional[datetime]) -> Optional[str]:
    """ISO-8601 with a trailing Z for naive UTC values (API payloads)."""
    if not dt:
        return None
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt.isoformat(timespec="milliseconds") + "Z"
