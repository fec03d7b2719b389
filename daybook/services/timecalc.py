from __future__ import annotations

from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo


def utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


def to_utc_iso(dt: datetime) -> str:
    """Serialise to ``YYYY-MM-DDTHH:MM:SSZ`` so stored stamps sort lexically."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def utcnow_iso() -> str:
    return to_utc_iso(utcnow())


def expiry_iso(now: datetime, days: int) -> str:
    return to_utc_iso(now + timedelta(days=days))


def parse_iso(ts: str | None, tz: str) -> datetime | None:
    """Parse an ISO-8601 timestamp string.
    If naive, attach the provided tz. Returns None if ts is falsy.
    """
    if not ts:
        return None
    dt = datetime.fromisoformat(ts.replace("Z", "+00:00"))
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=ZoneInfo(tz))
    return dt


def ensure_aware(value: datetime, tz: str) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=ZoneInfo(tz))
    return value


def normalize_timestamp(value: datetime, tz: str) -> str:
    """Attach ``tz`` to naive input and store it as UTC."""
    return to_utc_iso(ensure_aware(value, tz))


def compute_minutes(start_iso: str | None, end_iso: str | None, tz: str) -> int:
    """Return whole minutes between start and end (non-negative)."""
    s = parse_iso(start_iso, tz)
    e = parse_iso(end_iso, tz)
    if not s or not e:
        return 0
    delta = int((e - s).total_seconds() // 60)
    return max(delta, 0)
