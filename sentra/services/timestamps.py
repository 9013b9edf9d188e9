# sentra/services/timestamps.py
from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from typing import Any, Mapping, Optional

log = logging.getLogger(__name__)

# anything above this is an epoch in milliseconds
_MS_THRESHOLD = 1e12


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _aware(dt: datetime) -> datetime:
    return dt if dt.tzinfo else dt.replace(tzinfo=timezone.utc)


def _from_epoch(value: float) -> datetime:
    ts = float(value) / 1000.0 if abs(value) > _MS_THRESHOLD else float(value)
    return datetime.fromtimestamp(ts, tz=timezone.utc)


def _from_mapping(value: Mapping[str, Any]) -> Optional[datetime]:
    # Firestore-style {"seconds": ..., "nanoseconds": ...} (or the REST "_seconds")
    seconds = value.get("seconds", value.get("_seconds"))
    if seconds is None:
        return None
    nanos = value.get("nanoseconds", value.get("_nanoseconds")) or 0
    return datetime.fromtimestamp(float(seconds) + float(nanos) / 1e9, tz=timezone.utc)


def _from_string(value: str) -> Optional[datetime]:
    s = value.strip()
    if not s:
        return None
    if len(s) == 8 and s.isdigit():
        # basic ISO date (YYYYMMDD), not an epoch
        try:
            return datetime.strptime(s, "%Y%m%d").replace(tzinfo=timezone.utc)
        except ValueError:
            pass
    try:
        return _from_epoch(float(s))
    except ValueError:
        pass
    if s.endswith("Z") or s.endswith("z"):
        s = s[:-1] + "+00:00"
    return _aware(datetime.fromisoformat(s))


def _parse(value: Any) -> Optional[datetime]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return _aware(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return _from_epoch(value)
    if isinstance(value, str):
        return _from_string(value)
    if isinstance(value, Mapping):
        return _from_mapping(value)

    # wrapper objects (Firestore Timestamp and friends)
    for attr in ("to_datetime", "toDate"):
        fn = getattr(value, attr, None)
        if callable(fn):
            return _parse(fn())
    seconds = getattr(value, "seconds", None)
    if seconds is not None:
        return _from_mapping({"seconds": seconds, "nanoseconds": getattr(value, "nanoseconds", 0)})
    return None


def to_instant(value: Any, now: Optional[datetime] = None) -> datetime:
    """
    Normalize any supported timestamp encoding to an aware UTC datetime.

    Accepts datetimes (naive ones are taken as UTC), dates, UNIX seconds/ms
    (numbers or numeric strings), ISO8601 strings (with/without 'Z'),
    {"seconds": ..., "nanoseconds": ...} mappings and wrapper objects exposing
    to_datetime()/toDate(). Missing or unparseable input yields `now`
    (current UTC time by default). Never raises.
    """
    try:
        parsed = _parse(value)
    except Exception as e:
        log.debug("Unparseable timestamp %r: %s", value, e)
        parsed = None

    if parsed is not None:
        return parsed
    return _aware(now) if now is not None else utcnow()
