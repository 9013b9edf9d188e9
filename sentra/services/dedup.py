# sentra/services/dedup.py
from __future__ import annotations

import math
from datetime import datetime
from typing import Any, Iterable, Mapping, Optional

from ..models.incident import Incident
from .timestamps import to_instant, utcnow

# Same-event heuristic: reports of the same type, close in time and space.
MAX_TIME_GAP_MINUTES = 10
MAX_DISTANCE_DEG = 0.01  # flat lat/lng distance, roughly 1 km at mid-latitudes


def _same_event(a: Incident, b: Incident) -> bool:
    if a.location is None or b.location is None:
        return False
    if a.type is None or a.type != b.type:
        return False

    gap_minutes = abs((a.created_at - b.created_at).total_seconds()) / 60.0
    if gap_minutes > MAX_TIME_GAP_MINUTES:
        return False

    dx = a.location.lat - b.location.lat
    dy = a.location.lng - b.location.lng
    return math.hypot(dx, dy) < MAX_DISTANCE_DEG


def _is_self(raw: Any, item: Any, candidate: Incident, other: Incident) -> bool:
    if item is raw or other.id == candidate.id:
        return True
    # an id-less raw record copied into `others` gets a fresh id, so compare the documents
    return isinstance(raw, Mapping) and isinstance(item, Mapping) and dict(item) == dict(raw)


def is_potential_duplicate(candidate: Any, others: Iterable[Any], *, now: Optional[datetime] = None) -> bool:
    """
    True if any other incident looks like a re-report of the same event.

    Only a flag for operators: nothing is merged or dropped. The candidate
    itself (same object, same id or an equal raw record) is skipped if it
    shows up in `others`. Raw records are accepted and normalized like
    Incident.from_record; an unparseable createdAt among them counts as `now`.
    """
    now = to_instant(now) if now is not None else utcnow()
    raw = candidate
    candidate = Incident.from_record(candidate, now=now)
    if candidate.location is None:
        return False

    for item in others or ():
        other = Incident.from_record(item, now=now)
        if _is_self(raw, item, candidate, other):
            continue
        if _same_event(candidate, other):
            return True
    return False
