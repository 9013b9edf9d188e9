# sentra/services/feed.py
from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Any, Dict, Iterable, List, Optional

from .. import config
from ..models.incident import FeedFilters, Incident, IncidentType, Location, Severity, TriagedIncident
from .dedup import is_potential_duplicate
from .geo import distance_km, region_label
from .priority import calculate_priority_with_reasons
from .timestamps import to_instant, utcnow

log = logging.getLogger(__name__)

DUPLICATE_MARKER = "⚠️ Possible duplicate incident"

TIME_WINDOWS: Dict[str, Optional[timedelta]] = {
    "15m": timedelta(minutes=15),
    "1h": timedelta(hours=1),
    "all": None,
}


def responder_center() -> Location:
    return Location(lat=config.RESPONDER_CENTER_LAT, lng=config.RESPONDER_CENTER_LNG)


def _keep(incident: Incident, filters: FeedFilters, now: datetime) -> bool:
    if filters.incident_type != "all":
        wanted = IncidentType.parse(filters.incident_type)
        if wanted is None or incident.type != wanted:
            return False

    window = TIME_WINDOWS.get(filters.time_window)
    if window is not None and now - incident.created_at > window:
        return False

    # incidents without a location can't be placed, keep them visible
    if incident.location is not None:
        center = filters.center or responder_center()
        radius = filters.radius_km if filters.radius_km is not None else config.DEFAULT_RADIUS_KM
        d = distance_km(center.lat, center.lng, incident.location.lat, incident.location.lng)
        if d > radius:
            return False

    return True


def filter_incidents(
    incidents: Iterable[Any],
    filters: Optional[FeedFilters] = None,
    now: Optional[datetime] = None,
) -> List[Incident]:
    """Apply the type / time-window / radius filters. Raw records are normalized."""
    filters = filters or FeedFilters()
    now = to_instant(now) if now is not None else utcnow()
    records = (Incident.from_record(i, now=now) for i in incidents)
    return [inc for inc in records if _keep(inc, filters, now)]


def triage(incident: Incident, others: List[Incident], now: datetime) -> TriagedIncident:
    result = calculate_priority_with_reasons(
        incident.severity,
        incident.status,
        incident.created_at,
        incident.sensor_verified,
        now=now,
    )
    duplicate = is_potential_duplicate(incident, others, now=now)
    reasons = [DUPLICATE_MARKER, *result.reasons] if duplicate else list(result.reasons)

    return TriagedIncident.model_validate(
        {
            **incident.model_dump(),
            "priority_score": result.score,
            "reasons": reasons,
            "is_duplicate": duplicate,
            "region": region_label(incident.location),
        }
    )


def build_feed(
    incidents: Iterable[Any],
    filters: Optional[FeedFilters] = None,
    now: Optional[datetime] = None,
) -> List[TriagedIncident]:
    """
    Operational feed: filter, score, flag duplicates, sort by priority.

    Every incident is scored against the same `now`. Duplicates are checked
    against the filtered set only and get DUPLICATE_MARKER in front of their
    reasons. Sorting is stable, so equal scores keep their input order.
    """
    now = to_instant(now) if now is not None else utcnow()
    kept = filter_incidents(incidents, filters, now)

    triaged = [
        triage(inc, kept[:idx] + kept[idx + 1:], now)
        for idx, inc in enumerate(kept)
    ]
    log.debug(
        "Feed built: %d kept, %d duplicates",
        len(triaged),
        sum(1 for t in triaged if t.is_duplicate),
    )
    return sorted(triaged, key=lambda t: t.priority_score, reverse=True)


def severity_counts(feed: Iterable[Incident]) -> Dict[str, int]:
    counts = {s.value: 0 for s in (Severity.CRITICAL, Severity.MEDIUM, Severity.LOW)}
    for inc in feed:
        counts[inc.severity.value] += 1
    return counts
