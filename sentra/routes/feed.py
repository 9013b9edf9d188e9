from __future__ import annotations

from fastapi import APIRouter

from ..models.incident import FeedResponse, PriorityResult
from ..models.requests import DuplicateRequest, DuplicateResponse, FeedRequest, PriorityRequest
from ..services.dedup import is_potential_duplicate
from ..services.feed import build_feed, severity_counts
from ..services.priority import calculate_priority_with_reasons

router = APIRouter(tags=["triage"])


@router.post("/triage", response_model=FeedResponse)
def triage_feed(data: FeedRequest):
    """
    Filter the posted incidents, score them, flag likely duplicates and
    return them ordered by priority (highest first) with per-severity counts.
    """
    feed = build_feed(data.incidents, data.filters)
    return FeedResponse(incidents=feed, counts=severity_counts(feed))


@router.post("/priority", response_model=PriorityResult)
def priority(data: PriorityRequest):
    return calculate_priority_with_reasons(
        data.severity,
        data.status,
        data.created_at,
        data.sensor_verified,
    )


@router.post("/duplicate", response_model=DuplicateResponse)
def duplicate(data: DuplicateRequest):
    return DuplicateResponse(is_duplicate=is_potential_duplicate(data.candidate, data.others))
