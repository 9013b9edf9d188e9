# sentra/models/requests.py
from __future__ import annotations

from typing import Any, List

from pydantic import Field

from .incident import FeedFilters, Incident, _CamelModel

# ---------- FEED / TRIAGE ----------

class FeedRequest(_CamelModel):
    incidents: List[Incident] = Field(default_factory=list)
    filters: FeedFilters = Field(default_factory=FeedFilters)


class PriorityRequest(_CamelModel):
    # kept loose: the scorer falls back to defaults instead of rejecting
    severity: Any = None
    status: Any = None
    created_at: Any = None
    sensor_verified: Any = None


class DuplicateRequest(_CamelModel):
    candidate: Incident
    others: List[Incident] = Field(default_factory=list)


class DuplicateResponse(_CamelModel):
    is_duplicate: bool

# ---------- LIFECYCLE ----------

class CrowdVerifyRequest(_CamelModel):
    incident: Incident
    # user id, or the browser session id for anonymous responders
    voter_id: str = Field(..., min_length=1, max_length=256)


class SensorVerifyRequest(_CamelModel):
    incident: Incident


class StatusUpdateRequest(_CamelModel):
    incident: Incident
    status: str
