# sentra/models/incident.py
from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Literal, Mapping, Optional, Tuple
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel

from ..services.timestamps import to_instant


# ---------- ENUMS ----------

class _ParsableEnum(str, Enum):
    @classmethod
    def lookup(cls, value: Any):
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().lower()
            for member in cls:
                if member.value.lower() == key:
                    return member
        return None


class IncidentType(_ParsableEnum):
    ACCIDENT = "Accident"
    MEDICAL = "Medical"
    FIRE = "Fire"
    SMOG = "Smog"

    @classmethod
    def parse(cls, value: Any) -> Optional["IncidentType"]:
        # unknown categories have no default arm: they simply never match
        return cls.lookup(value)


class Severity(_ParsableEnum):
    LOW = "Low"
    MEDIUM = "Medium"
    CRITICAL = "Critical"

    @classmethod
    def parse(cls, value: Any) -> "Severity":
        return cls.lookup(value) or cls.LOW


class Status(_ParsableEnum):
    REPORTED = "Reported"
    VERIFIED = "Verified"
    ASSIGNED = "Assigned"
    RESOLVED = "Resolved"

    @classmethod
    def parse(cls, value: Any) -> "Status":
        return cls.lookup(value) or cls.REPORTED


# ---------- SHARED CONFIG ----------

class _CamelModel(BaseModel):
    # JSON uses the camelCase names of the stored documents (createdAt, sensorVerified, ...)
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class Location(_CamelModel):
    lat: float = Field(..., description="Latitude (decimal degrees)")
    lng: float = Field(..., description="Longitude (decimal degrees)")
    label: Optional[str] = None


def _coerce_location(value: Any) -> Optional[Location]:
    """
    Return a Location or None. Anything without numeric lat/lng is treated as
    "no location" instead of a validation error.
    """
    if value is None or isinstance(value, Location):
        return value
    if isinstance(value, Mapping):
        lat, lng = value.get("lat"), value.get("lng")
        label = value.get("label")
    else:
        lat, lng = getattr(value, "lat", None), getattr(value, "lng", None)
        label = getattr(value, "label", None)
    if isinstance(lat, bool) or isinstance(lng, bool):
        return None
    try:
        return Location(lat=float(lat), lng=float(lng), label=label if isinstance(label, str) else None)
    except (TypeError, ValueError):
        return None


# ---------- INCIDENT RECORDS ----------

class Incident(_CamelModel):
    """
    Read-only incident record as the triage pipeline sees it.

    Lenient on purpose at the field level: severity/status fall back to their
    default arm, unknown types become None, bad locations become None and any
    timestamp encoding is normalized (unparseable -> now).
    """

    model_config = ConfigDict(extra="ignore")

    id: str = Field(default_factory=lambda: uuid4().hex)
    type: Optional[IncidentType] = None
    severity: Severity = Severity.LOW
    status: Status = Status.REPORTED
    # missing values resolve through the validator, so the injected clock applies to them too
    created_at: datetime = Field(None, validate_default=True)
    location: Optional[Location] = None
    sensor_verified: bool = False
    description: Optional[str] = None
    confidence: int = 40
    crowd_verify_count: int = 0
    crowd_verified_by: Tuple[str, ...] = ()

    @field_validator("id", mode="before")
    @classmethod
    def normalize_id(cls, v: Any) -> str:
        return uuid4().hex if v is None else str(v)

    @field_validator("type", mode="before")
    @classmethod
    def normalize_type(cls, v: Any) -> Optional[IncidentType]:
        return IncidentType.parse(v)

    @field_validator("severity", mode="before")
    @classmethod
    def normalize_severity(cls, v: Any) -> Severity:
        return Severity.parse(v)

    @field_validator("status", mode="before")
    @classmethod
    def normalize_status(cls, v: Any) -> Status:
        return Status.parse(v)

    @field_validator("created_at", mode="before")
    @classmethod
    def normalize_created_at(cls, v: Any, info: ValidationInfo) -> datetime:
        now = (info.context or {}).get("now")
        return to_instant(v, now=now)

    @field_validator("location", mode="before")
    @classmethod
    def normalize_location(cls, v: Any) -> Optional[Location]:
        return _coerce_location(v)

    @field_validator("sensor_verified", mode="before")
    @classmethod
    def normalize_sensor_verified(cls, v: Any) -> bool:
        return v is True

    @field_validator("confidence", "crowd_verify_count", mode="before")
    @classmethod
    def normalize_counter(cls, v: Any) -> int:
        try:
            return int(v)
        except (TypeError, ValueError):
            return 0

    @field_validator("crowd_verified_by", mode="before")
    @classmethod
    def normalize_voters(cls, v: Any) -> Tuple[str, ...]:
        if not isinstance(v, (list, tuple, set)):
            return ()
        return tuple(str(x) for x in v)

    @classmethod
    def from_record(cls, record: Any, now: Optional[datetime] = None) -> "Incident":
        """
        Build an Incident from a raw storage document (or pass one through).
        A missing or unparseable createdAt becomes `now` (wall clock if not given).
        """
        if isinstance(record, Incident):
            return record
        if not isinstance(record, Mapping):
            record = {}
        return cls.model_validate(dict(record), context={"now": now})


class IncidentIn(_CamelModel):
    """Payload a citizen submits when reporting."""

    model_config = ConfigDict(frozen=False)

    type: IncidentType = Field(..., description="Accident | Medical | Fire | Smog")
    severity: Severity = Field(..., description="Low | Medium | Critical")
    location: Location
    description: Optional[str] = Field(None, max_length=2000)


# ---------- DERIVED OUTPUT ----------

class PriorityResult(_CamelModel):
    score: int
    reasons: List[str] = Field(default_factory=list)


class TriagedIncident(Incident):
    priority_score: int = 0
    reasons: List[str] = Field(default_factory=list)
    is_duplicate: bool = False
    region: Optional[str] = None


class FeedFilters(_CamelModel):
    time_window: Literal["15m", "1h", "all"] = "all"
    incident_type: str = Field("all", description="'all' or one incident type")
    radius_km: Optional[float] = Field(None, gt=0, description="Defaults to DEFAULT_RADIUS_KM")
    center: Optional[Location] = Field(None, description="Defaults to the responder centre")


class FeedResponse(_CamelModel):
    incidents: List[TriagedIncident]
    counts: Dict[str, int]
