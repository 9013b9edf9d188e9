# sentra/services/verification.py
from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Optional

from ..models.incident import Incident, IncidentIn, Status
from .timestamps import to_instant, utcnow

log = logging.getLogger(__name__)

INITIAL_CONFIDENCE = 40
CROWD_CONFIDENCE_STEP = 10
SENSOR_CONFIDENCE_STEP = 25
MAX_CONFIDENCE = 100


def new_incident(report: IncidentIn, now: Optional[datetime] = None) -> Incident:
    """
    Turn a citizen report into an incident record. System-controlled fields
    (status, createdAt, verification, confidence) are never taken from the client.
    """
    return Incident(
        type=report.type,
        severity=report.severity,
        location=report.location,
        description=report.description,
        status=Status.REPORTED,
        created_at=to_instant(now) if now is not None else utcnow(),
        sensor_verified=False,
        confidence=INITIAL_CONFIDENCE,
        crowd_verify_count=0,
        crowd_verified_by=(),
    )


def _escalated(status: Status) -> Status:
    # soft escalation: only a fresh report moves to Verified
    return Status.VERIFIED if status is Status.REPORTED else status


def _bump(confidence: int, step: int) -> int:
    return min(MAX_CONFIDENCE, confidence + step)


def crowd_verify(incident: Incident, voter_id: str) -> Incident:
    """
    Record one crowd confirmation. Each voter (user or session id) counts once;
    a repeat vote returns the incident unchanged.
    """
    voter_id = (voter_id or "").strip()
    if not voter_id:
        raise ValueError("voter_id is required")

    if voter_id in incident.crowd_verified_by:
        log.warning("Incident %s already verified by %s", incident.id, voter_id)
        return incident

    return incident.model_copy(
        update={
            "crowd_verify_count": incident.crowd_verify_count + 1,
            "crowd_verified_by": (*incident.crowd_verified_by, voter_id),
            "status": _escalated(incident.status),
            "confidence": _bump(incident.confidence, CROWD_CONFIDENCE_STEP),
        }
    )


def sensor_verify(incident: Incident) -> Incident:
    """Mark the incident as confirmed by an automated sensor."""
    return incident.model_copy(
        update={
            "sensor_verified": True,
            "status": _escalated(incident.status),
            "confidence": _bump(incident.confidence, SENSOR_CONFIDENCE_STEP),
        }
    )


def update_status(incident: Incident, status: Any) -> Incident:
    """Operator-driven lifecycle change. Unknown values are rejected here."""
    parsed = Status.lookup(status)
    if parsed is None:
        raise ValueError(f"Unknown status: {status!r}")
    return incident.model_copy(update={"status": parsed})
