from __future__ import annotations

from fastapi import APIRouter, HTTPException

from ..models.incident import Incident, IncidentIn, TriagedIncident
from ..models.requests import CrowdVerifyRequest, SensorVerifyRequest, StatusUpdateRequest
from ..services.feed import triage
from ..services.verification import crowd_verify, new_incident, sensor_verify, update_status

router = APIRouter(tags=["incident"])


@router.post("/report_incident", response_model=TriagedIncident)
def report_incident(data: IncidentIn):
    """
    Accept a citizen report (type, severity, location, description) and return
    the incident record to store: system fields filled in, plus its initial
    priority and region. Storing it is up to the caller.
    """
    incident = new_incident(data)
    return triage(incident, [], incident.created_at)


@router.post("/crowd_verify", response_model=Incident)
def crowd_verify_incident(data: CrowdVerifyRequest):
    try:
        return crowd_verify(data.incident, data.voter_id)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/sensor_verify", response_model=Incident)
def sensor_verify_incident(data: SensorVerifyRequest):
    return sensor_verify(data.incident)


@router.post("/status", response_model=Incident)
def update_incident_status(data: StatusUpdateRequest):
    try:
        return update_status(data.incident, data.status)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
