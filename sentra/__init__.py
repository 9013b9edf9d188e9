"""Incident triage for the citizen-reporting responder feed."""

from .models.incident import Incident, IncidentType, Location, PriorityResult, Severity, Status
from .services.dedup import is_potential_duplicate
from .services.priority import calculate_priority_with_reasons
from .services.timestamps import to_instant

__all__ = [
    "Incident",
    "IncidentType",
    "Location",
    "PriorityResult",
    "Severity",
    "Status",
    "calculate_priority_with_reasons",
    "is_potential_duplicate",
    "to_instant",
]

__version__ = "1.0.0"
