# sentra/services/priority.py
from __future__ import annotations

from datetime import datetime
from typing import Any, List, Optional, Tuple

from ..models.incident import PriorityResult, Severity, Status
from .timestamps import to_instant, utcnow

# Severity weight + reason
SEVERITY_WEIGHTS: dict[Severity, Tuple[int, str]] = {
    Severity.CRITICAL: (120, "Critical severity"),
    Severity.MEDIUM: (70, "Medium severity"),
    Severity.LOW: (30, "Low severity"),
}

RESOLVED_PENALTY = (-50, "Incident resolved")
UNRESOLVED_BONUS = (40, "Incident unresolved")

# (upper bound in minutes, inclusive) -> weight + reason; the last band is open-ended
AGE_BANDS: List[Tuple[float, int, str]] = [
    (5, 25, "Reported within last 5 minutes"),
    (15, 40, "Incident escalating with time"),
    (30, 60, "Delayed response risk"),
    (float("inf"), 80, "Critical delay — immediate action required"),
]

SENSOR_BONUS = (60, "Sensor verified signal")
SENSOR_PENDING = (-10, "Awaiting sensor confirmation")

SCORE_MIN = 0
SCORE_MAX = 1000


def minutes_since(created_at: Any, now: Optional[datetime] = None) -> float:
    """Elapsed minutes between created_at and now, never negative."""
    now = to_instant(now) if now is not None else utcnow()
    created = to_instant(created_at, now=now)
    return max(0.0, (now - created).total_seconds() / 60.0)


def _age_term(minutes_ago: float) -> Tuple[int, str]:
    for upper, weight, reason in AGE_BANDS:
        if minutes_ago <= upper:
            return weight, reason
    _, weight, reason = AGE_BANDS[-1]
    return weight, reason


def calculate_priority_with_reasons(
    severity: Any,
    status: Any,
    created_at: Any,
    sensor_verified: bool = False,
    *,
    now: Optional[datetime] = None,
) -> PriorityResult:
    """
    Score an incident and explain the score.

    Four terms, always in this order, each adding exactly one reason:
    severity, lifecycle status, age (escalates with time since the report)
    and sensor confirmation. The sum is rounded and clamped to [0, 1000].

    Unknown severity/status fall back to Low / unresolved, and an unparseable
    created_at counts as "just reported". `now` defaults to the wall clock;
    pass it explicitly for reproducible results.
    """
    terms = [
        SEVERITY_WEIGHTS[Severity.parse(severity)],
        RESOLVED_PENALTY if Status.parse(status) is Status.RESOLVED else UNRESOLVED_BONUS,
        _age_term(minutes_since(created_at, now)),
        SENSOR_BONUS if sensor_verified is True else SENSOR_PENDING,
    ]

    score = round(sum(weight for weight, _ in terms))
    score = max(SCORE_MIN, min(score, SCORE_MAX))
    return PriorityResult(score=score, reasons=[reason for _, reason in terms])
