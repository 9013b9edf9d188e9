"""Shared fixtures: a fixed clock and incident factories."""

from datetime import datetime, timedelta, timezone

import pytest

from sentra.models.incident import Incident

NOW = datetime(2026, 3, 14, 12, 0, tzinfo=timezone.utc)

# near Hyderabad, well inside the default 1000 km responder radius
HYD = (17.40, 78.50)


def minutes_ago(minutes: float) -> datetime:
    return NOW - timedelta(minutes=minutes)


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def make_incident():
    """
    Factory for Incident records. Defaults describe a fresh, unverified,
    Low severity fire at HYD reported at NOW.
    """

    def _make(
        id="inc-1",
        type="Fire",
        severity="Low",
        status="Reported",
        age_minutes=0.0,
        location=HYD,
        sensor_verified=False,
        **extra,
    ) -> Incident:
        loc = None if location is None else {"lat": location[0], "lng": location[1]}
        return Incident(
            id=id,
            type=type,
            severity=severity,
            status=status,
            created_at=minutes_ago(age_minutes),
            location=loc,
            sensor_verified=sensor_verified,
            **extra,
        )

    return _make
