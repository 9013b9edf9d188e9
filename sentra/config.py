# sentra/config.py
from __future__ import annotations

import logging
import os

from dotenv import load_dotenv

log = logging.getLogger(__name__)

# --- Load .env early so os.getenv works everywhere ---
load_dotenv()


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        log.warning("Ignoring non-numeric %s=%r, using %s", name, raw, default)
        return default


def api_prefix() -> str:
    """Optional global prefix (e.g. "/api"), always '/x' form or empty."""
    prefix = os.getenv("API_PREFIX", "").strip()
    if not prefix:
        return ""
    if not prefix.startswith("/"):
        prefix = "/" + prefix
    # avoid trailing slash so paths look like /api/triage (not //triage)
    return prefix.rstrip("/")


def cors_origins() -> list[str]:
    """CORS_ORIGINS="https://ops.example.com,https://staging.example.com" """
    raw = os.getenv("CORS_ORIGINS", "")
    return [o.strip() for o in raw.split(",") if o.strip()]


# Where responders are stationed; the feed radius is measured from here.
RESPONDER_CENTER_LAT = _float_env("RESPONDER_CENTER_LAT", 20.5937)
RESPONDER_CENTER_LNG = _float_env("RESPONDER_CENTER_LNG", 78.9629)
DEFAULT_RADIUS_KM = _float_env("DEFAULT_RADIUS_KM", 1000.0)

PORT = int(_float_env("PORT", 8000))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
