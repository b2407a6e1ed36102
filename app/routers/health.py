# =============================================================================
# app/routers/health.py - Health Check Endpoints
# =============================================================================
# Liveness, readiness and a basic status check for monitoring.
#
# Readiness checks what the handlers actually depend on: the tables they read,
# the avatar bucket, and whether Spotify credentials are present. Spotify
# itself is not called, so a catalog outage never marks the API unready.
# =============================================================================

from fastapi import APIRouter
from pydantic import BaseModel

from app.config import settings
from lib.supabase_client import SupabaseClient
from lib.utils import utc_now

router = APIRouter()

VERSION = "1.0.0"

# Tables every band-scoped handler reads
PROBE_TABLES = ("bands", "band_members", "profiles", "rehearsals", "song_suggestions")


# =============================================================================
# Response Models
# =============================================================================

class HealthResponse(BaseModel):
    status: str
    timestamp: str
    environment: str
    version: str
    spotify_configured: bool


class ReadinessResponse(BaseModel):
    """
    Readiness report.

    `checks` maps a component ("database", "storage", "spotify") to
    "healthy" or a short "unhealthy: ..." reason.
    """
    status: str
    checks: dict[str, str]
    timestamp: str


class LivenessResponse(BaseModel):
    status: str
    timestamp: str


# =============================================================================
# Probes
# =============================================================================

def _check_database() -> str:
    client = SupabaseClient.get_client()
    for table in PROBE_TABLES:
        try:
            client.table(table).select("id").limit(1).execute()
        except Exception as e:
            return f"unhealthy: {table}: {str(e)[:50]}"
    return "healthy"


def _check_storage() -> str:
    try:
        buckets = SupabaseClient.get_client().storage.list_buckets()
    except Exception as e:
        return f"unhealthy: {str(e)[:50]}"

    names = {getattr(b, "name", None) for b in buckets or []}
    if settings.AVATAR_BUCKET not in names:
        return f"unhealthy: bucket '{settings.AVATAR_BUCKET}' missing"
    return "healthy"


def _check_spotify() -> str:
    return "healthy" if settings.spotify_configured else "unhealthy: credentials not set"


# =============================================================================
# Endpoints
# =============================================================================

@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Basic status for load balancers; touches no dependency."""
    return HealthResponse(
        status="healthy",
        timestamp=utc_now().isoformat(),
        environment=settings.ENVIRONMENT,
        version=VERSION,
        spotify_configured=settings.spotify_configured,
    )


@router.get("/health/ready", response_model=ReadinessResponse)
def readiness_check():
    """
    Readiness check endpoint.

    "ready" only when every component is healthy, "degraded" otherwise.
    """
    checks = {
        "database": _check_database(),
        "storage": _check_storage(),
        "spotify": _check_spotify(),
    }
    all_healthy = all(value == "healthy" for value in checks.values())

    return ReadinessResponse(
        status="ready" if all_healthy else "degraded",
        checks=checks,
        timestamp=utc_now().isoformat(),
    )


@router.get("/health/live", response_model=LivenessResponse)
async def liveness_check():
    return LivenessResponse(status="alive", timestamp=utc_now().isoformat())
