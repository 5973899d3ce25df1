# =============================================================================
# app/routers/health.py - Health Check Endpoints
# =============================================================================
# Provides health check endpoints for monitoring and load balancers, plus the
# built-in self tests and a read-only view of recent errors.
# =============================================================================

from datetime import datetime, timezone

from fastapi import APIRouter, Query
from fastapi.concurrency import run_in_threadpool
from pydantic import BaseModel

from app.config import settings
from app.dependencies import ErrorLoggerDep, PerformanceTrackerDep, SupabaseDep
from lib.system_checks import SystemTestResults, run_system_tests

router = APIRouter()


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


# =============================================================================
# Response Models
# =============================================================================

class HealthResponse(BaseModel):
    """Basic health check response."""
    status: str
    timestamp: str
    environment: str
    version: str


class ChecksResponse(BaseModel):
    """Individual service checks."""
    database: str
    storage: str
    ai: str


class ReadinessResponse(BaseModel):
    """Readiness check response."""
    status: str
    checks: ChecksResponse
    timestamp: str


class LivenessResponse(BaseModel):
    """Liveness check response."""
    status: str
    timestamp: str


# =============================================================================
# Endpoints
# =============================================================================

@router.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Health check endpoint.

    Returns basic health status for load balancers and monitoring.
    """
    return HealthResponse(
        status="healthy",
        timestamp=_now(),
        environment=settings.ENVIRONMENT,
        version="1.0.0",
    )


@router.get("/health/ready", response_model=ReadinessResponse)
async def readiness_check(supabase: SupabaseDep):
    """
    Readiness check endpoint.

    Checks database and storage connectivity and that an OpenAI key is
    configured.
    """
    checks = ChecksResponse(database="unknown", storage="unknown", ai="unknown")

    # Check database
    try:
        client = supabase.get_client()
        client.table("color_analyses").select("id").limit(1).execute()
        checks.database = "healthy"
    except Exception as e:
        checks.database = f"unhealthy: {str(e)[:50]}"

    # Check storage
    try:
        client = supabase.get_client()
        client.storage.list_buckets()
        checks.storage = "healthy"
    except Exception as e:
        checks.storage = f"unhealthy: {str(e)[:50]}"

    checks.ai = "configured" if settings.OPENAI_API_KEY else "unhealthy: OPENAI_API_KEY not set"

    all_healthy = (
        checks.database == "healthy"
        and checks.storage == "healthy"
        and checks.ai == "configured"
    )

    return ReadinessResponse(
        status="ready" if all_healthy else "degraded",
        checks=checks,
        timestamp=_now(),
    )


@router.get("/health/live", response_model=LivenessResponse)
async def liveness_check():
    """
    Liveness check endpoint.

    Returns whether the service process is alive.
    """
    return LivenessResponse(
        status="alive",
        timestamp=_now(),
    )


@router.get("/health/system-tests", response_model=SystemTestResults)
async def system_tests():
    """
    Run the built-in self tests.

    Every check runs even if an earlier one fails; `overall` is true only
    when all of them pass.
    """
    return await run_in_threadpool(run_system_tests)


@router.get("/health/errors")
async def recent_errors(
    error_logger: ErrorLoggerDep,
    tracker: PerformanceTrackerDep,
    limit: int = Query(20, ge=1, le=100),
    error_type: str | None = Query(None, description="Filter by error type"),
):
    """Most recent errors (newest first) and per-stage timing metrics."""
    logs = error_logger.get_logs_by_type(error_type) if error_type else error_logger.get_logs()
    return {
        "errors": [log.model_dump(mode="json") for log in logs[:limit]],
        "metrics": tracker.get_all_metrics(),
    }
