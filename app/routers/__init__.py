# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - health.py: Health, readiness, self tests and recent errors
# - analysis.py: Photo upload and color analysis endpoints
#
# Each router is mounted in main.py with a URL prefix.
# =============================================================================

from . import analysis
from . import health

__all__ = [
    "analysis",
    "health",
]
