# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable utilities:
# - colors.py: Hex validation/normalization, lighten/darken, grouping
# - monitoring.py: ErrorLogger and PerformanceTracker
# - security.py: Rate limiting, filename screening, input sanitizing
# - supabase_client.py: Typed Supabase wrapper for database operations
# - system_checks.py: Built-in self tests
# - utils.py: Shared utilities (error handling)
#
# These modules are self-contained and can be tested in isolation.
# =============================================================================

from lib.supabase_client import SupabaseClient, SupabaseClientError
from lib.monitoring import ErrorLog, ErrorLogger, PerformanceTracker, Severity
from lib.security import RateLimiter
from lib.utils import ApplicationError

__all__ = [
    # Supabase
    "SupabaseClient",
    "SupabaseClientError",
    # Monitoring
    "ErrorLog",
    "ErrorLogger",
    "PerformanceTracker",
    "Severity",
    # Security
    "RateLimiter",
    # Utils
    "ApplicationError",
]
