# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for shared resources.
# These are injected into route handlers using Depends().
#
# Each getter is cached, so the API process shares one pipeline, one rate
# limiter and one error logger. Tests replace them with
# app.dependency_overrides.
# =============================================================================

import random
from functools import lru_cache
from typing import Annotated

import httpx
from fastapi import Depends

from agents.color_analyst import ColorAnalystAgent
from agents.fallback import FallbackGenerator
from agents.palette_stylist import PaletteStylistAgent
from agents.pipeline import PhotoAnalysisPipeline
from agents.structured_model import OpenAIStructuredClient, StructuredModel
from app.config import Settings, settings
from core.services.storage_service import ObjectStore, StorageService
from core.services.upload_service import UploadRetrier
from lib.monitoring import ErrorLogger, PerformanceTracker
from lib.security import RateLimiter
from lib.supabase_client import SupabaseClient


@lru_cache
def get_error_logger() -> ErrorLogger:
    """
    Process-wide error logger.

    In production every record is also written to the error_logs table.
    """
    sink = SupabaseClient.insert_error_log if settings.is_production else None
    return ErrorLogger(capacity=settings.ERROR_LOG_CAPACITY, sink=sink)


@lru_cache
def get_performance_tracker() -> PerformanceTracker:
    return PerformanceTracker(
        get_error_logger(),
        slow_threshold_seconds=settings.SLOW_OPERATION_SECONDS,
    )


@lru_cache
def get_rate_limiter() -> RateLimiter:
    """Analyses per user, shared by every request in this process."""
    return RateLimiter(
        max_attempts=settings.RATE_LIMIT_MAX_ATTEMPTS,
        window_seconds=settings.RATE_LIMIT_WINDOW_SECONDS,
    )


def build_pipeline(
    config: Settings,
    error_logger: ErrorLogger,
    tracker: PerformanceTracker,
    model: StructuredModel | None = None,
    store: ObjectStore | None = None,
    http_client: httpx.Client | None = None,
    rng: random.Random | None = None,
) -> PhotoAnalysisPipeline:
    """
    Wire a PhotoAnalysisPipeline from settings.

    Any collaborator can be swapped out; the defaults talk to OpenAI,
    Supabase Storage and the network.
    """
    model = model or OpenAIStructuredClient(timeout_seconds=config.ANALYSIS_TIMEOUT_SECONDS)
    fallback = FallbackGenerator(rng)

    return PhotoAnalysisPipeline(
        uploader=UploadRetrier(
            store or StorageService,
            max_attempts=config.UPLOAD_MAX_ATTEMPTS,
            backoff_base=config.UPLOAD_BACKOFF_BASE_SECONDS,
            max_file_bytes=config.max_upload_size_bytes,
            error_logger=error_logger,
        ),
        analyst=ColorAnalystAgent(model, fallback),
        stylist=PaletteStylistAgent(model, fallback, error_logger),
        fallback=fallback,
        http_client=http_client or httpx.Client(),
        error_logger=error_logger,
        tracker=tracker,
        reachability_timeout=config.REACHABILITY_TIMEOUT_SECONDS,
    )


@lru_cache
def get_pipeline() -> PhotoAnalysisPipeline:
    return build_pipeline(settings, get_error_logger(), get_performance_tracker())


def get_supabase_client() -> type[SupabaseClient]:
    """Get the Supabase client class (all methods are class methods)."""
    return SupabaseClient


# Type aliases for dependency injection
SupabaseDep = Annotated[type[SupabaseClient], Depends(get_supabase_client)]
PipelineDep = Annotated[PhotoAnalysisPipeline, Depends(get_pipeline)]
RateLimiterDep = Annotated[RateLimiter, Depends(get_rate_limiter)]
ErrorLoggerDep = Annotated[ErrorLogger, Depends(get_error_logger)]
PerformanceTrackerDep = Annotated[PerformanceTracker, Depends(get_performance_tracker)]
