# =============================================================================
# app/routers/analysis.py - Photo Analysis Endpoints
# =============================================================================
# Accepts a photo, runs the analysis pipeline and returns the color result.
# Also exposes the static per-season palettes used for fallback results.
# =============================================================================

import logging
from typing import Annotated

from fastapi import APIRouter, File, Form, HTTPException, Path, UploadFile
from fastapi.concurrency import run_in_threadpool

from agents.fallback import SEASON_BASE_COLORS, expand_palette
from app.config import settings
from app.dependencies import PipelineDep, RateLimiterDep, SupabaseDep
from app.exceptions import RateLimitExceededError, SuspiciousFilenameError
from core.models.analysis import Season
from core.services.upload_service import ImageFile
from lib.colors import group_by_category
from lib.security import is_suspicious_filename, sanitize_input

logger = logging.getLogger(__name__)

router = APIRouter()


# =============================================================================
# Endpoints
# =============================================================================

@router.post("")
async def create_analysis(
    file: Annotated[UploadFile, File(description="Photo to analyze (max 15MB)")],
    user_id: Annotated[str, Form(min_length=1, description="Id of the authenticated user")],
    pipeline: PipelineDep,
    rate_limiter: RateLimiterDep,
    supabase: SupabaseDep,
):
    """
    Analyze a photo.

    This endpoint:
    1. Checks the per-user rate limit
    2. Screens the filename
    3. Runs the pipeline (upload with retry, reachability check, two AI calls)
    4. Stores the result in color_analyses (best effort)

    Once the photo is uploaded and reachable this always returns a complete
    result; `used_fallback` tells whether it came from the AI or from
    static data.
    """
    user_id = sanitize_input(user_id)

    # =========================================================================
    # 1. Screening & Rate Limit
    # =========================================================================

    filename = file.filename or ""
    if is_suspicious_filename(filename):
        raise SuspiciousFilenameError(filename)

    if not rate_limiter.is_allowed(user_id):
        raise RateLimitExceededError(user_id, settings.RATE_LIMIT_WINDOW_SECONDS)

    content = await file.read()
    image = ImageFile(filename=filename, content=content, content_type=file.content_type)

    logger.info(f"Processing analysis upload: {filename} ({image.size} bytes) for {user_id}")

    # =========================================================================
    # 2. Run Pipeline
    # =========================================================================

    run = await run_in_threadpool(pipeline.run, image, user_id)

    # =========================================================================
    # 3. Store Result
    # =========================================================================

    analysis_id = None
    try:
        row = supabase.insert_analysis(
            user_id=user_id,
            image_url=run.image_url,
            result=run.result,
            processing_time_ms=run.processing_time_ms,
        )
        analysis_id = row.get("id")
    except Exception as e:
        logger.warning(f"Failed to store analysis for {user_id}: {e}")

    # =========================================================================
    # 4. Return Response
    # =========================================================================

    return {
        "analysis_id": analysis_id,
        "image_url": run.image_url,
        "used_fallback": run.used_fallback,
        "processing_time_ms": run.processing_time_ms,
        "result": run.result.to_response(),
    }


@router.get("/palettes/{season}")
async def get_season_palette(
    season: Annotated[str, Path(description="Spring, Summer, Autumn or Winter")],
):
    """
    Static palette for a season, grouped by category.

    These are the colors used when the AI enrichment is unavailable.
    """
    parsed = Season.parse(season)
    if parsed is None:
        raise HTTPException(
            status_code=404,
            detail=f"Unknown season: {season}. Use Spring, Summer, Autumn or Winter",
        )

    groups = group_by_category(expand_palette(SEASON_BASE_COLORS[parsed]))
    return {
        "season": parsed.value,
        "colors": {
            key: [c.model_dump(mode="json", by_alias=True, exclude_none=True) for c in colors]
            for key, colors in groups.items()
        },
    }
