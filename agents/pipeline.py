# =============================================================================
# agents/pipeline.py - Photo Analysis Pipeline
# =============================================================================
# Orchestrates one color analysis end to end:
#
#   upload (retry) -> HEAD check -> Color Analyst -> Palette Stylist -> result
#
# Failures before the photo is stored and reachable (bad file, exhausted
# upload retries, unreachable URL) propagate to the caller. Any failure after
# that point is logged and replaced by a full fallback analysis, so a
# reachable photo always produces a complete AnalysisResult.
#
# Collaborators (storage, model, HTTP client, error logger, performance
# tracker, random source) are all passed in; nothing here reads globals.
#
# Usage:
#   pipeline = PhotoAnalysisPipeline(uploader, analyst, stylist, fallback,
#                                    http_client, error_logger, tracker)
#   result = pipeline.analyze_photo(ImageFile("me.jpg", data, "image/jpeg"),
#                                   owner_id="user-123")
# =============================================================================

from __future__ import annotations

import logging
import time
from dataclasses import dataclass

import httpx

from agents.color_analyst import ColorAnalystAgent
from agents.fallback import FallbackGenerator
from agents.palette_stylist import PaletteStylistAgent
from core.models.analysis import AnalysisResult
from core.services.upload_service import (
    ImageFile,
    UploadRetrier,
    check_image_reachable,
)
from lib.monitoring import ErrorLogger, PerformanceTracker

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalysisRun:
    """Outcome of one pipeline run."""

    result: AnalysisResult
    image_url: str
    processing_time_ms: int
    used_fallback: bool


class PhotoAnalysisPipeline:
    """
    Upload a photo and analyze it, degrading to synthetic content on failure.

    Attributes:
        uploader: UploadRetrier (validates the file, stores it with retry)
        analyst: ColorAnalystAgent for the primary vision call
        stylist: PaletteStylistAgent for the enrichment call
        fallback: FallbackGenerator for total-failure results
        http_client: httpx.Client used for the reachability check
        error_logger: ErrorLogger receiving absorbed failures
        tracker: PerformanceTracker timing each stage
        reachability_timeout: Seconds allowed for the HEAD request
    """

    def __init__(
        self,
        uploader: UploadRetrier,
        analyst: ColorAnalystAgent,
        stylist: PaletteStylistAgent,
        fallback: FallbackGenerator,
        http_client: httpx.Client,
        error_logger: ErrorLogger,
        tracker: PerformanceTracker,
        reachability_timeout: float = 10.0,
    ):
        self.uploader = uploader
        self.analyst = analyst
        self.stylist = stylist
        self.fallback = fallback
        self.http_client = http_client
        self.error_logger = error_logger
        self.tracker = tracker
        self.reachability_timeout = reachability_timeout

    def analyze_photo(self, file: ImageFile, owner_id: str) -> AnalysisResult:
        """Run the pipeline and return just the result."""
        return self.run(file, owner_id).result

    def run(self, file: ImageFile, owner_id: str) -> AnalysisRun:
        """
        Run the full pipeline.

        Args:
            file: The uploaded photo
            owner_id: User id (storage path prefix, error attribution)

        Returns:
            AnalysisRun with the result and run metadata

        Raises:
            FileValidationError: Photo failed precondition checks
            UploadError: Storage upload failed after all retries
            ImageNotAccessibleError: Stored photo URL isn't reachable
        """
        started = time.perf_counter()
        logger.info(f"Starting photo analysis for: {file.filename}")

        # ---------------------------------------------------------------------
        # Step 1: Upload (errors surface to the caller)
        # ---------------------------------------------------------------------
        with self.tracker.track("upload"):
            upload = self.uploader.upload(file, owner_id)

        with self.tracker.track("reachability_check"):
            check_image_reachable(
                upload.public_url,
                self.http_client,
                timeout=self.reachability_timeout,
            )

        # ---------------------------------------------------------------------
        # Step 2: Analyze (errors degrade to a fallback result)
        # ---------------------------------------------------------------------
        used_fallback = False
        try:
            with self.tracker.track("basic_analysis"):
                basic = self.analyst.analyze_basic(upload.public_url)

            with self.tracker.track("enhanced_analysis"):
                result = self.stylist.analyze_enhanced(basic)

        except Exception as e:
            logger.error(f"Photo analysis failed, providing fallback analysis: {e}")
            self.error_logger.log_analysis_error(
                e,
                filename=file.filename,
                image_url=upload.public_url,
                owner_id=owner_id,
            )
            result = self.fallback.full_fallback(file.filename)
            used_fallback = True

        elapsed_ms = int((time.perf_counter() - started) * 1000)
        logger.info(
            f"Photo analysis finished in {elapsed_ms}ms "
            f"(season={result.season.value}, fallback={used_fallback})"
        )

        return AnalysisRun(
            result=result,
            image_url=upload.public_url,
            processing_time_ms=elapsed_ms,
            used_fallback=used_fallback,
        )
