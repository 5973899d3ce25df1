# =============================================================================
# lib/supabase_client.py - Supabase Client Wrapper
# =============================================================================
# This module provides a typed wrapper for Supabase database operations.
# It implements the singleton pattern to reuse a single client connection
# and provides specialized methods for writing:
# - Completed color analyses (color_analyses table)
# - Structured error records (error_logs table)
#
# The schema itself is owned by the hosted project; this module only writes
# rows in the shape those tables already expect (JSON-encoded array columns).
#
# Usage:
#   from lib.supabase_client import SupabaseClient
#   row = SupabaseClient.insert_analysis(user_id, image_url, result, 4200)
# =============================================================================

from __future__ import annotations

import json
import logging
import uuid
from typing import Any, TYPE_CHECKING

from supabase import create_client, Client

from app.config import settings

if TYPE_CHECKING:
    from core.models.analysis import AnalysisResult
    from lib.monitoring import ErrorLog

# Set up logging for this module
logger = logging.getLogger(__name__)


class SupabaseClientError(Exception):
    """
    Error during Supabase operations.

    Provides actionable error messages following the principle:
    "Errors should tell HOW to fix, not just WHAT failed."
    """

    def __init__(
        self,
        message: str,
        code: str = "SUPABASE_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f" Suggestion: {self.suggestion}"
        return result


class SupabaseClient:
    """
    Typed wrapper for Supabase database operations.

    Implements singleton pattern - one client instance is shared across
    the application. All methods are class methods for easy access without
    instantiation.
    """

    _instance: Client | None = None

    @classmethod
    def get_client(cls) -> Client:
        """
        Get or create the singleton Supabase client.

        Uses service_role key which bypasses Row Level Security (RLS).
        This is appropriate for server-side operations.

        Raises:
            SupabaseClientError: If client creation fails
        """
        if cls._instance is None:
            try:
                cls._instance = create_client(
                    settings.SUPABASE_URL,
                    settings.SUPABASE_SERVICE_KEY
                )
                logger.info("Supabase client initialized successfully")
            except Exception as e:
                raise SupabaseClientError(
                    message=f"Failed to create Supabase client: {e}",
                    code="CLIENT_INIT_FAILED",
                    suggestion="Check SUPABASE_URL and SUPABASE_SERVICE_KEY in your .env file"
                )
        return cls._instance

    # -------------------------------------------------------------------------
    # Color Analyses
    # -------------------------------------------------------------------------

    @classmethod
    def insert_analysis(
        cls,
        user_id: str,
        image_url: str,
        result: AnalysisResult,
        processing_time_ms: int | None = None,
    ) -> dict[str, Any]:
        """
        Store a completed analysis.

        List and object fields are JSON-encoded into their TEXT columns.
        Premium content is stored too; whether it is shown is governed by
        is_premium_unlocked, which the payment flow flips.

        Returns:
            Inserted row dict

        Raises:
            SupabaseClientError: If insert fails
        """
        client = cls.get_client()
        payload = result.to_response()

        data = {
            "id": str(uuid.uuid4()),
            "user_id": user_id,
            "image_url": image_url,
            "skin_tone": payload["skinTone"],
            "season": payload["season"],
            "free_colors": json.dumps(payload["freeColors"]),
            "premium_colors": json.dumps(payload["premiumColors"]),
            "recommendations": json.dumps(payload["recommendations"]),
            "makeup_tips": json.dumps(payload.get("makeupTips")),
            "wardrobe_guide": json.dumps(payload.get("wardrobeGuide")),
            "seasonal_details": json.dumps(payload.get("seasonalDetails")),
            "status": "completed",
            "processing_time_ms": processing_time_ms,
        }

        try:
            response = client.table("color_analyses").insert(data).execute()

            if response.data:
                logger.debug(f"Stored analysis for user {user_id}")
                return response.data[0]
            raise SupabaseClientError(
                message="Insert returned no data",
                code="INSERT_NO_DATA"
            )

        except SupabaseClientError:
            raise
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to insert analysis: {e}",
                code="INSERT_ANALYSIS_FAILED",
                suggestion="Check that the color_analyses table exists and is writable",
                details={"user_id": user_id}
            )

    # -------------------------------------------------------------------------
    # Error Logs
    # -------------------------------------------------------------------------

    @classmethod
    def insert_error_log(cls, entry: ErrorLog) -> dict[str, Any]:
        """
        Store a structured error record.

        Used as the ErrorLogger sink in production.

        Raises:
            SupabaseClientError: If insert fails
        """
        client = cls.get_client()

        data = {
            "id": entry.id,
            "user_id": entry.user_id,
            "error_type": entry.error_type,
            "error_message": entry.error_message,
            "stack_trace": entry.stack_trace,
            "severity": entry.severity.value,
            "additional_data": json.dumps(entry.additional_data, default=str),
            "created_at": entry.timestamp.isoformat(),
        }

        try:
            response = client.table("error_logs").insert(data).execute()
            return response.data[0] if response.data else data

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to insert error log: {e}",
                code="INSERT_ERROR_LOG_FAILED",
                details={"error_id": entry.id}
            )
