# =============================================================================
# agents/palette_stylist.py - Palette Stylist Agent (enrichment)
# =============================================================================
# Second model call of the pipeline: expands a BasicResult into the premium
# content (20+ categorized colors, makeup tips, wardrobe guide, seasonal
# details).
#
# This stage never raises. Any failure - model error, timeout, malformed
# object, or a response below the requested minimums - is logged and the
# static premium data for the basic result's season is used instead.
#
# Usage:
#   stylist = PaletteStylistAgent(model, fallback)
#   result = stylist.analyze_enhanced(basic)
# =============================================================================

from __future__ import annotations

import json
import logging
from typing import Any

from agents.fallback import FallbackGenerator
from agents.prompts.analysis_prompts import (
    ENHANCED_ANALYSIS_SCHEMA,
    build_enhanced_analysis_messages,
)
from agents.structured_model import StructuredModel
from core.models.analysis import AnalysisResult, BasicResult, EnhancedContent
from lib.colors import is_valid_hex, normalize_hex
from lib.monitoring import ErrorLogger, Severity

logger = logging.getLogger(__name__)


def prepare_enhanced_payload(data: dict[str, Any]) -> dict[str, Any]:
    """
    Light cleanup before validation.

    Repairs premium color hex codes and lower-cases categories
    ("Neutral" -> "neutral"). Returns a new dict; `data` is not modified.
    """
    colors = data.get("premiumColors")
    if not isinstance(colors, list):
        return dict(data)

    cleaned = []
    for color in colors:
        if not isinstance(color, dict):
            cleaned.append(color)
            continue
        color = dict(color)
        hex_value = color.get("hex")
        if isinstance(hex_value, str) and not is_valid_hex(hex_value):
            color["hex"] = normalize_hex(hex_value)
        category = color.get("category")
        if isinstance(category, str):
            color["category"] = category.strip().lower()
        cleaned.append(color)

    return {**data, "premiumColors": cleaned}


class PaletteStylistAgent:
    """
    Enrichment: BasicResult -> AnalysisResult.

    Attributes:
        model: StructuredModel used for the text call
        fallback: Source of static premium data
        error_logger: Optional ErrorLogger for failed enrichments
    """

    def __init__(
        self,
        model: StructuredModel,
        fallback: FallbackGenerator,
        error_logger: ErrorLogger | None = None,
    ):
        self.model = model
        self.fallback = fallback
        self.error_logger = error_logger

    def analyze_enhanced(self, basic: BasicResult) -> AnalysisResult:
        """
        Generate premium content for a basic result.

        Enrichment fields are merged over the basic result; basic fields are
        kept as they are.

        Returns:
            Complete AnalysisResult (AI-generated or static)
        """
        logger.info("Generating enhanced premium analysis...")

        try:
            basic_json = json.dumps(basic.model_dump(mode="json", by_alias=True))
            data = self.model.generate(
                messages=build_enhanced_analysis_messages(basic_json, basic.season.value),
                schema=ENHANCED_ANALYSIS_SCHEMA,
                schema_name="premium_color_analysis",
            )
            content = EnhancedContent.model_validate(prepare_enhanced_payload(data))

            result = AnalysisResult(
                **basic.basic_fields(),
                **content.model_dump(),
            )
            logger.info(
                f"Enhanced analysis generated: {len(result.premium_colors)} premium colors"
            )
            return result

        except Exception as e:
            logger.warning(f"Enhanced analysis failed, using fallback: {e}")
            if self.error_logger is not None:
                self.error_logger.log_exception(
                    e,
                    error_type="Enhancement Fallback",
                    severity=Severity.LOW,
                    additional_data={"season": basic.season.value},
                )

        return self.fallback.static_premium_data(basic)
