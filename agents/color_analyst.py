# =============================================================================
# agents/color_analyst.py - Color Analyst Agent (primary analysis)
# =============================================================================
# First model call of the pipeline: looks at the uploaded photo and returns
# the person's skin tone, color season and three free colors.
#
# The model's answer is parsed into a loose RawBasicAnalysis and then run
# through repair_basic_analysis(), a pure function that:
# - Repairs hex codes ("abc" -> "#aabbcc", "123456" -> "#123456")
# - Drops colors that have no name or an unrepairable hex
# - Pads the color list to exactly 3 from a default triad
# - Pads recommendations to 3
#
# If the answer is unusable (no skin tone, unknown season, no colors) the
# agent returns a random-season fallback instead of raising. Transport and
# model errors are wrapped in AnalysisError and propagate.
#
# Usage:
#   agent = ColorAnalystAgent(model, fallback)
#   basic = agent.analyze_basic("https://.../photo.jpg")
# =============================================================================

from __future__ import annotations

import logging

from pydantic import ValidationError

from agents.fallback import FallbackGenerator
from agents.prompts.analysis_prompts import (
    BASIC_ANALYSIS_SCHEMA,
    build_basic_analysis_messages,
)
from agents.structured_model import (
    AnalysisError,
    AnalysisTimeoutError,
    StructuredModel,
)
from core.models.analysis import (
    BasicResult,
    ColorResult,
    RawBasicAnalysis,
    RawColor,
    Season,
)
from lib.colors import is_valid_hex, normalize_hex
from lib.utils import error_message

logger = logging.getLogger(__name__)

FREE_COLOR_COUNT = 3

# Slot i of a short color list is filled with DEFAULT_FREE_COLORS[i]
DEFAULT_FREE_COLORS = [
    ColorResult(
        name="Classic Navy",
        hex="#000080",
        description="A timeless color that works for most people",
    ),
    ColorResult(
        name="Soft Cream",
        hex="#F5F5DC",
        description="A gentle neutral that complements many skin tones",
    ),
    ColorResult(
        name="Dusty Rose",
        hex="#D4A5A5",
        description="A universally flattering soft pink tone",
    ),
]

DEFAULT_RECOMMENDATIONS = [
    "Wear your best colors closest to your face",
    "Build outfits around one of your recommended colors",
    "Use neutrals from your season as the base of your wardrobe",
]


# =============================================================================
# Repair
# =============================================================================

def repair_color(raw: RawColor) -> ColorResult | None:
    """
    Turn a raw model color into a ColorResult.

    Returns None when the color has no name or its hex can't be repaired.
    """
    name = (raw.name or "").strip()
    if not name or not raw.hex:
        return None

    hex_value = raw.hex
    if not is_valid_hex(hex_value):
        hex_value = normalize_hex(hex_value)
        logger.warning(f"Invalid hex color detected: {raw.hex!r}, fixed to {hex_value!r}")
        if not is_valid_hex(hex_value):
            return None

    return ColorResult(name=name, hex=hex_value, description=(raw.description or "").strip())


def pad_free_colors(colors: list[ColorResult]) -> list[ColorResult]:
    """Truncate or pad to exactly FREE_COLOR_COUNT, position by position."""
    padded = list(colors[:FREE_COLOR_COUNT])
    while len(padded) < FREE_COLOR_COUNT and len(padded) < len(DEFAULT_FREE_COLORS):
        padded.append(DEFAULT_FREE_COLORS[len(padded)])
    return padded


def repair_basic_analysis(raw: RawBasicAnalysis) -> BasicResult | None:
    """
    Build a BasicResult from a raw model response.

    Returns:
        The repaired result, or None if the response is missing a skin
        tone, has an unknown season, or has no usable colors
    """
    skin_tone = (raw.skin_tone or "").strip()
    season = Season.parse(raw.season)
    colors = [c for c in (repair_color(rc) for rc in raw.free_colors) if c is not None]

    if not skin_tone or season is None or not colors:
        logger.warning(
            f"Incomplete analysis result: skin_tone={bool(skin_tone)}, "
            f"season={raw.season!r}, usable_colors={len(colors)}"
        )
        return None

    if len(colors) < FREE_COLOR_COUNT:
        logger.info(f"Padding {FREE_COLOR_COUNT - len(colors)} default colors")

    recommendations = [r.strip() for r in raw.recommendations if r and r.strip()]
    recommendations += DEFAULT_RECOMMENDATIONS[len(recommendations):]

    return BasicResult(
        skin_tone=skin_tone,
        season=season,
        free_colors=pad_free_colors(colors),
        recommendations=recommendations,
    )


# =============================================================================
# Color Analyst Agent
# =============================================================================

class ColorAnalystAgent:
    """
    Primary analysis: photo -> BasicResult.

    Example:
        agent = ColorAnalystAgent(OpenAIStructuredClient(), FallbackGenerator())
        basic = agent.analyze_basic(public_url)
        print(basic.season)  # Season.AUTUMN

    Attributes:
        model: StructuredModel used for the vision call
        fallback: Generator used when the answer is unusable
    """

    def __init__(self, model: StructuredModel, fallback: FallbackGenerator):
        self.model = model
        self.fallback = fallback

    def analyze_basic(self, image_url: str) -> BasicResult:
        """
        Classify the person in the photo.

        Args:
            image_url: Public URL of the uploaded photo

        Returns:
            BasicResult with exactly 3 free colors

        Raises:
            AnalysisTimeoutError: The model call timed out
            AnalysisError: Any other model/transport failure
        """
        logger.info(f"Making AI request with image URL: {image_url}")

        try:
            data = self.model.generate(
                messages=build_basic_analysis_messages(image_url),
                schema=BASIC_ANALYSIS_SCHEMA,
                schema_name="basic_color_analysis",
            )
        except AnalysisTimeoutError:
            raise
        except Exception as e:
            logger.error(f"Basic AI analysis failed: {e}")
            raise AnalysisError(
                message=f"AI analysis failed: {error_message(e)}",
                code="BASIC_ANALYSIS_FAILED",
                details={"image_url": image_url},
            ) from e

        try:
            raw = RawBasicAnalysis.model_validate(data)
        except ValidationError as e:
            logger.warning(f"Unparseable analysis result, using fallback: {e.error_count()} errors")
            return self.fallback.fallback_basic("incomplete_ai_result")

        result = repair_basic_analysis(raw)
        if result is None:
            return self.fallback.fallback_basic("incomplete_ai_result")

        logger.info(f"Basic analysis completed: season={result.season.value}")
        return result
