# =============================================================================
# agents/prompts/analysis_prompts.py - Color Analysis Prompts & Schemas
# =============================================================================
# Prompts and JSON Schemas for the two structured-output calls:
# - Basic analysis (vision): season, skin tone, 3 free colors
# - Enhanced analysis (text): premium palette, makeup, wardrobe, details
#
# The schemas are sent to the model as response_format; the minimums they
# declare are re-checked on our side because the model is not guaranteed to
# honor them.
#
# Usage:
#   messages = build_basic_analysis_messages(image_url)
#   prompt = build_enhanced_analysis_prompt(basic_json, "Autumn")
# =============================================================================

from __future__ import annotations

from typing import Any

SEASON_VALUES = ["Spring", "Summer", "Autumn", "Winter"]
CATEGORY_VALUES = ["neutral", "accent", "statement", "soft"]


# =============================================================================
# Basic Analysis
# =============================================================================

BASIC_ANALYSIS_PROMPT = """
<role>
You are an expert personal color analyst who works with photos of all qualities and lighting conditions.
</role>

<task>
Analyze this person's photo for personal color analysis and determine:
1. Their skin tone and undertones (warm, cool, or neutral)
2. Their color season (Spring, Summer, Autumn, or Winter)
3. Three specific colors that would look amazing on them
4. Three general styling recommendations
</task>

<guidelines>
- Work with whatever photo quality is provided. Do not reject a photo because of lighting or image quality.
- Focus on observable features: skin tone, hair color, eye color if visible.
- Make reasonable inferences from available visual information; if details are unclear, use your expertise to make an educated assessment.
- Give specific color names with accurate 6-digit hex codes (e.g. #CC5500) and explain why each color works for this person.
</guidelines>
""".strip()


BASIC_ANALYSIS_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "skinTone": {
            "type": "string",
            "description": "Detailed description of skin tone and undertones",
        },
        "season": {
            "type": "string",
            "enum": SEASON_VALUES,
            "description": "Color season based on natural coloring",
        },
        "freeColors": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "name": {"type": "string", "description": "Specific color name"},
                    "hex": {"type": "string", "description": "Accurate hex color code"},
                    "description": {"type": "string", "description": "Why this color works for them"},
                },
                "required": ["name", "hex", "description"],
            },
            "minItems": 3,
            "maxItems": 3,
        },
        "recommendations": {
            "type": "array",
            "items": {"type": "string"},
            "description": "General styling recommendations",
            "minItems": 3,
            "maxItems": 3,
        },
    },
    "required": ["skinTone", "season", "freeColors", "recommendations"],
}


def build_basic_analysis_messages(image_url: str) -> list[dict[str, Any]]:
    """Vision request: instruction text plus the photo URL."""
    return [
        {
            "role": "user",
            "content": [
                {"type": "text", "text": BASIC_ANALYSIS_PROMPT},
                {"type": "image_url", "image_url": {"url": image_url}},
            ],
        }
    ]


# =============================================================================
# Enhanced Analysis
# =============================================================================

ENHANCED_ANALYSIS_PROMPT = """
<context>
Based on this color analysis: {basic_json}
</context>

<task>
Generate comprehensive premium content:
1. 20+ additional colors categorized as neutral, accent, statement, and soft colors
2. At least 8 makeup recommendations specific to this color season
3. A wardrobe building guide of at least 10 specific clothing suggestions
4. A description of the season with at least 5 characteristics and at least 5 colors to avoid
</task>

<rules>
Make sure all colors have valid 6-digit hex codes and are appropriate for the {season} season.
</rules>
""".strip()


ENHANCED_ANALYSIS_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "premiumColors": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "name": {"type": "string"},
                    "hex": {"type": "string"},
                    "description": {"type": "string"},
                    "category": {"type": "string", "enum": CATEGORY_VALUES},
                },
                "required": ["name", "hex", "description", "category"],
            },
            "minItems": 20,
        },
        "makeupTips": {
            "type": "array",
            "items": {"type": "string"},
            "minItems": 8,
        },
        "wardrobeGuide": {
            "type": "array",
            "items": {"type": "string"},
            "minItems": 10,
        },
        "seasonalDetails": {
            "type": "object",
            "properties": {
                "description": {"type": "string"},
                "characteristics": {
                    "type": "array",
                    "items": {"type": "string"},
                    "minItems": 5,
                },
                "avoidColors": {
                    "type": "array",
                    "items": {"type": "string"},
                    "minItems": 5,
                },
            },
            "required": ["description", "characteristics", "avoidColors"],
        },
    },
    "required": ["premiumColors", "makeupTips", "wardrobeGuide", "seasonalDetails"],
}


def build_enhanced_analysis_messages(basic_json: str, season: str) -> list[dict[str, Any]]:
    """Text-only request carrying the serialized basic result."""
    return [
        {
            "role": "user",
            "content": ENHANCED_ANALYSIS_PROMPT.format(basic_json=basic_json, season=season),
        }
    ]
