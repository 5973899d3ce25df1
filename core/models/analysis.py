# =============================================================================
# core/models/analysis.py - Color Analysis Schemas
# =============================================================================
# These models define the contract for a photo color analysis:
# - ColorResult: One recommended color (name, hex, rationale, category)
# - BasicResult: Output of the primary AI call (season + 3 free colors)
# - AnalysisResult: Full result with the premium palette and styling guide
#
# Serialized with camelCase aliases (skinTone, freeColors, ...) so the JSON
# matches the color_analyses table and the frontend. Python code uses the
# snake_case attribute names.
#
# The Raw* models are deliberately loose: every field is optional so that
# an incomplete AI response can still be parsed and then repaired by
# agents.color_analyst.repair_basic_analysis().
# =============================================================================

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from lib.colors import HEX_COLOR_PATTERN


# =============================================================================
# Enums
# =============================================================================

class Season(str, Enum):
    """The four color seasons."""
    SPRING = "Spring"
    SUMMER = "Summer"
    AUTUMN = "Autumn"
    WINTER = "Winter"

    @classmethod
    def parse(cls, value: Any) -> Season | None:
        """
        Case-insensitive lookup.

        Returns None for anything that isn't one of the four seasons
        (including None and non-strings).
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        for season in cls:
            if season.value.lower() == value.strip().lower():
                return season
        return None


class ColorCategory(str, Enum):
    """How a premium color is meant to be used in a wardrobe."""
    NEUTRAL = "neutral"
    ACCENT = "accent"
    STATEMENT = "statement"
    SOFT = "soft"


# =============================================================================
# Result Models
# =============================================================================

class _CamelModel(BaseModel):
    """Base for immutable models serialized with camelCase keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class ColorResult(_CamelModel):
    """
    A single recommended color.

    Example:
        {"name": "Burnt Orange", "hex": "#CC5500",
         "description": "Rich and warm", "category": "statement"}
    """

    name: str = Field(..., min_length=1, description="Color name")
    hex: str = Field(..., description="6-digit hex code with leading '#'")
    description: str = Field(default="", description="Why this color works")

    # Only set on premium colors
    category: ColorCategory | None = Field(
        default=None,
        description="neutral, accent, statement or soft",
    )

    @field_validator("hex")
    @classmethod
    def validate_hex(cls, v: str) -> str:
        if not HEX_COLOR_PATTERN.match(v):
            raise ValueError(f"hex must match #RRGGBB, got {v!r}")
        return v


class SeasonalDetails(_CamelModel):
    """Narrative details about the season."""

    description: str
    characteristics: list[str] = Field(..., min_length=5)
    avoid_colors: list[str] = Field(..., min_length=5)


class BasicResult(_CamelModel):
    """
    Output of the primary analysis call.

    Always has exactly three free colors; the repair step pads short lists
    with defaults before this model is built.
    """

    skin_tone: str = Field(..., min_length=1)
    season: Season
    free_colors: list[ColorResult] = Field(..., min_length=3, max_length=3)
    recommendations: list[str] = Field(..., min_length=3)

    def basic_fields(self) -> dict[str, Any]:
        """Just the BasicResult fields, even when called on a subclass."""
        return self.model_dump(include=set(BasicResult.model_fields))


class AnalysisResult(BasicResult):
    """
    Complete analysis returned to the caller.

    premium_colors needs at least one entry here; the stricter minimums the
    AI is asked for are enforced on the enrichment response itself
    (see EnhancedContent).
    """

    premium_colors: list[ColorResult] = Field(..., min_length=1)
    makeup_tips: Annotated[list[str], Field(min_length=8)] | None = None
    wardrobe_guide: Annotated[list[str], Field(min_length=10)] | None = None
    seasonal_details: SeasonalDetails | None = None

    def to_response(self) -> dict[str, Any]:
        """Serialize with camelCase keys, omitting unset optionals."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class EnhancedContent(_CamelModel):
    """
    Premium content returned by the enrichment call.

    Validated against the minimums requested from the model; a response
    that falls short is rejected and replaced with static premium data.
    """

    premium_colors: list[ColorResult] = Field(..., min_length=20)
    makeup_tips: list[str] = Field(..., min_length=8)
    wardrobe_guide: list[str] = Field(..., min_length=10)
    seasonal_details: SeasonalDetails

    @field_validator("premium_colors")
    @classmethod
    def require_categories(cls, v: list[ColorResult]) -> list[ColorResult]:
        missing = [c.name for c in v if c.category is None]
        if missing:
            raise ValueError(f"premium colors missing category: {missing[:5]}")
        return v


# =============================================================================
# Raw (partial) AI Response Models
# =============================================================================

def _scalar_text(v: Any) -> Any:
    """Keep strings, stringify numbers, drop anything else to None."""
    if v is None or isinstance(v, str):
        return v
    if isinstance(v, (int, float)) and not isinstance(v, bool):
        return str(v)
    return None


class RawColor(BaseModel):
    """A color as the model returned it - nothing guaranteed."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str | None = None
    hex: str | None = None
    description: str | None = None
    category: str | None = None

    @field_validator("name", "hex", "description", "category", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> Any:
        return _scalar_text(v)


class RawBasicAnalysis(BaseModel):
    """
    The primary AI response before repair.

    Stray list elements (a bare string where a color object belongs, a null
    recommendation) are dropped here so one bad item never discards the
    rest of the answer.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    skin_tone: str | None = None
    season: str | None = None
    free_colors: list[RawColor] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)

    @field_validator("skin_tone", "season", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> Any:
        return _scalar_text(v)

    @field_validator("free_colors", mode="before")
    @classmethod
    def keep_color_objects(cls, v: Any) -> Any:
        if not isinstance(v, list):
            return []
        return [item for item in v if isinstance(item, (dict, RawColor))]

    @field_validator("recommendations", mode="before")
    @classmethod
    def keep_text_items(cls, v: Any) -> Any:
        if not isinstance(v, list):
            return []
        return [item for item in v if isinstance(item, str)]
