# =============================================================================
# agents/fallback.py - Fallback Analysis Generator
# =============================================================================
# Builds complete, schema-valid results without calling any model:
# - fallback_basic(): random-season basic result with generic colors
# - static_premium_data(basic): season palette + fixed styling content
# - full_fallback(): both of the above, for total-failure cases
#
# Everything here is deterministic except the season pick, which uses the
# injected random.Random so tests can seed it.
#
# The premium palette is the season's 5 base colors plus a Light and a Deep
# variant of each (15 total). The list is capped at 24, which the
# 15-color expansion never reaches.
# =============================================================================

from __future__ import annotations

import logging
import random

from core.models.analysis import (
    AnalysisResult,
    BasicResult,
    ColorCategory,
    ColorResult,
    Season,
    SeasonalDetails,
)
from lib.colors import darken_color, lighten_color

logger = logging.getLogger(__name__)

MAX_PREMIUM_COLORS = 24


# =============================================================================
# Static Data
# =============================================================================

def _color(name: str, hex_value: str, description: str, category: ColorCategory) -> ColorResult:
    return ColorResult(name=name, hex=hex_value, description=description, category=category)


SEASON_BASE_COLORS: dict[Season, list[ColorResult]] = {
    Season.SPRING: [
        _color("Coral Pink", "#FF7F7F", "Vibrant and energizing", ColorCategory.ACCENT),
        _color("Golden Yellow", "#FFD700", "Bright and cheerful", ColorCategory.STATEMENT),
        _color("Peach", "#FFCBA4", "Soft and flattering", ColorCategory.SOFT),
        _color("Warm Beige", "#F5F5DC", "Perfect neutral base", ColorCategory.NEUTRAL),
        _color("Turquoise", "#40E0D0", "Fresh and lively", ColorCategory.ACCENT),
    ],
    Season.SUMMER: [
        _color("Soft Blue", "#87CEEB", "Cool and calming", ColorCategory.ACCENT),
        _color("Lavender", "#E6E6FA", "Gentle and elegant", ColorCategory.SOFT),
        _color("Rose Pink", "#FFC0CB", "Romantic and soft", ColorCategory.ACCENT),
        _color("Cool Gray", "#D3D3D3", "Sophisticated neutral", ColorCategory.NEUTRAL),
        _color("Mint Green", "#98FB98", "Fresh and cool", ColorCategory.SOFT),
    ],
    Season.AUTUMN: [
        _color("Burnt Orange", "#CC5500", "Rich and warm", ColorCategory.STATEMENT),
        _color("Deep Burgundy", "#800020", "Luxurious and bold", ColorCategory.STATEMENT),
        _color("Golden Brown", "#B8860B", "Earthy and grounding", ColorCategory.NEUTRAL),
        _color("Olive Green", "#808000", "Natural and sophisticated", ColorCategory.ACCENT),
        _color("Warm Cream", "#FFFDD0", "Soft neutral base", ColorCategory.NEUTRAL),
    ],
    Season.WINTER: [
        _color("True Red", "#FF0000", "Bold and striking", ColorCategory.STATEMENT),
        _color("Royal Blue", "#4169E1", "Regal and powerful", ColorCategory.STATEMENT),
        _color("Pure White", "#FFFFFF", "Clean and crisp", ColorCategory.NEUTRAL),
        _color("Black", "#000000", "Classic and elegant", ColorCategory.NEUTRAL),
        _color("Emerald Green", "#50C878", "Vibrant and luxurious", ColorCategory.ACCENT),
    ],
}

FALLBACK_FREE_COLORS = [
    ColorResult(
        name="Soft Pink",
        hex="#FFB6C1",
        description="A universally flattering soft pink that works well for most skin tones",
    ),
    ColorResult(
        name="Warm Beige",
        hex="#F5F5DC",
        description="A versatile neutral that complements many complexions",
    ),
    ColorResult(
        name="Light Blue",
        hex="#ADD8E6",
        description="A gentle blue that brings out natural brightness",
    ),
]

WARDROBE_GUIDE = [
    "Build your wardrobe around your best neutral colors",
    "Add accent colors through accessories and statement pieces",
    "Choose fabrics and textures that complement your season",
    "Invest in quality basics in your most flattering neutrals",
    "Use your statement colors for special occasions",
    "Layer different tones from your palette for depth",
    "Choose patterns that incorporate your best colors",
    "Select jewelry metals that complement your undertones",
    "Consider the lighting when choosing colors for different occasions",
    "Mix textures within your color palette for visual interest",
]

SEASON_CHARACTERISTICS = [
    "Natural warmth in skin undertones",
    "Harmonious color palette that enhances your features",
    "Balanced contrast levels that flatter your complexion",
    "Colors that make your eyes appear brighter",
    "Tones that give your skin a healthy glow",
]

COLORS_TO_AVOID = [
    "Colors that clash with your undertones",
    "Overly bright or muted shades that wash you out",
    "Colors that make you appear tired or pale",
    "Tones that compete with your natural coloring",
    "Shades that require heavy makeup to look good",
]


def _makeup_tips(season: Season) -> list[str]:
    return [
        f"Use {season.value.lower()} tones for your foundation to complement your undertones",
        "Choose lipstick colors that enhance your natural lip color",
        "Apply eyeshadow in colors that make your eyes pop",
        "Use blush in colors that naturally flush your cheeks",
        "Choose eyeliner colors that define without overpowering",
        "Select mascara that enhances your natural lash color",
        "Use highlighter in tones that complement your skin",
        "Choose nail polish colors that coordinate with your palette",
    ]


# =============================================================================
# Palette Expansion
# =============================================================================

def expand_palette(base_colors: list[ColorResult]) -> list[ColorResult]:
    """
    Base colors, then a Light variant of each, then a Deep variant of each.

    Light variants are tagged soft, Deep variants statement. The result is
    capped at MAX_PREMIUM_COLORS.
    """
    light = [
        ColorResult(
            name=f"Light {color.name}",
            hex=lighten_color(color.hex),
            description=f"Lighter variation of {color.name.lower()}",
            category=ColorCategory.SOFT,
        )
        for color in base_colors
    ]
    deep = [
        ColorResult(
            name=f"Deep {color.name}",
            hex=darken_color(color.hex),
            description=f"Deeper variation of {color.name.lower()}",
            category=ColorCategory.STATEMENT,
        )
        for color in base_colors
    ]
    return [*base_colors, *light, *deep][:MAX_PREMIUM_COLORS]


# =============================================================================
# Generator
# =============================================================================

class FallbackGenerator:
    """
    Produces analysis results without any model call.

    Example:
        generator = FallbackGenerator(random.Random(42))
        result = generator.full_fallback("photo.jpg")
        assert len(result.free_colors) == 3

    Attributes:
        rng: Random source for the season pick
    """

    def __init__(self, rng: random.Random | None = None):
        self.rng = rng or random.Random()

    def fallback_basic(self, context: str | None = None) -> BasicResult:
        """Random-season basic result with generic colors."""
        season = self.rng.choice(list(Season))
        name = season.value.lower()
        logger.info(f"Generating fallback analysis for {context or 'unknown'} with season {season.value}")

        return BasicResult(
            skin_tone=(
                f"Based on general analysis principles, we've determined your {name} coloring. "
                f"While we couldn't perform a detailed AI analysis, these colors are carefully "
                f"selected to complement {name} features."
            ),
            season=season,
            free_colors=list(FALLBACK_FREE_COLORS),
            recommendations=[
                f"Explore {name} color palettes that complement your natural features",
                "Consider colors that enhance your skin tone and bring out your best features",
                "Try different shades within your color season to find your favorites",
                "Use these colors as a starting point for building your personal palette",
            ],
        )

    def full_fallback(self, context: str | None = None) -> AnalysisResult:
        """Complete synthetic result for when the pipeline failed outright."""
        return self.static_premium_data(self.fallback_basic(context))

    def static_premium_data(self, basic: BasicResult) -> AnalysisResult:
        """
        Attach the static premium content for basic.season.

        Every basic field is carried over unchanged.
        """
        logger.info(f"Using static premium data for {basic.season.value}")
        base_colors = SEASON_BASE_COLORS.get(basic.season, SEASON_BASE_COLORS[Season.SPRING])

        return AnalysisResult(
            **basic.basic_fields(),
            premium_colors=expand_palette(base_colors),
            makeup_tips=_makeup_tips(basic.season),
            wardrobe_guide=list(WARDROBE_GUIDE),
            seasonal_details=SeasonalDetails(
                description=(
                    f"Your {basic.season.value} season is characterized by specific color "
                    "harmonies that complement your natural features and bring out your "
                    "best qualities."
                ),
                characteristics=list(SEASON_CHARACTERISTICS),
                avoid_colors=list(COLORS_TO_AVOID),
            ),
        )
