# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - analysis.py: Season, colors, basic/complete results and enrichment content
#
# These models define the "contract" between API and clients.
# =============================================================================

from .analysis import (
    AnalysisResult,
    BasicResult,
    ColorCategory,
    ColorResult,
    EnhancedContent,
    RawBasicAnalysis,
    RawColor,
    Season,
    SeasonalDetails,
)

__all__ = [
    "AnalysisResult",
    "BasicResult",
    "ColorCategory",
    "ColorResult",
    "EnhancedContent",
    "RawBasicAnalysis",
    "RawColor",
    "Season",
    "SeasonalDetails",
]
