# =============================================================================
# agents/ - AI Agent Definitions
# =============================================================================
# This package contains the two-call color analysis pipeline:
# - color_analyst.py: Call 1 - vision analysis (skin tone, season, 3 colors)
# - palette_stylist.py: Call 2 - premium enrichment (20+ colors, tips, guide)
# - fallback.py: Static/synthetic results when the AI is unavailable
# - pipeline.py: Orchestrates upload -> reachability -> call 1 -> call 2
# - structured_model.py: Model client returning schema-constrained JSON
#
# The agents work together: Analyst -> Stylist, with Fallback behind both.
#
# Prompts:
# - prompts/analysis_prompts.py: Prompts and JSON schemas for both calls
# =============================================================================

from agents.color_analyst import ColorAnalystAgent
from agents.fallback import FallbackGenerator
from agents.palette_stylist import PaletteStylistAgent
from agents.pipeline import AnalysisRun, PhotoAnalysisPipeline
from agents.structured_model import (
    AnalysisError,
    AnalysisTimeoutError,
    ModelResponseError,
    OpenAIStructuredClient,
    StructuredModel,
)

__all__ = [
    # Agents
    "ColorAnalystAgent",
    "PaletteStylistAgent",
    "FallbackGenerator",
    # Pipeline
    "PhotoAnalysisPipeline",
    "AnalysisRun",
    # Model client
    "StructuredModel",
    "OpenAIStructuredClient",
    "AnalysisError",
    "AnalysisTimeoutError",
    "ModelResponseError",
]
