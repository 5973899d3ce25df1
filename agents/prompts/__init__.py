# =============================================================================
# agents/prompts/ - Prompts and Response Schemas for AI Agents
# =============================================================================
# This package contains the prompts for each analysis call:
# - analysis_prompts.py: Basic (vision) and enhanced (premium) analysis
# =============================================================================

from agents.prompts.analysis_prompts import (
    BASIC_ANALYSIS_PROMPT,
    BASIC_ANALYSIS_SCHEMA,
    ENHANCED_ANALYSIS_PROMPT,
    ENHANCED_ANALYSIS_SCHEMA,
    build_basic_analysis_messages,
    build_enhanced_analysis_messages,
)

__all__ = [
    "BASIC_ANALYSIS_PROMPT",
    "BASIC_ANALYSIS_SCHEMA",
    "ENHANCED_ANALYSIS_PROMPT",
    "ENHANCED_ANALYSIS_SCHEMA",
    "build_basic_analysis_messages",
    "build_enhanced_analysis_messages",
]
