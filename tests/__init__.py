# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the Seasonal Palette API:
# - test_colors.py: Hex repair and color math
# - test_models.py: Pydantic model validation
# - test_upload_service.py: Preconditions, retry/backoff, reachability
# - test_color_analyst.py / test_palette_stylist.py / test_fallback.py: Agents
# - test_pipeline.py: End-to-end pipeline with fakes
# - test_api.py: HTTP endpoints via TestClient
#
# Run tests with: pytest
# =============================================================================
