# =============================================================================
# lib/system_checks.py - Built-in Self Tests
# =============================================================================
# A fixed, ordered sequence of named sanity checks that can be run against a
# live deployment (exposed at GET /api/v1/health/system-tests). None of them
# touch the network: they exercise the pure parts of the pipeline with
# known inputs.
#
# Usage:
#   results = run_system_tests()
#   print(results.summary.passed, "/", results.summary.total)
# =============================================================================

from __future__ import annotations

import logging
import random
from typing import Any, Callable

from pydantic import BaseModel, Field

from lib.utils import ApplicationError, error_message

logger = logging.getLogger(__name__)


class CheckResult(BaseModel):
    """Outcome of one named check."""

    name: str
    passed: bool
    error: str | None = None
    details: dict[str, Any] = Field(default_factory=dict)


class CheckSummary(BaseModel):
    total: int
    passed: int
    failed: int


class SystemTestResults(BaseModel):
    """All check outcomes plus a summary."""

    overall: bool
    tests: list[CheckResult]
    summary: CheckSummary


# =============================================================================
# Checks
# =============================================================================
# Each check returns a details dict on success and raises SystemCheckError
# (or anything else) on failure.

class SystemCheckError(ApplicationError):
    """A self-test expectation did not hold."""

    def __init__(self, message: str):
        super().__init__(message, code="SYSTEM_CHECK_FAILED")


def _require(condition: Any, message: str) -> None:
    if not condition:
        raise SystemCheckError(message)


def check_color_utilities() -> dict[str, Any]:
    from lib.colors import darken_color, is_valid_hex, lighten_color, normalize_hex

    _require(normalize_hex("abc") == "#aabbcc", "3-digit hex not expanded")
    _require(normalize_hex("123456") == "#123456", "missing '#' not added")
    _require(not is_valid_hex("#12345"), "5-digit hex accepted")
    _require(lighten_color("#FFFFFF") == "#FFFFFF", "lighten did not clamp")
    _require(darken_color("#000000") == "#000000", "darken did not clamp")
    return {"normalize": True, "clamp": True}


def check_file_upload_validation() -> dict[str, Any]:
    from app.exceptions import EmptyFileError, FileTooLargeError
    from core.services.upload_service import ImageFile, validate_image_file

    mib = 1024 * 1024
    validate_image_file(ImageFile("large.jpg", b"\0" * (14 * mib), "image/jpeg"))

    for bad, expected in (
        (ImageFile("empty.jpg", b"", "image/jpeg"), EmptyFileError),
        (ImageFile("huge.jpg", b"\0" * (16 * mib), "image/jpeg"), FileTooLargeError),
    ):
        try:
            validate_image_file(bad)
        except expected:
            continue
        raise SystemCheckError(f"{bad.filename} was not rejected")

    # Unusual types are tolerated
    validate_image_file(ImageFile("photo.heic", b"data", "application/octet-stream"))
    return {"accepts_14mb": True, "rejects_empty": True, "rejects_16mb": True}


def check_security_validation() -> dict[str, Any]:
    from lib.security import RateLimiter, is_suspicious_filename, sanitize_input, validate_url

    _require(is_suspicious_filename("photo.exe"), "executable filename accepted")
    _require(not is_suspicious_filename("photo.jpg"), "image filename rejected")
    _require(
        sanitize_input("<script>alert(1)</script>") == "scriptalert(1)/script",
        "markup not stripped",
    )
    _require(validate_url("https://example.com/a.jpg"), "https URL rejected")
    _require(not validate_url("javascript:alert(1)"), "javascript URL accepted")

    limiter = RateLimiter(max_attempts=2, window_seconds=60)
    _require(limiter.is_allowed("check") and limiter.is_allowed("check"), "attempt within limit refused")
    _require(not limiter.is_allowed("check"), "rate limit not enforced")
    return {"filename_screening": True, "rate_limiter": True}


def check_error_handling() -> dict[str, Any]:
    from lib.monitoring import ErrorLogger, Severity

    error_logger = ErrorLogger(capacity=2)
    for i in range(3):
        error_logger.log_error("Self Test", f"error {i}", severity=Severity.LOW)
    logs = error_logger.get_logs()
    _require(len(logs) == 2, "capacity not enforced")
    _require(logs[0].error_message == "error 2", "newest error not first")
    return {"capacity": 2, "ordering": "newest_first"}


def check_performance_tracking() -> dict[str, Any]:
    from lib.monitoring import ErrorLogger, PerformanceTracker

    ticks = iter([0.0, 10.0])
    error_logger = ErrorLogger()
    tracker = PerformanceTracker(error_logger, slow_threshold_seconds=5, clock=lambda: next(ticks))
    tracker.start_timing("self_test")()
    metrics = tracker.get_metrics("self_test")
    _require(metrics and metrics["count"] == 1, "timing not recorded")
    _require(error_logger.get_logs_by_type("Performance Warning"), "slow operation not reported")
    return {"metrics": metrics}


def check_fallback_analysis() -> dict[str, Any]:
    from agents.fallback import FallbackGenerator
    from lib.colors import is_valid_hex

    seasons = set()
    for seed in range(8):
        result = FallbackGenerator(random.Random(seed)).full_fallback("self_test")
        _require(len(result.free_colors) == 3, "fallback must have 3 free colors")
        colors = [*result.free_colors, *result.premium_colors]
        _require(all(is_valid_hex(c.hex) for c in colors), "invalid hex in fallback")
        _require(result.seasonal_details is not None, "seasonal details missing")
        seasons.add(result.season.value)
    return {"seasons_seen": sorted(seasons)}


SYSTEM_CHECKS: list[tuple[str, Callable[[], dict[str, Any]]]] = [
    ("Color Utilities", check_color_utilities),
    ("File Upload Validation", check_file_upload_validation),
    ("Security Validation", check_security_validation),
    ("Error Handling", check_error_handling),
    ("Performance Tracking", check_performance_tracking),
    ("Fallback Analysis", check_fallback_analysis),
]


# =============================================================================
# Runner
# =============================================================================

def run_system_tests(
    checks: list[tuple[str, Callable[[], dict[str, Any]]]] | None = None,
) -> SystemTestResults:
    """Run every check in order; a failing check never stops the others."""
    tests: list[CheckResult] = []

    for name, check in checks if checks is not None else SYSTEM_CHECKS:
        try:
            details = check() or {}
            tests.append(CheckResult(name=name, passed=True, details=details))
        except Exception as e:
            logger.warning(f"System check '{name}' failed: {error_message(e)}")
            tests.append(CheckResult(name=name, passed=False, error=error_message(e)))

    passed = sum(1 for t in tests if t.passed)
    return SystemTestResults(
        overall=passed == len(tests),
        tests=tests,
        summary=CheckSummary(total=len(tests), passed=passed, failed=len(tests) - passed),
    )
