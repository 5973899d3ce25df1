# =============================================================================
# tests/test_security.py - Security Helper Tests
# =============================================================================

import pytest

from lib.security import RateLimiter, is_suspicious_filename, sanitize_input, validate_url


class TestRateLimiter:
    """Tests for the sliding-window RateLimiter."""

    def test_limits_per_identifier(self):
        now = [0.0]
        limiter = RateLimiter(max_attempts=2, window_seconds=60, clock=lambda: now[0])

        assert limiter.is_allowed("a")
        assert limiter.is_allowed("a")
        assert not limiter.is_allowed("a")
        assert limiter.is_allowed("b")
        assert limiter.get_remaining_attempts("a") == 0
        assert limiter.get_remaining_attempts("b") == 1

    def test_window_slides(self):
        now = [0.0]
        limiter = RateLimiter(max_attempts=1, window_seconds=60, clock=lambda: now[0])

        assert limiter.is_allowed("a")
        now[0] = 59.0
        assert not limiter.is_allowed("a")
        now[0] = 60.0
        assert limiter.is_allowed("a")

    def test_expired_identifiers_are_dropped(self):
        now = [0.0]
        limiter = RateLimiter(max_attempts=1, window_seconds=60, clock=lambda: now[0])
        for i in range(50):
            limiter.is_allowed(f"user-{i}")
        assert limiter.tracked_identifiers == 50

        now[0] = 61.0
        assert limiter.is_allowed("late")
        assert limiter.tracked_identifiers == 1

    def test_refused_identifier_is_not_stored(self):
        limiter = RateLimiter(max_attempts=0)
        assert not limiter.is_allowed("a")
        assert limiter.get_remaining_attempts("a") == 0
        assert limiter.tracked_identifiers == 0

    def test_reset(self):
        limiter = RateLimiter(max_attempts=1)
        limiter.is_allowed("a")
        limiter.is_allowed("b")

        limiter.reset("a")
        assert limiter.is_allowed("a")
        assert not limiter.is_allowed("b")

        limiter.reset()
        assert limiter.is_allowed("b")


class TestFilenameScreening:
    """Tests for is_suspicious_filename."""

    @pytest.mark.parametrize("name", ["run.exe", "shell.php", "x.JS", "photo.jpg.bat", "a.jar "])
    def test_suspicious(self, name):
        assert is_suspicious_filename(name)

    @pytest.mark.parametrize("name", ["photo.jpg", "me.png", "scan.heic", "exe.jpeg"])
    def test_allowed(self, name):
        assert not is_suspicious_filename(name)


class TestInputHelpers:
    """Tests for sanitize_input and validate_url."""

    def test_sanitize_strips_markup(self):
        assert sanitize_input(" <b onclick=x>hi</b> ") == "b xhi/b"

    def test_sanitize_removes_javascript_scheme(self):
        assert sanitize_input("javascript:alert(1)") == "alert(1)"

    @pytest.mark.parametrize("url", ["https://example.com/a.jpg", "http://localhost:8000"])
    def test_valid_urls(self, url):
        assert validate_url(url)

    @pytest.mark.parametrize("url", ["ftp://example.com", "javascript:alert(1)", "/relative", ""])
    def test_invalid_urls(self, url):
        assert not validate_url(url)
