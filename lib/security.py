# =============================================================================
# lib/security.py - Request Security Helpers
# =============================================================================
# - RateLimiter: sliding-window limiter keyed by user id
# - Filename screening for executable/script uploads
# - Input sanitizing and URL validation
# - Default security response headers
# =============================================================================

from __future__ import annotations

import re
import threading
import time
from typing import Callable
from urllib.parse import urlparse


# =============================================================================
# Rate Limiting
# =============================================================================

class RateLimiter:
    """
    Sliding-window rate limiter.

    Each call to is_allowed() that returns True consumes one attempt for the
    identifier; attempts older than the window are forgotten, and an
    identifier left with none is dropped from memory.

    Example:
        limiter = RateLimiter(max_attempts=5, window_seconds=900)
        if not limiter.is_allowed(user_id):
            raise RateLimitExceededError(...)
    """

    def __init__(
        self,
        max_attempts: int = 5,
        window_seconds: float = 15 * 60,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_attempts = max_attempts
        self.window_seconds = window_seconds
        self.clock = clock
        self._attempts: dict[str, list[float]] = {}
        self._lock = threading.Lock()

    def is_allowed(self, identifier: str) -> bool:
        now = self.clock()
        with self._lock:
            self._prune(now)
            attempts = self._attempts.get(identifier, [])
            if len(attempts) >= self.max_attempts:
                return False
            attempts.append(now)
            self._attempts[identifier] = attempts
            return True

    def get_remaining_attempts(self, identifier: str) -> int:
        with self._lock:
            attempts = self._valid_attempts(identifier, self.clock())
        return max(0, self.max_attempts - len(attempts))

    @property
    def tracked_identifiers(self) -> int:
        """Identifiers currently holding at least one attempt."""
        with self._lock:
            return len(self._attempts)

    def reset(self, identifier: str | None = None) -> None:
        """Forget attempts for one identifier, or for everyone."""
        with self._lock:
            if identifier is None:
                self._attempts.clear()
            else:
                self._attempts.pop(identifier, None)

    def _prune(self, now: float) -> None:
        for identifier in list(self._attempts):
            self._valid_attempts(identifier, now)

    def _valid_attempts(self, identifier: str, now: float) -> list[float]:
        """Unexpired attempts; an identifier with none left is forgotten."""
        attempts = [t for t in self._attempts.get(identifier, []) if now - t < self.window_seconds]
        if attempts:
            self._attempts[identifier] = attempts
        else:
            self._attempts.pop(identifier, None)
        return attempts


# =============================================================================
# Upload Screening
# =============================================================================

_SUSPICIOUS_EXTENSIONS = re.compile(
    r"\.(php|exe|bat|sh|cmd|scr|com|pif|vbs|js|jar)$",
    re.IGNORECASE,
)


def is_suspicious_filename(filename: str) -> bool:
    """True if the filename ends in an executable or script extension."""
    return bool(_SUSPICIOUS_EXTENSIONS.search(filename.strip()))


# =============================================================================
# Input Helpers
# =============================================================================

def sanitize_input(text: str) -> str:
    """Strip angle brackets, javascript: URLs and inline event handlers."""
    text = re.sub(r"[<>]", "", text)
    text = re.sub(r"javascript:", "", text, flags=re.IGNORECASE)
    text = re.sub(r"on\w+=", "", text, flags=re.IGNORECASE)
    return text.strip()


def validate_url(url: str) -> bool:
    """Only absolute http(s) URLs with a host are accepted."""
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


# =============================================================================
# Response Headers
# =============================================================================

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Permissions-Policy": "camera=(), microphone=(), geolocation=()",
}
