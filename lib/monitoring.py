# =============================================================================
# lib/monitoring.py - Error Logging & Performance Tracking
# =============================================================================
# Two small, explicitly constructed helpers that are injected into the
# analysis pipeline instead of living as module-level globals:
#
# - ErrorLogger: keeps a bounded, newest-first buffer of structured error
#   records, mirrors each one to the standard logging module and forwards it
#   to an optional sink (e.g. the Supabase error_logs table).
# - PerformanceTracker: records durations per label and reports slow
#   operations to the ErrorLogger.
#
# Usage:
#   error_logger = ErrorLogger(capacity=100)
#   tracker = PerformanceTracker(error_logger, slow_threshold_seconds=5)
#   with tracker.track("upload"):
#       ...
# =============================================================================

from __future__ import annotations

import json
import logging
import threading
import time
import traceback
import uuid
from collections import deque
from contextlib import contextmanager
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Iterator

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


# =============================================================================
# Error Log Model
# =============================================================================

class Severity(str, Enum):
    """How urgently an error needs attention."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


# Map severities onto standard logging levels
_LOG_LEVELS = {
    Severity.LOW: logging.INFO,
    Severity.MEDIUM: logging.WARNING,
    Severity.HIGH: logging.ERROR,
    Severity.CRITICAL: logging.CRITICAL,
}


class ErrorLog(BaseModel):
    """A single structured error record."""

    id: str = Field(default_factory=lambda: f"error_{uuid.uuid4().hex[:12]}")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    user_id: str | None = None
    error_type: str = "Unknown Error"
    error_message: str = "No message provided"
    stack_trace: str | None = None
    severity: Severity = Severity.MEDIUM
    additional_data: dict[str, Any] = Field(default_factory=dict)


ErrorSink = Callable[[ErrorLog], Any]


# =============================================================================
# Error Logger
# =============================================================================

class ErrorLogger:
    """
    Bounded in-memory error log with an optional external sink.

    Thread-safe: FastAPI runs the pipeline in a threadpool, so several
    requests may log concurrently.

    Attributes:
        capacity: Maximum number of records kept in memory
        sink: Optional callable receiving every ErrorLog (failures are
            logged as warnings)
    """

    def __init__(self, capacity: int = 100, sink: ErrorSink | None = None):
        self.capacity = capacity
        self.sink = sink
        self._logs: deque[ErrorLog] = deque(maxlen=capacity)
        self._lock = threading.Lock()

    def log_error(
        self,
        error_type: str,
        error_message: str,
        severity: Severity = Severity.MEDIUM,
        user_id: str | None = None,
        stack_trace: str | None = None,
        additional_data: dict[str, Any] | None = None,
    ) -> str:
        """
        Record an error.

        Returns:
            The generated error id
        """
        entry = ErrorLog(
            user_id=user_id,
            error_type=error_type or "Unknown Error",
            error_message=error_message or "No message provided",
            stack_trace=stack_trace,
            severity=severity,
            additional_data=additional_data or {},
        )

        with self._lock:
            self._logs.appendleft(entry)

        logger.log(
            _LOG_LEVELS[severity],
            f"{entry.error_type} ({entry.id}): {entry.error_message}",
        )

        if self.sink is not None:
            try:
                self.sink(entry)
            except Exception as e:
                logger.warning(f"Failed to forward error log {entry.id}: {e}")

        return entry.id

    def log_exception(
        self,
        error: BaseException,
        error_type: str,
        severity: Severity = Severity.HIGH,
        user_id: str | None = None,
        additional_data: dict[str, Any] | None = None,
    ) -> str:
        """Record an exception, including its formatted traceback."""
        stack = "".join(traceback.format_exception(type(error), error, error.__traceback__))
        return self.log_error(
            error_type=error_type,
            error_message=str(error),
            severity=severity,
            user_id=user_id,
            stack_trace=stack,
            additional_data=additional_data,
        )

    # -------------------------------------------------------------------------
    # Convenience Loggers
    # -------------------------------------------------------------------------

    def log_analysis_error(self, error: BaseException, **additional_data: Any) -> str:
        return self.log_exception(
            error, "Analysis Error", Severity.HIGH, additional_data=additional_data
        )

    def log_upload_error(
        self,
        error: BaseException,
        filename: str | None = None,
        size: int | None = None,
        content_type: str | None = None,
    ) -> str:
        return self.log_exception(
            error,
            "Upload Error",
            Severity.MEDIUM,
            additional_data={
                "filename": filename,
                "size": size,
                "content_type": content_type,
            },
        )

    def log_network_error(self, error: BaseException, url: str | None = None) -> str:
        return self.log_exception(
            error, "Network Error", Severity.MEDIUM, additional_data={"url": url}
        )

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def get_logs(self) -> list[ErrorLog]:
        with self._lock:
            return list(self._logs)

    def get_logs_by_type(self, error_type: str) -> list[ErrorLog]:
        return [log for log in self.get_logs() if log.error_type == error_type]

    def get_logs_by_severity(self, severity: Severity) -> list[ErrorLog]:
        return [log for log in self.get_logs() if log.severity == severity]

    def clear_logs(self) -> None:
        with self._lock:
            self._logs.clear()

    def export_logs(self) -> str:
        """Export all records as a pretty-printed JSON array."""
        return json.dumps(
            [log.model_dump(mode="json") for log in self.get_logs()],
            indent=2,
        )


# =============================================================================
# Performance Tracker
# =============================================================================

class PerformanceTracker:
    """
    Collects timing samples per label.

    Any sample slower than `slow_threshold_seconds` is reported to the
    error logger as a "Performance Warning".

    Example:
        stop = tracker.start_timing("ai_basic_analysis")
        ...
        elapsed = stop()
    """

    def __init__(
        self,
        error_logger: ErrorLogger | None = None,
        slow_threshold_seconds: float = 5.0,
        clock: Callable[[], float] = time.perf_counter,
    ):
        self.error_logger = error_logger
        self.slow_threshold_seconds = slow_threshold_seconds
        self.clock = clock
        self._metrics: dict[str, list[float]] = {}
        self._lock = threading.Lock()

    def start_timing(self, label: str) -> Callable[[], float]:
        """
        Start a timer.

        Returns:
            A stop() callable that records and returns the elapsed seconds
        """
        start = self.clock()

        def stop() -> float:
            duration = self.clock() - start
            self._record(label, duration)
            return duration

        return stop

    @contextmanager
    def track(self, label: str) -> Iterator[None]:
        """Time the enclosed block, recording it even if it raises."""
        stop = self.start_timing(label)
        try:
            yield
        finally:
            stop()

    def get_metrics(self, label: str) -> dict[str, float] | None:
        """count / average / min / max / latest in seconds, or None."""
        with self._lock:
            times = list(self._metrics.get(label, []))
        if not times:
            return None
        return {
            "count": len(times),
            "average": sum(times) / len(times),
            "min": min(times),
            "max": max(times),
            "latest": times[-1],
        }

    def get_all_metrics(self) -> dict[str, dict[str, float] | None]:
        with self._lock:
            labels = list(self._metrics)
        return {label: self.get_metrics(label) for label in labels}

    def clear(self) -> None:
        with self._lock:
            self._metrics.clear()

    def _record(self, label: str, duration: float) -> None:
        with self._lock:
            self._metrics.setdefault(label, []).append(duration)

        if duration > self.slow_threshold_seconds and self.error_logger is not None:
            self.error_logger.log_error(
                error_type="Performance Warning",
                error_message=f"Slow operation: {label} took {duration * 1000:.2f}ms",
                severity=Severity.MEDIUM,
                additional_data={"label": label, "duration_seconds": duration},
            )
