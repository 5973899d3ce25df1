# =============================================================================
# tests/test_monitoring.py - ErrorLogger & PerformanceTracker Tests
# =============================================================================

import json
from unittest.mock import MagicMock

from lib.monitoring import ErrorLog, ErrorLogger, PerformanceTracker, Severity


class TestErrorLogger:
    """Tests for ErrorLogger."""

    def test_newest_first_and_bounded(self):
        error_logger = ErrorLogger(capacity=3)
        for i in range(5):
            error_logger.log_error("Test", f"error {i}")

        logs = error_logger.get_logs()
        assert [log.error_message for log in logs] == ["error 4", "error 3", "error 2"]

    def test_defaults_for_blank_values(self):
        error_logger = ErrorLogger()
        error_logger.log_error("", "")
        log = error_logger.get_logs()[0]
        assert log.error_type == "Unknown Error"
        assert log.error_message == "No message provided"
        assert log.id.startswith("error_")

    def test_log_exception_captures_traceback(self):
        error_logger = ErrorLogger()
        try:
            raise ValueError("bad value")
        except ValueError as e:
            error_id = error_logger.log_exception(e, "Parse Error", user_id="u1")

        log = error_logger.get_logs()[0]
        assert log.id == error_id
        assert log.user_id == "u1"
        assert log.severity == Severity.HIGH
        assert "ValueError: bad value" in log.stack_trace

    def test_convenience_loggers(self):
        error_logger = ErrorLogger()
        error_logger.log_analysis_error(RuntimeError("a"), filename="me.jpg")
        error_logger.log_upload_error(RuntimeError("b"), filename="me.jpg", size=10)
        error_logger.log_network_error(RuntimeError("c"), url="https://x")

        assert error_logger.get_logs_by_type("Analysis Error")[0].additional_data == {"filename": "me.jpg"}
        assert error_logger.get_logs_by_type("Upload Error")[0].additional_data["size"] == 10
        assert error_logger.get_logs_by_type("Network Error")[0].additional_data == {"url": "https://x"}
        assert len(error_logger.get_logs_by_severity(Severity.MEDIUM)) == 2

    def test_sink_receives_entries(self):
        sink = MagicMock()
        error_logger = ErrorLogger(sink=sink)

        error_logger.log_error("Test", "hello")

        entry = sink.call_args.args[0]
        assert isinstance(entry, ErrorLog)
        assert entry.error_message == "hello"

    def test_sink_failure_is_contained(self, caplog):
        error_logger = ErrorLogger(sink=MagicMock(side_effect=RuntimeError("db down")))

        error_logger.log_error("Test", "hello")

        assert len(error_logger.get_logs()) == 1
        assert "Failed to forward error log" in caplog.text

    def test_export_and_clear(self):
        error_logger = ErrorLogger()
        error_logger.log_error("Test", "hello", severity=Severity.CRITICAL)

        exported = json.loads(error_logger.export_logs())
        assert exported[0]["severity"] == "critical"

        error_logger.clear_logs()
        assert error_logger.get_logs() == []


class TestPerformanceTracker:
    """Tests for PerformanceTracker."""

    def _tracker(self, ticks, error_logger=None):
        ticks = iter(ticks)
        return PerformanceTracker(error_logger, slow_threshold_seconds=5, clock=lambda: next(ticks))

    def test_metrics(self):
        tracker = self._tracker([0.0, 1.0, 10.0, 13.0])
        tracker.start_timing("op")()
        tracker.start_timing("op")()

        metrics = tracker.get_metrics("op")
        assert metrics == {"count": 2, "average": 2.0, "min": 1.0, "max": 3.0, "latest": 3.0}
        assert tracker.get_metrics("missing") is None

    def test_slow_operation_reported(self):
        error_logger = ErrorLogger()
        tracker = self._tracker([0.0, 6.0], error_logger)

        elapsed = tracker.start_timing("upload")()

        assert elapsed == 6.0
        warning = error_logger.get_logs_by_type("Performance Warning")[0]
        assert "upload took 6000.00ms" in warning.error_message

    def test_fast_operation_not_reported(self):
        error_logger = ErrorLogger()
        self._tracker([0.0, 1.0], error_logger).start_timing("upload")()
        assert error_logger.get_logs() == []

    def test_track_records_on_error(self):
        tracker = self._tracker([0.0, 2.0])
        try:
            with tracker.track("boom"):
                raise RuntimeError("boom")
        except RuntimeError:
            pass
        assert tracker.get_metrics("boom")["count"] == 1

    def test_clear(self):
        tracker = self._tracker([0.0, 1.0])
        tracker.start_timing("op")()
        tracker.clear()
        assert tracker.get_all_metrics() == {}
