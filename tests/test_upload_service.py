# =============================================================================
# tests/test_upload_service.py - Upload Pipeline Tests
# =============================================================================
# This module contains tests for:
# - File preconditions (empty, oversized, missing name, unusual type)
# - Upload retry with exponential backoff
# - Reachability HEAD check
# - StorageService against a mocked Supabase client
# =============================================================================

from unittest.mock import MagicMock, patch

import httpx
import pytest

from app.exceptions import (
    EmptyFileError,
    FileTooLargeError,
    ImageNotAccessibleError,
    MissingFilenameError,
    UploadError,
)
from core.services.storage_service import StorageService
from core.services.upload_service import (
    ImageFile,
    UploadRetrier,
    check_image_reachable,
    validate_image_file,
)
from lib.monitoring import ErrorLogger
from tests.conftest import MIB, PUBLIC_URL, FlakyStore


def _retrier(store, sleeps, **kwargs):
    return UploadRetrier(store, sleep=sleeps.append, clock=lambda: 1700000000000, **kwargs)


# =============================================================================
# Preconditions
# =============================================================================

class TestValidateImageFile:
    """Tests for validate_image_file."""

    def test_fourteen_mib_passes(self):
        validate_image_file(ImageFile("big.jpg", b"\0" * (14 * MIB), "image/jpeg"))

    def test_empty_file_rejected(self):
        with pytest.raises(EmptyFileError) as exc_info:
            validate_image_file(ImageFile("empty.jpg", b"", "image/jpeg"))
        assert exc_info.value.status_code == 400
        assert "valid image" in exc_info.value.message

    def test_sixteen_mib_rejected(self):
        with pytest.raises(FileTooLargeError) as exc_info:
            validate_image_file(ImageFile("huge.jpg", b"\0" * (16 * MIB), "image/jpeg"))
        assert exc_info.value.status_code == 413

    def test_exactly_fifteen_mib_passes(self):
        validate_image_file(ImageFile("edge.jpg", b"\0" * (15 * MIB), "image/jpeg"))

    def test_blank_filename_rejected(self):
        with pytest.raises(MissingFilenameError):
            validate_image_file(ImageFile("   ", b"data", "image/jpeg"))

    def test_unusual_type_only_warns(self, caplog):
        validate_image_file(ImageFile("photo.heic", b"data", "application/octet-stream"))
        assert "Unusual file type" in caplog.text

    def test_custom_limit(self):
        with pytest.raises(FileTooLargeError):
            validate_image_file(ImageFile("a.jpg", b"\0" * 11, "image/jpeg"), max_bytes=10)


# =============================================================================
# Upload Retry
# =============================================================================

class TestUploadRetrier:
    """Tests for UploadRetrier."""

    def test_first_attempt_succeeds(self, jpeg_file, sleeps):
        store = FlakyStore()
        result = _retrier(store, sleeps).upload(jpeg_file, "user-1")

        assert result.public_url == PUBLIC_URL
        assert result.attempts == 1
        assert len(store.calls) == 1
        assert sleeps == []

    def test_fails_twice_then_succeeds(self, jpeg_file, sleeps):
        """Three attempts, with 2s then 4s of backoff between them."""
        store = FlakyStore(failures=2)
        result = _retrier(store, sleeps).upload(jpeg_file, "user-1")

        assert result.attempts == 3
        assert len(store.calls) == 3
        assert sleeps == [2.0, 4.0]

    def test_always_fails(self, jpeg_file, sleeps):
        """Three attempts, no sleep after the last, error names the count."""
        store = FlakyStore(failures=99)
        error_logger = ErrorLogger()

        with pytest.raises(UploadError) as exc_info:
            _retrier(store, sleeps, error_logger=error_logger).upload(jpeg_file, "user-1")

        assert len(store.calls) == 3
        assert sleeps == [2.0, 4.0]
        assert exc_info.value.attempts == 3
        assert "after 3 attempts" in exc_info.value.message
        assert "storage unavailable (call 3)" in exc_info.value.message
        assert isinstance(exc_info.value.__cause__, ConnectionError)
        assert error_logger.get_logs_by_type("Upload Error")

    def test_each_retry_is_logged(self, jpeg_file, sleeps, caplog):
        caplog.set_level("INFO", logger="core.services.upload_service")
        _retrier(FlakyStore(failures=1), sleeps).upload(jpeg_file, "user-1")

        assert "Upload attempt 1 failed: storage unavailable (call 1)" in caplog.text
        assert "Waiting 2.0s before retry..." in caplog.text
        assert "Upload attempt 2/3" in caplog.text

    def test_invalid_url_counts_as_failure(self, jpeg_file, sleeps):
        store = FlakyStore(url="/relative/path.jpg")

        with pytest.raises(UploadError) as exc_info:
            _retrier(store, sleeps).upload(jpeg_file, "user-1")

        assert len(store.calls) == 3
        assert "Invalid public URL format" in exc_info.value.message

    def test_missing_url_counts_as_failure(self, jpeg_file, sleeps):
        with pytest.raises(UploadError) as exc_info:
            _retrier(FlakyStore(url=""), sleeps).upload(jpeg_file, "user-1")
        assert "No public URL returned" in exc_info.value.message

    def test_preconditions_checked_before_any_attempt(self, sleeps):
        store = FlakyStore()

        with pytest.raises(EmptyFileError):
            _retrier(store, sleeps).upload(ImageFile("a.jpg", b"", "image/jpeg"), "user-1")
        with pytest.raises(FileTooLargeError):
            _retrier(store, sleeps).upload(
                ImageFile("a.jpg", b"\0" * (16 * MIB), "image/jpeg"), "user-1"
            )

        assert store.calls == []

    def test_backoff_base_and_attempts_configurable(self, jpeg_file, sleeps):
        store = FlakyStore(failures=99)
        with pytest.raises(UploadError) as exc_info:
            _retrier(store, sleeps, max_attempts=4, backoff_base=0.5).upload(jpeg_file, "u")

        assert len(store.calls) == 4
        assert sleeps == [1.0, 2.0, 4.0]
        assert exc_info.value.attempts == 4

    def test_storage_path(self, jpeg_file, sleeps):
        store = FlakyStore()
        result = _retrier(store, sleeps).upload(jpeg_file, "user-1")
        assert result.path == "analysis/user-1/1700000000000-me.jpg"
        assert store.calls == [result.path]

    def test_path_separators_in_filename_replaced(self, sleeps):
        path = _retrier(FlakyStore(), sleeps).build_path("../etc/pass.jpg", "u")
        assert path == "analysis/u/1700000000000-.._etc_pass.jpg"


# =============================================================================
# Reachability
# =============================================================================

class TestCheckImageReachable:
    """Tests for check_image_reachable."""

    def test_success(self):
        seen = []

        def handler(request):
            seen.append(request.method)
            return httpx.Response(200)

        with httpx.Client(transport=httpx.MockTransport(handler)) as client:
            check_image_reachable(PUBLIC_URL, client)

        assert seen == ["HEAD"]

    def test_not_found(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(404))
        with httpx.Client(transport=transport) as client:
            with pytest.raises(ImageNotAccessibleError) as exc_info:
                check_image_reachable(PUBLIC_URL, client)

        assert exc_info.value.status_code == 422
        assert "404" in exc_info.value.details["reason"]

    def test_transport_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with httpx.Client(transport=httpx.MockTransport(handler)) as client:
            with pytest.raises(ImageNotAccessibleError):
                check_image_reachable(PUBLIC_URL, client)

    def test_follows_redirects(self):
        def handler(request):
            if request.url.path.endswith("/old.jpg"):
                return httpx.Response(302, headers={"Location": PUBLIC_URL})
            return httpx.Response(200)

        with httpx.Client(transport=httpx.MockTransport(handler)) as client:
            check_image_reachable("https://cdn.example.com/old.jpg", client)


# =============================================================================
# StorageService
# =============================================================================

class TestStorageService:
    """Tests for StorageService with a mocked Supabase client."""

    @patch("core.services.storage_service.SupabaseClient")
    def test_upload_returns_public_url(self, mock_supabase):
        bucket = MagicMock()
        bucket.get_public_url.return_value = PUBLIC_URL + "?"
        mock_supabase.get_client.return_value.storage.from_.return_value = bucket

        url = StorageService.upload(b"data", "analysis/u/1-me.jpg", content_type="image/jpeg")

        assert url == PUBLIC_URL
        mock_supabase.get_client.return_value.storage.from_.assert_called_once_with("photos")
        bucket.upload.assert_called_once_with(
            path="analysis/u/1-me.jpg",
            file=b"data",
            file_options={"content-type": "image/jpeg", "upsert": "true"},
        )

    @patch("core.services.storage_service.SupabaseClient")
    def test_upload_errors_propagate(self, mock_supabase):
        bucket = MagicMock()
        bucket.upload.side_effect = RuntimeError("bucket not found")
        mock_supabase.get_client.return_value.storage.from_.return_value = bucket

        with pytest.raises(RuntimeError, match="bucket not found"):
            StorageService.upload(b"data", "path.jpg")
