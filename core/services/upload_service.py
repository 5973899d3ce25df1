# =============================================================================
# core/services/upload_service.py - Photo Upload Pipeline
# =============================================================================
# Handles the first stage of a color analysis:
# 1. Precondition checks on the photo (size, filename, lenient type check)
# 2. Upload to object storage with bounded exponential-backoff retry
# 3. HEAD check that the returned public URL is actually reachable
#
# Errors from this module are the only ones surfaced to the user; once the
# photo is stored and reachable the rest of the pipeline degrades to a
# fallback analysis instead of failing.
# =============================================================================

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable

import httpx
from tenacity import RetryCallState, Retrying, stop_after_attempt, wait_exponential

from app.exceptions import (
    EmptyFileError,
    FileTooLargeError,
    ImageNotAccessibleError,
    MissingFilenameError,
    UploadError,
)
from core.services.storage_service import ObjectStore
from lib.monitoring import ErrorLogger
from lib.utils import error_message

logger = logging.getLogger(__name__)

MAX_FILE_SIZE_BYTES = 15 * 1024 * 1024

KNOWN_IMAGE_TYPES = (
    "image/jpeg",
    "image/jpg",
    "image/png",
    "image/webp",
    "image/gif",
    "image/bmp",
)


# =============================================================================
# Data Classes
# =============================================================================

@dataclass(frozen=True)
class ImageFile:
    """An uploaded photo held in memory."""

    filename: str
    content: bytes
    content_type: str | None = None

    @property
    def size(self) -> int:
        return len(self.content)


@dataclass(frozen=True)
class UploadResult:
    """Where the photo ended up."""

    public_url: str
    path: str
    attempts: int


# =============================================================================
# Preconditions
# =============================================================================

def validate_image_file(file: ImageFile, max_bytes: int = MAX_FILE_SIZE_BYTES) -> None:
    """
    Check a photo before anything touches the network.

    The MIME type is not enforced: unusual types are logged and the upload
    proceeds.

    Raises:
        EmptyFileError: File has no content
        FileTooLargeError: File is larger than max_bytes
        MissingFilenameError: Filename is blank
    """
    if file.size == 0:
        raise EmptyFileError(file.filename)

    if file.size > max_bytes:
        raise FileTooLargeError(file.size / (1024 * 1024), max_bytes // (1024 * 1024))

    if not file.filename or not file.filename.strip():
        raise MissingFilenameError()

    content_type = (file.content_type or "").lower()
    if not content_type.startswith("image/") and content_type not in KNOWN_IMAGE_TYPES:
        logger.warning(
            f"Unusual file type detected: {file.content_type!r} for {file.filename}, "
            "attempting to process anyway"
        )


# =============================================================================
# Upload With Retry
# =============================================================================

class UploadRetrier:
    """
    Uploads a photo with bounded exponential backoff.

    Retries run on tenacity. After a failed attempt n (1-based) it sleeps
    2**n * backoff_base seconds, i.e. 2s then 4s with the defaults. There is
    no sleep after the final attempt.

    Example:
        retrier = UploadRetrier(StorageService)
        result = retrier.upload(image, owner_id="user-123")
        print(result.public_url)

    Attributes:
        store: ObjectStore that receives the bytes
        max_attempts: Attempts before giving up
        backoff_base: Seconds multiplied by 2**attempt between attempts
        sleep: Blocking sleep, injectable for tests
        clock: Millisecond timestamp source used in storage paths
    """

    def __init__(
        self,
        store: ObjectStore,
        max_attempts: int = 3,
        backoff_base: float = 1.0,
        max_file_bytes: int = MAX_FILE_SIZE_BYTES,
        error_logger: ErrorLogger | None = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], int] = lambda: int(time.time() * 1000),
    ):
        self.store = store
        self.max_attempts = max_attempts
        self.backoff_base = backoff_base
        self.max_file_bytes = max_file_bytes
        self.error_logger = error_logger
        self.sleep = sleep
        self.clock = clock

    def upload(self, file: ImageFile, owner_id: str) -> UploadResult:
        """
        Validate and upload a photo.

        Args:
            file: The photo
            owner_id: User id, used as a path prefix

        Returns:
            UploadResult with the public URL

        Raises:
            FileValidationError: Preconditions failed (no upload attempted)
            UploadError: Every attempt failed
        """
        validate_image_file(file, self.max_file_bytes)

        path = self.build_path(file.filename, owner_id)
        retrying = Retrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(multiplier=2 * self.backoff_base),
            sleep=self.sleep,
            before_sleep=self._log_retry,
            reraise=True,
        )

        try:
            for attempt in retrying:
                with attempt:
                    number = attempt.retry_state.attempt_number
                    public_url = self._attempt_upload(file, path, number)
                return UploadResult(public_url=public_url, path=path, attempts=number)
        except Exception as e:
            logger.warning(f"Upload attempt {self.max_attempts} failed: {error_message(e)}")
            error = UploadError(self.max_attempts, error_message(e))
            if self.error_logger is not None:
                self.error_logger.log_upload_error(
                    error, filename=file.filename, size=file.size, content_type=file.content_type
                )
            raise error from e

    def _attempt_upload(self, file: ImageFile, path: str, attempt: int) -> str:
        """One upload attempt. A missing or non-http URL counts as a failure."""
        logger.info(
            f"Upload attempt {attempt}/{self.max_attempts} for {file.filename} "
            f"({file.size} bytes)"
        )
        public_url = self.store.upload(
            file.content,
            path,
            content_type=file.content_type,
            upsert=True,
        )

        if not public_url:
            raise ValueError("Upload failed: No public URL returned")
        if not public_url.startswith("http"):
            raise ValueError("Upload failed: Invalid public URL format")

        logger.info(f"Upload successful: {public_url}")
        return public_url

    def _log_retry(self, retry_state: RetryCallState) -> None:
        error = retry_state.outcome.exception()
        logger.warning(f"Upload attempt {retry_state.attempt_number} failed: {error_message(error)}")
        logger.info(f"Waiting {retry_state.next_action.sleep:.1f}s before retry...")

    def build_path(self, filename: str, owner_id: str) -> str:
        """analysis/{owner_id}/{epoch_ms}-{filename}"""
        safe_name = filename.strip().replace("/", "_").replace("\\", "_")
        return f"analysis/{owner_id}/{self.clock()}-{safe_name}"


# =============================================================================
# Reachability Check
# =============================================================================

def check_image_reachable(
    url: str,
    http_client: httpx.Client,
    timeout: float = 10.0,
) -> None:
    """
    Confirm the uploaded photo can be fetched by URL.

    Not retried.

    Raises:
        ImageNotAccessibleError: Non-2xx response or transport failure
    """
    try:
        response = http_client.head(url, timeout=timeout, follow_redirects=True)
    except httpx.HTTPError as e:
        logger.error(f"Image URL validation failed: {e}")
        raise ImageNotAccessibleError(url, str(e)) from e

    if not response.is_success:
        reason = f"{response.status_code} {response.reason_phrase}"
        logger.error(f"Image not accessible: {reason}")
        raise ImageNotAccessibleError(url, reason)

    logger.info("Image URL validation successful")
