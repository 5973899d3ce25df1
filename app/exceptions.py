# =============================================================================
# app/exceptions.py - Custom Exception Handlers
# =============================================================================
# Centralized exception handling for the API.
# Following the principle: "Errors should tell HOW to fix, not just WHAT failed."
#
# Only failures that happen before the photo is safely stored and reachable
# reach the user (bad file, upload exhausted retries, unreachable URL, rate
# limit). Everything after that point degrades to a fallback analysis.
# =============================================================================

from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse


class PaletteException(Exception):
    """
    Base exception for the Seasonal Palette API.

    All custom exceptions inherit from this class.
    Provides structured error responses with actionable suggestions.
    """

    def __init__(
        self,
        message: str,
        code: str = "PALETTE_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.suggestion = suggestion
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result = {
            "detail": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# File Validation Exceptions
# =============================================================================

class FileValidationError(PaletteException):
    """Raised when an uploaded photo fails a precondition check."""

    def __init__(
        self,
        message: str,
        code: str = "INVALID_FILE",
        status_code: int = 400,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(
            message=message,
            code=code,
            status_code=status_code,
            suggestion=suggestion,
            details=details,
        )


class EmptyFileError(FileValidationError):
    """Raised when the uploaded file has no content."""

    def __init__(self, filename: str):
        super().__init__(
            message="Please select a valid image file",
            code="EMPTY_FILE",
            suggestion="The selected file is empty. Choose a photo and try again",
            details={"filename": filename}
        )


class FileTooLargeError(FileValidationError):
    """Raised when uploaded file exceeds size limit."""

    def __init__(self, size_mb: float, max_mb: int):
        super().__init__(
            message=f"File too large: {size_mb:.1f}MB (max: {max_mb}MB)",
            code="FILE_TOO_LARGE",
            status_code=413,
            suggestion=f"Upload a photo smaller than {max_mb}MB",
            details={"size_mb": size_mb, "max_mb": max_mb}
        )


class MissingFilenameError(FileValidationError):
    """Raised when the upload has no filename."""

    def __init__(self):
        super().__init__(
            message="File name must not be empty",
            code="MISSING_FILENAME",
            suggestion="Upload the photo as a named file (e.g. photo.jpg)",
        )


class SuspiciousFilenameError(FileValidationError):
    """Raised when the filename looks like an executable or script."""

    def __init__(self, filename: str):
        super().__init__(
            message=f"Invalid file name: {filename}",
            code="SUSPICIOUS_FILENAME",
            suggestion="Please rename your image file",
            details={"filename": filename}
        )


# =============================================================================
# Upload Exceptions
# =============================================================================

class UploadError(PaletteException):
    """Raised when the photo could not be stored after every retry."""

    def __init__(self, attempts: int, error: str):
        super().__init__(
            message=f"Upload failed after {attempts} attempts: {error}",
            code="UPLOAD_FAILED",
            status_code=502,
            suggestion="Check your connection and try again in a moment",
            details={"attempts": attempts, "last_error": error}
        )
        self.attempts = attempts


class ImageNotAccessibleError(PaletteException):
    """Raised when the uploaded photo URL doesn't answer a HEAD request."""

    def __init__(self, url: str, reason: str):
        super().__init__(
            message="Uploaded image is not accessible. Please try again.",
            code="IMAGE_NOT_ACCESSIBLE",
            status_code=422,
            suggestion="Re-upload the photo; if this persists the storage bucket may not be public",
            details={"url": url, "reason": reason}
        )


# =============================================================================
# Request Exceptions
# =============================================================================

class RateLimitExceededError(PaletteException):
    """Raised when a user has used up their analyses for the window."""

    def __init__(self, user_id: str, window_seconds: int):
        super().__init__(
            message="Too many analyses requested",
            code="RATE_LIMITED",
            status_code=429,
            suggestion=f"Wait up to {window_seconds // 60} minutes before trying again",
            details={"user_id": user_id}
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def palette_exception_handler(
    request: Request,
    exc: PaletteException
) -> JSONResponse:
    """
    Convert PaletteException to JSON response.

    Returns structured error with:
    - detail: Human-readable message
    - code: Machine-readable error code
    - suggestion: How to fix (if available)
    - details: Additional context
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


async def validation_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """
    Handle Pydantic / request validation errors.

    Converts validation errors to user-friendly messages.
    """
    return JSONResponse(
        status_code=422,
        content={
            "detail": "Validation error",
            "code": "VALIDATION_ERROR",
            "errors": str(exc)
        }
    )
