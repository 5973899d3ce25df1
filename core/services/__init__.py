# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .storage_service import ObjectStore, StorageService
from .upload_service import (
    ImageFile,
    UploadResult,
    UploadRetrier,
    check_image_reachable,
    validate_image_file,
)

__all__ = [
    "ObjectStore",
    "StorageService",
    "ImageFile",
    "UploadResult",
    "UploadRetrier",
    "check_image_reachable",
    "validate_image_file",
]
