# =============================================================================
# core/services/storage_service.py - Supabase Storage Operations
# =============================================================================
# Handles photo uploads to Supabase Storage.
#
# StorageService satisfies the ObjectStore protocol used by the upload
# retrier, so the class itself can be passed as the store.
# =============================================================================

import logging
from typing import Protocol

from lib.supabase_client import SupabaseClient
from app.config import settings

logger = logging.getLogger(__name__)


class ObjectStore(Protocol):
    """Anything that can store bytes and hand back a public URL."""

    def upload(
        self,
        content: bytes,
        path: str,
        content_type: str | None = None,
        upsert: bool = True,
    ) -> str:
        ...


class StorageService:
    """
    Service for Supabase Storage operations.

    Photos go to the public bucket configured by STORAGE_BUCKET so the
    vision model can fetch them by URL.
    """

    @staticmethod
    def upload(
        content: bytes,
        path: str,
        content_type: str | None = None,
        upsert: bool = True,
    ) -> str:
        """
        Upload raw bytes and return the file's public URL.

        Args:
            content: File bytes
            path: Object path inside the bucket
            content_type: MIME type to store with the object
            upsert: Overwrite an existing object at the same path

        Returns:
            Absolute public URL

        Raises:
            Exception: Whatever the storage SDK raises; the caller retries
        """
        client = SupabaseClient.get_client()
        bucket = client.storage.from_(settings.STORAGE_BUCKET)

        bucket.upload(
            path=path,
            file=content,
            file_options={
                "content-type": content_type or "application/octet-stream",
                "upsert": "true" if upsert else "false",
            },
        )
        logger.info(f"Uploaded file to storage: {path}")

        public_url = bucket.get_public_url(path)
        return public_url.rstrip("?") if public_url else public_url

