"""
Back Office API - Upload Service
=================================

What:  Validates an uploaded image (practice logo, letterhead) and stores it
       in blob storage.
Who:   Called by POST /api/upload.

Validation order (cheapest first):
    1. File present
    2. Declared content type in ALLOWED_FILE_TYPES
    3. Size within settings.max_upload_size
    4. Upload to the configured container

Storage failures propagate as StorageError; the exception handler in
app.main turns the FailureKind into the client-facing message.
"""

import logging
from typing import Optional

from app.config import settings
from app.exceptions import UploadValidationError
from app.services.blob_storage import BlobStorage, UploadedBlob, blob_storage

logger = logging.getLogger(__name__)

ALLOWED_FILE_TYPES = frozenset({"image/jpeg", "image/jpg", "image/png"})

NO_FILE = "No file provided"
INVALID_FILE_TYPE = "Invalid file type. Only jpg, jpeg, and png files are allowed."


class UploadService:
    """Upload validation and storage hand-off."""

    def __init__(self, storage: Optional[BlobStorage] = None):
        self.storage = storage or blob_storage

    def validate(
        self,
        filename: Optional[str],
        content_type: Optional[str],
        size: int,
    ) -> None:
        """
        Raises:
            UploadValidationError: missing file, wrong type, or too large
        """
        if not filename:
            raise UploadValidationError(message=NO_FILE)

        if (content_type or "").lower() not in ALLOWED_FILE_TYPES:
            raise UploadValidationError(
                message=INVALID_FILE_TYPE,
                context={"content_type": content_type, "allowed": sorted(ALLOWED_FILE_TYPES)},
            )

        if size > settings.max_upload_size:
            raise UploadValidationError(
                message=f"File size exceeds {settings.max_upload_size_mb}MB limit",
                context={"size": size, "max_size": settings.max_upload_size},
            )

    async def upload(
        self,
        filename: Optional[str],
        content_type: Optional[str],
        content: bytes,
        container: Optional[str] = None,
    ) -> UploadedBlob:
        self.validate(filename, content_type, len(content))

        logger.info(
            "Upload accepted: name=%s type=%s size=%d",
            filename,
            content_type,
            len(content),
        )
        return await self.storage.upload(
            content=content,
            filename=filename,
            container=container or settings.storage_container,
        )


upload_service = UploadService()
