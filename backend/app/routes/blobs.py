"""
Back Office API - Blob Route
=============================

What:  GET /api/blobs/{container}/{blob_name} serves stored uploads so that
       the URLs returned by POST /api/upload resolve.
"""

import logging

from fastapi import APIRouter
from fastapi.responses import FileResponse

from app.exceptions import FailureKind, NotFoundError, StorageError
from app.schemas.common import ErrorResponse
from app.services.blob_storage import blob_storage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Blobs"])


@router.get(
    "/blobs/{container}/{blob_name}",
    response_class=FileResponse,
    responses={
        200: {"description": "Blob content"},
        404: {"description": "Blob not found", "model": ErrorResponse},
    },
    summary="Download a stored blob",
)
async def get_blob(container: str, blob_name: str) -> FileResponse:
    try:
        path = blob_storage.resolve(container, blob_name)
    except StorageError as e:
        # A malformed name can't address a stored blob either
        if e.kind in (FailureKind.NOT_FOUND, FailureKind.INVALID_URL):
            raise NotFoundError(
                resource="Blob", context={"container": container, "blob_name": blob_name}
            ) from e
        raise

    # Blob names are unique per upload and never rewritten
    return FileResponse(
        path=str(path),
        headers={"Cache-Control": "public, max-age=31536000, immutable"},
    )
