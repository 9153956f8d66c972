"""
Back Office API - Upload Route
===============================

What:  POST /api/upload, a multipart form with a single `file` field.
How:   Reads the form itself and delegates validation and storage to
       UploadService. Storage failures reach the StorageError handler in
       app.main, which maps the FailureKind to a response.

The form is parsed here rather than through a File() parameter so that a
`file` field sent as plain text is answered with the upload's own 400
(invalid type) instead of FastAPI's 422.

Size is re-checked on the bytes actually received; the declared
Content-Length is not trusted.
"""

import logging

from fastapi import APIRouter, Request
from starlette.datastructures import UploadFile

from app.exceptions import UploadValidationError
from app.schemas.common import ErrorResponse
from app.schemas.upload import UploadResponse
from app.services.upload_service import INVALID_FILE_TYPE, NO_FILE, upload_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Upload"])

FILE_FIELD = "file"


@router.post(
    "/upload",
    response_model=UploadResponse,
    response_model_by_alias=True,
    responses={
        400: {"description": "Missing file, wrong type, too large, or bad blob URL", "model": ErrorResponse},
        500: {"description": "Storage failure", "model": ErrorResponse},
    },
    openapi_extra={
        "requestBody": {
            "content": {
                "multipart/form-data": {
                    "schema": {
                        "type": "object",
                        "properties": {
                            FILE_FIELD: {
                                "type": "string",
                                "format": "binary",
                                "description": "Image file (jpg, jpeg, png), max 15MB by default",
                            }
                        },
                    }
                }
            },
        }
    },
    summary="Upload an image (jpg, jpeg, png) to blob storage",
)
async def upload_file(request: Request) -> UploadResponse:
    # Closing the form closes every uploaded file it holds
    async with request.form() as form:
        file = form.get(FILE_FIELD)
        if file is None:
            raise UploadValidationError(message=NO_FILE)
        if not isinstance(file, UploadFile):
            # A text field has no content type to accept
            raise UploadValidationError(
                message=INVALID_FILE_TYPE,
                context={"content_type": None, "received": "text field"},
            )

        content = await file.read()
        logger.info(
            "Received upload: name=%s type=%s size=%d",
            file.filename,
            file.content_type,
            len(content),
        )
        blob = await upload_service.upload(
            filename=file.filename,
            content_type=file.content_type,
            content=content,
        )

    return UploadResponse(url=blob.url, blob_name=blob.blob_name)
