"""
Back Office API - Upload Schemas
=================================
"""

from pydantic import BaseModel, ConfigDict, Field


class UploadResponse(BaseModel):
    """
    What:  Returned by POST /api/upload.

    Serialized with camelCase `blobName` to match what the front-end
    reads back into the practice logo field.
    """
    model_config = ConfigDict(populate_by_name=True)

    url: str = Field(description="Public URL of the stored blob")
    blob_name: str = Field(alias="blobName", description="Unique blob name inside the container")
