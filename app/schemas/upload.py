"""Response schema for the image upload endpoint."""

from pydantic import BaseModel, Field


class UploadResponse(BaseModel):
    """Public URL of an uploaded image."""

    public_url: str = Field(..., description="Publicly readable URL of the stored object.")
    path: str = Field(..., description="Object path inside the bucket.")
