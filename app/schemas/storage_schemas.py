from enum import Enum
from typing import List
from pydantic import Field

from app.schemas.base_model import ApiBaseModel as BaseModel


class FileKind(str, Enum):
    ESSAY = "essay"
    TRANSCRIPT = "transcript"


class StoredFile(BaseModel):
    """A student file in object storage"""

    name: str = Field(..., description="Display name without the kind prefix")
    url: str = Field(..., description="Public or presigned download URL")
    object_name: str = Field(
        ..., description="Object name inside the student's prefix, e.g. essay-draft.pdf"
    )


class StudentFilesResponse(BaseModel):
    essays: List[StoredFile] = Field(default_factory=list)
    transcripts: List[StoredFile] = Field(default_factory=list)


class FileUploadResponse(BaseModel):
    """Response model for file upload operations"""

    object_name: str = Field(..., description="Full object name in the bucket")
    bucket_name: str = Field(..., description="Name of the MinIO bucket")
    size: int = Field(..., description="Size of the uploaded file in bytes")
    content_type: str = Field(..., description="MIME type of the uploaded file")
    etag: str = Field(..., description="ETag of the uploaded object")
    url: str = Field(..., description="Download URL for the uploaded file")
