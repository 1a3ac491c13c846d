from typing import List

from pydantic import BaseModel, Field


class UploadResponse(BaseModel):
    """URL of the first stored file plus every URL when several were sent."""
    file_url: str
    uploaded_by: str
    file_urls: List[str] = Field(default_factory=list)
