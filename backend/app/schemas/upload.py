"""
Image upload Pydantic schemas.
"""

from typing import List
from backend.app.schemas.common import CamelModel


class UploadedFile(CamelModel):
    original_name: str
    public_id: str
    url: str
    secure_url: str
    mimetype: str
    size: int


class UploadResponse(CamelModel):
    message: str
    files: List[UploadedFile]
