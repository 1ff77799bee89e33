"""
Image upload API endpoints.

Proxies listing and profile images to the external image host.
"""

import logging
from pathlib import PurePath
from typing import List, Optional
from fastapi import APIRouter, Depends, File, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession
from backend.app.db.session import get_db
from backend.app.models.dealer import Dealer
from backend.app.schemas.common import MessageResponse
from backend.app.schemas.upload import UploadedFile, UploadResponse
from backend.app.core.config import settings
from backend.app.core.dependencies import get_current_dealer
from backend.app.core.exceptions import ValidationError
from backend.app.services.image_host import CloudinaryImageHost, get_image_host
from backend.app.services.audit import log_event, AuditAction

router = APIRouter(prefix="/upload", tags=["Uploads"])
logger = logging.getLogger("carsawa.uploads")


def _is_allowed_image(upload: UploadFile) -> bool:
    allowed = settings.upload_allowed_extensions
    extension = PurePath(upload.filename or "").suffix.lower().lstrip(".")
    subtype = (upload.content_type or "").lower()
    return (
        extension in allowed
        and subtype.startswith("image/")
        and subtype.split("/", 1)[1] in allowed
    )


@router.post("", response_model=UploadResponse, status_code=status.HTTP_201_CREATED)
async def upload_images(
    images: Optional[List[UploadFile]] = File(None),
    current_dealer: Dealer = Depends(get_current_dealer),
    image_host: CloudinaryImageHost = Depends(get_image_host),
    db: AsyncSession = Depends(get_db)
):
    """
    Upload up to 10 images (jpeg, jpg, png, gif, webp; max 5 MB each).

    Every file is checked before anything is sent to the image host.
    """
    if not images:
        raise ValidationError("No files uploaded")
    if len(images) > settings.upload_max_files:
        raise ValidationError(f"Too many files (max {settings.upload_max_files})")

    contents = []
    for upload in images:
        if not _is_allowed_image(upload):
            raise ValidationError("Only image files are allowed!")
        # At most one byte past the limit is buffered per file
        content = await upload.read(settings.upload_max_file_size + 1)
        if len(content) > settings.upload_max_file_size:
            raise ValidationError(f"File too large: {upload.filename}")
        contents.append((upload, content))

    files = []
    for upload, content in contents:
        stored = await image_host.upload(content, upload.filename, upload.content_type)
        files.append(UploadedFile(
            original_name=upload.filename,
            public_id=stored.public_id,
            url=stored.url,
            secure_url=stored.secure_url,
            mimetype=upload.content_type,
            size=len(content),
        ))

    logger.info("Uploaded %d image(s)", len(files), extra={"dealer_id": current_dealer.id})
    await log_event(
        db=db,
        action=AuditAction.IMAGES_UPLOADED,
        actor_id=current_dealer.id,
        actor_email=current_dealer.email,
        metadata={"public_ids": [f.public_id for f in files]}
    )

    return UploadResponse(message="Files uploaded successfully", files=files)


@router.delete("/{public_id:path}", response_model=MessageResponse)
async def delete_image(
    public_id: str,
    current_dealer: Dealer = Depends(get_current_dealer),
    image_host: CloudinaryImageHost = Depends(get_image_host),
    db: AsyncSession = Depends(get_db)
):
    """Delete an image from the image host by its public id."""
    if not public_id.strip():
        raise ValidationError("Image public ID is required")

    await image_host.destroy(public_id)

    await log_event(
        db=db,
        action=AuditAction.IMAGE_DELETED,
        actor_id=current_dealer.id,
        actor_email=current_dealer.email,
        target_id=public_id
    )

    return MessageResponse(message="Image deleted successfully")
