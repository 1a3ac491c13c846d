"""
Image upload endpoints, one per named route (post image, profile image,
profile background). Each route declares its own size and count limits.
"""

import io
import logging
from typing import List

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status

from config.security import get_current_user
from config.upload_config import UploadConfig
from model.user import User
from schema.upload import UploadResponse
from src.storage import StorageBackend, generate_filename, get_storage

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/{route_name}", response_model=UploadResponse, status_code=status.HTTP_201_CREATED)
async def upload_images(
    route_name: str,
    files: List[UploadFile] = File(...),
    current_user: User = Depends(get_current_user),
    storage: StorageBackend = Depends(get_storage),
):
    """
    Store the uploaded images and return their public URLs.
    """
    route = UploadConfig.ROUTES.get(route_name)
    if route is None:
        raise HTTPException(status_code=404, detail=f"Unknown upload route: {route_name}")

    logger.info(f"Upload started: user={current_user.id}, route={route_name}, files={len(files)}")

    if not files:
        raise HTTPException(status_code=400, detail="No file provided")
    if len(files) > route.max_file_count:
        raise HTTPException(
            status_code=400,
            detail=f"Too many files: {route_name} accepts at most {route.max_file_count}",
        )

    # Validate everything before storing anything
    payloads = []
    for upload in files:
        content_type = upload.content_type or "application/octet-stream"
        if not UploadConfig.is_allowed_image(content_type):
            raise HTTPException(
                status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
                detail="Unsupported file type. Supported: jpg, png, gif, webp",
            )
        data = await upload.read()
        if not data:
            raise HTTPException(status_code=400, detail="Empty file")
        if len(data) > route.max_file_size:
            raise HTTPException(
                status_code=413,
                detail=f"File too large: {route_name} accepts up to {route.max_file_size // (1024 * 1024)}MB",
            )
        payloads.append((upload.filename, content_type, data))

    try:
        urls = []
        for filename, content_type, data in payloads:
            _, url = await storage.save(
                io.BytesIO(data),
                generate_filename(filename),
                content_type,
                folder=route.folder,
                owner_id=current_user.id,
            )
            urls.append(url)
    except Exception as e:
        logger.error(f"Error storing upload for {current_user.id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Error uploading file")

    logger.info(f"Upload complete: user={current_user.id}, route={route_name}, urls={urls}")
    return UploadResponse(file_url=urls[0], uploaded_by=current_user.id, file_urls=urls)
