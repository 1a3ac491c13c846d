# routes/media/__init__.py
"""
Media module - image upload routes under /v1/uploads
"""
from fastapi import APIRouter
from routes.media import upload

router = APIRouter(prefix="/v1/uploads", tags=["Uploads"])

router.include_router(upload.router)
