"""
Upload configuration for Glooba.
Defines the named upload routes, their size/count limits and storage settings.
"""

import os
from dataclasses import dataclass
from typing import Dict, List


MB = 1024 * 1024


@dataclass(frozen=True)
class UploadRoute:
    name: str
    folder: str
    max_file_size: int
    max_file_count: int


class UploadConfig:
    """
    Centralized upload configuration.
    """

    # ============================================================================
    # FILE TYPE CONFIGURATIONS
    # ============================================================================

    ALLOWED_IMAGE_TYPES: Dict[str, List[str]] = {
        'image/jpeg': ['.jpg', '.jpeg'],
        'image/png': ['.png'],
        'image/gif': ['.gif'],
        'image/webp': ['.webp'],
    }

    # ============================================================================
    # NAMED ROUTES
    # ============================================================================

    ROUTES: Dict[str, UploadRoute] = {
        'post_image': UploadRoute('post_image', 'posts', 4 * MB, 1),
        'profile_image': UploadRoute('profile_image', 'avatars', 4 * MB, 1),
        # Backgrounds are larger than the other images
        'profile_background': UploadRoute('profile_background', 'backgrounds', 8 * MB, 1),
    }

    # ============================================================================
    # STORAGE SETTINGS
    # ============================================================================

    @staticmethod
    def get_storage_config() -> Dict[str, object]:
        """
        Get storage configuration from environment variables.
        """
        return {
            'storage_type': os.getenv('STORAGE_TYPE', 'local'),
            's3_endpoint_url': os.getenv('S3_ENDPOINT_URL'),
            's3_access_key': os.getenv('AWS_ACCESS_KEY_ID'),
            's3_secret_key': os.getenv('AWS_SECRET_ACCESS_KEY'),
            's3_bucket_name': os.getenv('S3_BUCKET_NAME', 'glooba-uploads'),
            's3_region': os.getenv('AWS_REGION', 'us-east-1'),
            's3_public_base_url': os.getenv('S3_PUBLIC_BASE_URL'),
            'local_upload_dir': os.getenv('UPLOAD_DIR', 'uploads'),
            'base_url': os.getenv('BASE_URL', 'http://localhost:8000'),
        }

    @classmethod
    def is_allowed_image(cls, content_type: str) -> bool:
        return content_type in cls.ALLOWED_IMAGE_TYPES
