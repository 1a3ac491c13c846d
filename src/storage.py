"""
Storage abstraction layer for uploaded images.
Supports both local filesystem (development) and S3 (production).
"""

import logging
import uuid
from abc import ABC, abstractmethod
from functools import lru_cache
from pathlib import Path
from typing import BinaryIO, Optional

import boto3
from botocore.exceptions import ClientError

from config.upload_config import UploadConfig

logger = logging.getLogger(__name__)


def generate_filename(original_filename: Optional[str]) -> str:
    """Unique filename that keeps the original extension."""
    ext = Path(original_filename or "").suffix.lower()
    return f"{uuid.uuid4()}{ext}"


def generate_organized_path(folder: str, owner_id: Optional[str], filename: str) -> str:
    """
    {folder}/{owner_id}/{filename}

    Examples:
    - posts/USR-1699564234-A7K9M2/4f1c....jpg
    - avatars/USR-1699564234-A7K9M2/9b2e....png
    """
    parts = [folder]
    if owner_id:
        parts.append(owner_id)
    parts.append(filename)
    return "/".join(parts)


class StorageBackend(ABC):
    """Abstract base class for storage backends"""

    @abstractmethod
    async def save(
        self,
        file_data: BinaryIO,
        filename: str,
        content_type: str,
        folder: str,
        owner_id: Optional[str] = None,
    ) -> tuple[str, str]:
        """
        Save file and return (storage_path, access_url)
        """
        pass

    @abstractmethod
    def get_url(self, storage_path: str) -> str:
        pass


class LocalFileStorage(StorageBackend):
    """Local filesystem storage for development"""

    def __init__(self, base_dir: str = "uploads", base_url: str = "http://localhost:8000"):
        self.base_dir = Path(base_dir)
        self.base_url = base_url.rstrip("/")
        self.base_dir.mkdir(parents=True, exist_ok=True)
        logger.info(f"LocalFileStorage initialized: base_dir={self.base_dir}, base_url={self.base_url}")

    async def save(
        self,
        file_data: BinaryIO,
        filename: str,
        content_type: str,
        folder: str,
        owner_id: Optional[str] = None,
    ) -> tuple[str, str]:
        storage_path = generate_organized_path(folder, owner_id, filename)

        file_path = self.base_dir / storage_path
        file_path.parent.mkdir(parents=True, exist_ok=True)
        with open(file_path, "wb") as f:
            f.write(file_data.read())

        access_url = self.get_url(storage_path)
        logger.info(f"Saved file locally: {storage_path} -> {access_url}")
        return storage_path, access_url

    def get_url(self, storage_path: str) -> str:
        return f"{self.base_url}/uploads/{storage_path}"


class S3Storage(StorageBackend):
    """AWS S3/MinIO storage for production"""

    def __init__(
        self,
        bucket_name: str,
        aws_access_key: Optional[str] = None,
        aws_secret_key: Optional[str] = None,
        region: str = "us-east-1",
        endpoint_url: Optional[str] = None,  # For MinIO compatibility
        public_base_url: Optional[str] = None,
    ):
        self.bucket_name = bucket_name
        self.region = region
        self.endpoint_url = endpoint_url
        self.public_base_url = public_base_url.rstrip("/") if public_base_url else None

        session = boto3.session.Session()
        self.s3_client = session.client(
            "s3",
            region_name=region,
            endpoint_url=endpoint_url,
            aws_access_key_id=aws_access_key,
            aws_secret_access_key=aws_secret_key,
        )
        logger.info(f"S3Storage initialized: bucket={bucket_name}, endpoint={endpoint_url}")

    async def save(
        self,
        file_data: BinaryIO,
        filename: str,
        content_type: str,
        folder: str,
        owner_id: Optional[str] = None,
    ) -> tuple[str, str]:
        storage_path = generate_organized_path(folder, owner_id, filename)
        try:
            self.s3_client.upload_fileobj(
                file_data,
                self.bucket_name,
                storage_path,
                ExtraArgs={"ContentType": content_type, "ACL": "public-read"},
            )
        except ClientError as e:
            logger.error(f"Error uploading to S3/MinIO: {e}")
            raise

        access_url = self.get_url(storage_path)
        logger.info(f"Uploaded to S3/MinIO: {storage_path} -> {access_url}")
        return storage_path, access_url

    def get_url(self, storage_path: str) -> str:
        if self.public_base_url:
            return f"{self.public_base_url}/{storage_path}"
        if self.endpoint_url:
            # MinIO URL format
            return f"{self.endpoint_url.rstrip('/')}/{self.bucket_name}/{storage_path}"
        return f"https://{self.bucket_name}.s3.{self.region}.amazonaws.com/{storage_path}"


def get_storage_backend() -> StorageBackend:
    """
    Storage backend selected by STORAGE_TYPE ("local" or "s3").
    """
    config = UploadConfig.get_storage_config()

    if config["storage_type"] == "s3":
        return S3Storage(
            bucket_name=config["s3_bucket_name"],
            aws_access_key=config["s3_access_key"],
            aws_secret_key=config["s3_secret_key"],
            region=config["s3_region"],
            endpoint_url=config["s3_endpoint_url"],
            public_base_url=config["s3_public_base_url"],
        )
    return LocalFileStorage(
        base_dir=config["local_upload_dir"],
        base_url=config["base_url"],
    )


@lru_cache(maxsize=1)
def get_storage() -> StorageBackend:
    """FastAPI dependency; tests override it with a temporary LocalFileStorage."""
    return get_storage_backend()
