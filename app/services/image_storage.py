"""Cloudinary image storage client"""

import logging
import os
from typing import Optional

import cloudinary
import cloudinary.uploader
from starlette.concurrency import run_in_threadpool

from ..config import Settings

logger = logging.getLogger(__name__)


class ImageStorageError(Exception):
    """Upload could not be performed or did not return a URL"""


class ImageStorage:
    """
    Uploads property photos to Cloudinary.

    Built once per process by the app factory; `is_configured` is fixed at construction.
    """

    def __init__(
        self,
        cloud_name: Optional[str],
        api_key: Optional[str],
        api_secret: Optional[str],
        folder: str = "real-estate",
    ):
        self.folder = folder
        self.is_configured = bool(cloud_name and api_key and api_secret)
        if self.is_configured:
            cloudinary.config(
                cloud_name=cloud_name,
                api_key=api_key,
                api_secret=api_secret,
                secure=True,  # Always use HTTPS
            )
            logger.info("✅ Cloudinary image storage configured")
        else:
            logger.warning("⚠️ Cloudinary credentials missing - image uploads are disabled")

    @classmethod
    def from_settings(cls, settings: Settings) -> "ImageStorage":
        return cls(
            cloud_name=settings.cloudinary_cloud_name,
            api_key=settings.cloudinary_api_key,
            api_secret=settings.cloudinary_api_secret,
            folder=settings.cloudinary_folder,
        )

    def _upload_sync(self, data: bytes, file_name: str) -> str:
        public_id = os.path.splitext(file_name)[0] or None
        try:
            result = cloudinary.uploader.upload(
                data,
                folder=self.folder,
                public_id=public_id,
                resource_type="image",
                overwrite=True,
            )
        except Exception as e:
            logger.error(f"❌ Cloudinary upload failed for {file_name}: {e}")
            raise ImageStorageError(f"Cloudinary upload failed: {e}") from e

        url = result.get("secure_url")
        if not url:
            raise ImageStorageError("Cloudinary upload failed")
        return url

    async def upload(self, data: bytes, file_name: str) -> str:
        """Upload raw image bytes and return the secure URL"""
        if not self.is_configured:
            raise ImageStorageError("Cloudinary env vars missing")

        url = await run_in_threadpool(self._upload_sync, data, file_name)
        logger.info(f"✅ Uploaded image {file_name}")
        return url
