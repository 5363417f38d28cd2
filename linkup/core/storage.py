import os
import uuid
import logging
from typing import Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from fastapi import UploadFile

from .config import settings
from .errors import ExternalServiceError

logger = logging.getLogger(__name__)


class R2Storage:
    """Handles media storage using Cloudflare R2, with a local directory fallback"""

    def __init__(self, client=None):
        """Initialize the R2 client with settings from config"""
        self.client = client
        self.bucket = settings.R2_BUCKET_NAME
        self.public_url = settings.R2_PUBLIC_URL.rstrip("/")
        self.base_url = settings.BASE_URL.rstrip("/")
        self.upload_dir = settings.UPLOAD_DIRECTORY

        if self.client is not None:
            return

        if all([settings.R2_ENDPOINT, settings.R2_ACCESS_KEY_ID, settings.R2_SECRET_ACCESS_KEY]):
            try:
                self.client = boto3.client(
                    "s3",
                    endpoint_url=settings.R2_ENDPOINT,
                    aws_access_key_id=settings.R2_ACCESS_KEY_ID,
                    aws_secret_access_key=settings.R2_SECRET_ACCESS_KEY,
                    region_name="auto",
                )
                logger.info(f"R2Storage S3 client initialized for bucket '{self.bucket}'")
            except (BotoCoreError, ValueError) as e:
                logger.error(f"Failed to create S3 client: {e}")
                logger.warning("R2 storage will not be available, using local storage")
        else:
            missing = [
                name
                for name in ("R2_ENDPOINT", "R2_ACCESS_KEY_ID", "R2_SECRET_ACCESS_KEY")
                if not getattr(settings, name)
            ]
            logger.warning(f"R2 storage not configured - missing: {', '.join(missing)}; using local storage")

    @property
    def proxy_prefix(self) -> str:
        return f"{self.base_url}{settings.API_PREFIX}/media/"

    def local_path(self, key: str) -> str:
        return os.path.join(self.upload_dir, *key.split("/"))

    def _make_key(self, file: UploadFile, prefix: str) -> str:
        file_extension = os.path.splitext(file.filename or "")[1].lower()
        return f"{prefix}/{uuid.uuid4().hex}{file_extension}"

    async def upload_file(self, file: UploadFile, prefix: str = "post_media") -> str:
        """Upload a file and return the URL it is served from."""
        key = self._make_key(file, prefix)
        content = await file.read()
        await file.seek(0)
        logger.info(f"[UPLOAD] Storing '{file.filename}' ({len(content)} bytes) as '{key}'")

        if not self.client:
            local_path = self.local_path(key)
            try:
                os.makedirs(os.path.dirname(local_path), exist_ok=True)
                with open(local_path, "wb") as out_file:
                    out_file.write(content)
            except OSError as e:
                logger.error(f"[UPLOAD] Failed to save file locally: {e}")
                raise ExternalServiceError("Media storage", str(e)) from e
            logger.info(f"[UPLOAD] Saved file locally at {local_path}")
            return f"{self.proxy_prefix}{key}"

        try:
            self.client.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=content,
                ContentType=file.content_type or "application/octet-stream",
            )
        except (BotoCoreError, ClientError) as e:
            logger.error(f"[UPLOAD] Failed to upload to R2: {e}")
            raise ExternalServiceError("Media storage", str(e)) from e

        # Prefer the public bucket URL, fall back to the media proxy
        if self.public_url:
            return f"{self.public_url}/{key}"
        return f"{self.proxy_prefix}{key}"

    def key_from_url(self, url: str) -> Optional[str]:
        if self.public_url and url.startswith(f"{self.public_url}/"):
            return url[len(self.public_url) + 1:]
        if url.startswith(self.proxy_prefix):
            return url[len(self.proxy_prefix):]
        return None

    def delete_file(self, url: Optional[str]) -> bool:
        """Delete a stored file by its URL. Returns False when nothing was removed."""
        if not url:
            return False

        key = self.key_from_url(url)
        if key is None:
            logger.warning(f"URL {url} doesn't match any known storage location")
            return False

        if not self.client:
            local_path = self.local_path(key)
            if os.path.exists(local_path):
                os.remove(local_path)
                return True
            return False

        try:
            self.client.delete_object(Bucket=self.bucket, Key=key)
            logger.info(f"Deleted '{key}' from bucket '{self.bucket}'")
            return True
        except (BotoCoreError, ClientError) as e:
            # Orphaned objects are harmless, the database row is already gone
            logger.error(f"Failed to delete '{key}' from R2: {e}")
            return False


# Global instance for app-wide usage
r2_storage = R2Storage()
