import logging
import mimetypes
import os
from pathlib import Path
from typing import Dict, NamedTuple, Optional

from botocore.exceptions import BotoCoreError, ClientError
from fastapi import HTTPException, UploadFile, status
from starlette.responses import FileResponse, StreamingResponse

from linkup.core.storage import R2Storage, r2_storage

logger = logging.getLogger(__name__)

IMAGE = "image"
VIDEO = "video"

PROFILE_IMAGE_TYPES: Dict[str, str] = {".jpg": IMAGE, ".jpeg": IMAGE, ".png": IMAGE, ".webp": IMAGE}
POST_MEDIA_TYPES: Dict[str, str] = {
    **PROFILE_IMAGE_TYPES,
    ".gif": IMAGE,
    ".mp4": VIDEO,
    ".mov": VIDEO,
    ".webm": VIDEO,
}
STORY_MEDIA_TYPES: Dict[str, str] = {**PROFILE_IMAGE_TYPES, ".mp4": VIDEO, ".mov": VIDEO}


class StoredMedia(NamedTuple):
    url: str
    kind: str


def _human_size(size: int) -> str:
    return f"{size // (1024 * 1024)}MB"


class MediaService:
    def __init__(self, storage: R2Storage):
        self.storage = storage

    async def upload_media(
        self,
        file: UploadFile,
        prefix: str,
        allowed_types: Dict[str, str],
        max_size: int,
    ) -> StoredMedia:
        """Check type and size of an uploaded file, then store it"""
        file_extension = os.path.splitext(file.filename or "")[1].lower()
        kind = allowed_types.get(file_extension)
        if kind is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Unsupported file format. Please use one of: {', '.join(sorted(allowed_types))}"
            )

        content = await file.read()
        await file.seek(0)
        if not content:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Uploaded file is empty")
        if len(content) > max_size:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"File too large. Maximum size is {_human_size(max_size)}"
            )

        url = await self.storage.upload_file(file, prefix)
        return StoredMedia(url=url, kind=kind)

    async def upload_optional(
        self,
        file: Optional[UploadFile],
        prefix: str,
        allowed_types: Dict[str, str],
        max_size: int,
    ) -> Optional[StoredMedia]:
        if file is None or not file.filename:
            return None
        return await self.upload_media(file, prefix, allowed_types, max_size)

    def delete_media(self, url: Optional[str]) -> bool:
        return self.storage.delete_file(url)

    def get_media(self, path: str):
        """Serve a stored file from R2, falling back to the local upload directory"""
        if ".." in Path(path).parts:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="File not found")

        if self.storage.client:
            try:
                obj = self.storage.client.get_object(Bucket=self.storage.bucket, Key=path)
                return StreamingResponse(
                    obj["Body"].iter_chunks(),
                    media_type=obj.get("ContentType", "application/octet-stream"),
                    headers={"Cache-Control": "public, max-age=86400"},
                )
            except (BotoCoreError, ClientError) as e:
                logger.warning(f"Failed to retrieve file {path} from R2: {e}. Falling back to local storage.")

        file_path = Path(self.storage.local_path(path))
        if not file_path.is_file():
            logger.info(f"File {path} not found in local storage")
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="File not found")

        content_type = mimetypes.guess_type(file_path.name)[0] or "application/octet-stream"
        return FileResponse(
            file_path,
            media_type=content_type,
            headers={"Cache-Control": "public, max-age=86400"},
        )


def get_media_service() -> MediaService:
    return MediaService(r2_storage)

