"""Supabase Storage implementation of image storage."""

import asyncio
import logging
from dataclasses import dataclass
from uuid import uuid4

from supabase import Client

from photo_events.domain.errors import StorageFailureError
from photo_events.domain.events import ImageRef
from photo_events.services.images import ImageStorage

logger = logging.getLogger(__name__)

_EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
    "image/gif": "gif",
    "image/heic": "heic",
}


@dataclass
class SupabaseImageStorage(ImageStorage):
    """Stores images in a Supabase Storage bucket with public URLs."""

    client: Client
    bucket: str

    async def upload(
        self, content: bytes, namespace: str, content_type: str = "image/jpeg"
    ) -> ImageRef:
        """Upload bytes to ``<namespace>/<uuid>.<ext>`` and return its reference."""
        extension = _EXTENSIONS.get(content_type, "jpg")
        path = f"{namespace}/{uuid4().hex}.{extension}"
        try:
            url = await asyncio.to_thread(
                self._upload_sync, path, content, content_type
            )
        except Exception as exc:
            logger.exception("Storage upload failed", extra={"path": path})
            raise StorageFailureError("Upload failed") from exc
        return ImageRef(storage_id=path, url=url)

    def _upload_sync(self, path: str, content: bytes, content_type: str) -> str:
        bucket = self.client.storage.from_(self.bucket)
        bucket.upload(
            path=path,
            file=content,
            file_options={"content-type": content_type},
        )
        return bucket.get_public_url(path)
