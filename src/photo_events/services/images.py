"""Moving images from Telegram into object storage."""

from dataclasses import dataclass
from typing import Protocol

from photo_events.adapters.telegram_file_client import TelegramFileClient
from photo_events.domain.events import ImageRef

BACKGROUND_NAMESPACE = "events/backgrounds"
PRELOADED_NAMESPACE = "events/preloaded"


def guest_namespace(event_id: str) -> str:
    """Return the storage namespace for guest photos of an event."""
    return f"events/{event_id}"


class ImageStorage(Protocol):
    """Interface for durable object storage."""

    async def upload(
        self, content: bytes, namespace: str, content_type: str = "image/jpeg"
    ) -> ImageRef:
        """Store image bytes under a namespace and return a reference."""


@dataclass
class ImageIngestionService:
    """Copy Telegram photos into object storage."""

    file_client: TelegramFileClient
    storage: ImageStorage

    async def ingest(self, file_id: str, namespace: str) -> ImageRef:
        """Download a Telegram photo and upload it under ``namespace``."""
        content = await self.file_client.download_file_bytes(file_id)
        return await self.storage.upload(content, namespace)
