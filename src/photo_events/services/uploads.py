"""Admission control for guest photo uploads."""

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import uuid4

from photo_events.domain.errors import (
    EventNotFoundError,
    QuotaExceededError,
    UploadsDisabledError,
)
from photo_events.domain.events import EventStatus, ServiceType
from photo_events.domain.photos import Photo, UploaderInfo, UploadType
from photo_events.services.events import EventRepository, PhotoRepository
from photo_events.services.images import ImageStorage, guest_namespace
from photo_events.services.locks import KeyedLock

logger = logging.getLogger(__name__)


@dataclass
class UploadGatekeeper:
    """Decide whether a guest may add a photo to an event, and record it.

    Checks run in order and the first failure wins: the event must exist,
    be active, and not be album-only, and the uploader must be under the
    event's upload limit. The quota count, the storage transfer and the
    insert are serialized per ``(event_id, uploader_ip)`` so concurrent
    submissions from one uploader cannot overshoot the limit.
    """

    event_repository: EventRepository
    photo_repository: PhotoRepository
    storage: ImageStorage
    locks: KeyedLock = field(default_factory=KeyedLock)

    async def submit(
        self,
        event_id: str,
        uploader_ip: str,
        user_agent: str | None,
        content: bytes,
        content_type: str = "image/jpeg",
    ) -> Photo:
        """Admit and store a guest photo, or raise the rejection reason."""
        event = self.event_repository.get_event(event_id)
        if event is None:
            raise EventNotFoundError(event_id)
        if event.status is not EventStatus.ACTIVE:
            raise UploadsDisabledError()
        if event.service_type is ServiceType.VIEWALBUM:
            raise UploadsDisabledError()

        async with self.locks.hold((event_id, uploader_ip)):
            count = self.photo_repository.count_guest_photos(event_id, uploader_ip)
            if count >= event.upload_limit:
                logger.info(
                    "Guest upload quota reached",
                    extra={"event_id": event_id, "limit": event.upload_limit},
                )
                raise QuotaExceededError(event.upload_limit)

            image = await self.storage.upload(
                content, guest_namespace(event_id), content_type
            )
            photo = Photo(
                id=uuid4(),
                event_id=event_id,
                storage_id=image.storage_id,
                url=image.url,
                upload_type=UploadType.GUEST,
                uploaded_at=datetime.now(tz=UTC),
                uploader=UploaderInfo(ip=uploader_ip, user_agent=user_agent),
                approved=True,
            )
            return self.photo_repository.create_photo(photo)
