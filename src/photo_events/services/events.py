"""Event persistence ports and read-side queries."""

import logging
from dataclasses import dataclass, replace
from typing import Protocol
from uuid import uuid4

from photo_events.domain.errors import EventNotFoundError, PreloadedPhotosError
from photo_events.domain.events import Event, EventStatus
from photo_events.domain.photos import Photo, UploadType

logger = logging.getLogger(__name__)


class EventRepository(Protocol):
    """Persistence interface for events."""

    def create_event(self, event: Event) -> Event:
        """Insert an event; fails if the event id is already taken."""

    def get_event(self, event_id: str) -> Event | None:
        """Return an event by id, if present."""

    def update_status(self, event_id: str, status: EventStatus) -> None:
        """Set the status of an event."""


class PhotoRepository(Protocol):
    """Persistence interface for event photos."""

    def create_photo(self, photo: Photo) -> Photo:
        """Insert a photo and return it."""

    def create_photos(self, photos: list[Photo]) -> list[Photo]:
        """Insert several photos in one batch."""

    def count_guest_photos(self, event_id: str, uploader_ip: str) -> int:
        """Count guest photos contributed to an event by one uploader."""

    def list_photos(
        self, event_id: str, upload_type: UploadType, approved_only: bool = False
    ) -> list[Photo]:
        """Return photos of one type for an event, newest first."""


@dataclass(frozen=True)
class EventView:
    """Public view of an event and its galleries."""

    event: Event
    preloaded_photos: list[Photo]
    guest_photos: list[Photo]
    upload_enabled: bool


@dataclass
class EventService:
    """Read access to events plus the organizer disable action."""

    event_repository: EventRepository
    photo_repository: PhotoRepository

    def get_event(self, event_id: str) -> Event | None:
        """Return an event by id, if present."""
        return self.event_repository.get_event(event_id)

    def get_event_view(self, event_id: str) -> EventView:
        """Return the event with its preloaded and approved guest photos."""
        event = self.event_repository.get_event(event_id)
        if event is None:
            raise EventNotFoundError(event_id)
        preloaded = self.photo_repository.list_photos(
            event_id, UploadType.PRELOADED
        )
        guests = self.photo_repository.list_photos(
            event_id, UploadType.GUEST, approved_only=True
        )
        return EventView(
            event=event,
            preloaded_photos=preloaded,
            guest_photos=guests,
            upload_enabled=event.upload_enabled,
        )

    def create_event(self, event: Event) -> Event:
        """Persist a new event, then one preloaded photo per attached image."""
        created = self.event_repository.create_event(event)
        photos = [
            Photo(
                id=uuid4(),
                event_id=created.event_id,
                storage_id=image.storage_id,
                url=image.url,
                upload_type=UploadType.PRELOADED,
                uploaded_at=image.uploaded_at,
            )
            for image in event.preloaded_photos
        ]
        if photos:
            try:
                self.photo_repository.create_photos(photos)
            except Exception as exc:
                logger.exception(
                    "Event created without its preloaded photos",
                    extra={"event_id": created.event_id, "preloaded": len(photos)},
                )
                raise PreloadedPhotosError(created.event_id) from exc
        logger.info(
            "Event created",
            extra={"event_id": created.event_id, "preloaded": len(photos)},
        )
        return created

    def disable_event(self, event_id: str) -> Event:
        """Stop guest uploads for an event."""
        event = self.event_repository.get_event(event_id)
        if event is None:
            raise EventNotFoundError(event_id)
        self.event_repository.update_status(event_id, EventStatus.DISABLED)
        logger.info("Event disabled", extra={"event_id": event_id})
        return replace(event, status=EventStatus.DISABLED)
