"""Supabase-backed event repository."""

from dataclasses import dataclass
from datetime import datetime

from supabase import Client

from photo_events.domain.errors import StorageFailureError
from photo_events.domain.events import (
    Event,
    EventStatus,
    ImageRef,
    PreloadedImage,
    ServiceType,
)
from photo_events.services.events import EventRepository

_COLUMNS = (
    "event_id, welcome_text, description, background_image, service_type, "
    "upload_limit, preloaded_photos, created_by, status, created_at"
)


@dataclass
class SupabaseEventRepository(EventRepository):
    """Supabase implementation for events.

    The ``events`` table carries a unique constraint on ``event_id``; an
    insert with a duplicate id fails rather than overwriting.
    """

    client: Client

    def create_event(self, event: Event) -> Event:
        """Insert an event row and return the stored event."""
        response = self.client.table("events").insert(_to_row(event)).execute()
        if not response.data:
            raise StorageFailureError("Failed to create event")
        return _from_row(response.data[0])

    def get_event(self, event_id: str) -> Event | None:
        """Return an event by its public id."""
        response = (
            self.client.table("events")
            .select(_COLUMNS)
            .eq("event_id", event_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _from_row(response.data[0])

    def update_status(self, event_id: str, status: EventStatus) -> None:
        """Update the status column of an event."""
        response = (
            self.client.table("events")
            .update({"status": status.value})
            .eq("event_id", event_id)
            .execute()
        )
        if not response.data:
            raise StorageFailureError("Failed to update event status")


def _to_row(event: Event) -> dict[str, object]:
    background = event.background_image
    return {
        "event_id": event.event_id,
        "welcome_text": event.welcome_text,
        "description": event.description,
        "background_image": (
            {"storage_id": background.storage_id, "url": background.url}
            if background
            else None
        ),
        "service_type": event.service_type.value,
        "upload_limit": event.upload_limit,
        "preloaded_photos": [
            {
                "storage_id": photo.storage_id,
                "url": photo.url,
                "uploaded_at": photo.uploaded_at.isoformat(),
            }
            for photo in event.preloaded_photos
        ],
        "created_by": event.created_by,
        "status": event.status.value,
        "created_at": event.created_at.isoformat(),
    }


def _from_row(row: dict[str, object]) -> Event:
    background = row.get("background_image")
    preloaded = row.get("preloaded_photos") or []
    return Event(
        event_id=str(row["event_id"]),
        welcome_text=str(row["welcome_text"]),
        description=str(row["description"]),
        background_image=(
            ImageRef(storage_id=background["storage_id"], url=background["url"])
            if isinstance(background, dict)
            else None
        ),
        service_type=ServiceType(row["service_type"]),
        upload_limit=int(row["upload_limit"]),
        preloaded_photos=tuple(
            PreloadedImage(
                storage_id=item["storage_id"],
                url=item["url"],
                uploaded_at=datetime.fromisoformat(item["uploaded_at"]),
            )
            for item in preloaded
            if isinstance(item, dict)
        ),
        created_by=str(row["created_by"]),
        status=EventStatus(row["status"]),
        created_at=datetime.fromisoformat(str(row["created_at"])),
    )
