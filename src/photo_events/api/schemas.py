"""Response models for the public event API."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from photo_events.domain.events import EventStatus, ServiceType
from photo_events.domain.photos import UploadType


class _ApiModel(BaseModel):
    """Camel-cased JSON built from domain dataclasses."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ImageRefOut(_ApiModel):
    """Stored image reference."""

    storage_id: str
    url: str


class PreloadedImageOut(_ApiModel):
    """Image attached to an event by its organizer."""

    storage_id: str
    url: str
    uploaded_at: datetime


class EventOut(_ApiModel):
    """Public event fields."""

    event_id: str
    welcome_text: str
    description: str
    background_image: ImageRefOut | None
    service_type: ServiceType
    upload_limit: int
    preloaded_photos: list[PreloadedImageOut]
    created_by: str
    status: EventStatus
    created_at: datetime


class PhotoOut(_ApiModel):
    """Public photo fields; uploader identity is never exposed."""

    id: UUID
    event_id: str
    storage_id: str
    url: str
    upload_type: UploadType
    approved: bool
    uploaded_at: datetime


class EventViewOut(_ApiModel):
    """Event with its galleries."""

    event: EventOut
    preloaded_photos: list[PhotoOut]
    guest_photos: list[PhotoOut]
    upload_enabled: bool


class UploadOut(_ApiModel):
    """Result of an accepted guest upload."""

    success: bool = True
    photo: PhotoOut
