"""Domain models for photo events."""

import secrets
import string
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

WELCOME_TEXT_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 200
UPLOAD_LIMIT_MIN = 1
UPLOAD_LIMIT_MAX = 20
DEFAULT_UPLOAD_LIMIT = 5

_EVENT_ID_ALPHABET = string.ascii_uppercase + string.digits


class ServiceType(Enum):
    """Controls whether guests can view the album, upload, or both."""

    BOTH = "both"
    VIEWALBUM = "viewalbum"
    UPLOADPICS = "uploadpics"


class EventStatus(Enum):
    """Lifecycle status of an event."""

    ACTIVE = "active"
    DISABLED = "disabled"


@dataclass(frozen=True)
class ImageRef:
    """Reference to an image held in object storage."""

    storage_id: str
    url: str


@dataclass(frozen=True)
class PreloadedImage:
    """Organizer-supplied image attached to an event at creation."""

    storage_id: str
    url: str
    uploaded_at: datetime


@dataclass(frozen=True)
class Event:
    """A persisted photo event."""

    event_id: str
    welcome_text: str
    description: str
    background_image: ImageRef | None
    service_type: ServiceType
    upload_limit: int
    preloaded_photos: tuple[PreloadedImage, ...]
    created_by: str
    status: EventStatus
    created_at: datetime

    @property
    def upload_enabled(self) -> bool:
        """Return true when guests may contribute photos."""
        return (
            self.status is EventStatus.ACTIVE
            and self.service_type is not ServiceType.VIEWALBUM
        )


@dataclass(frozen=True)
class EventDraft:
    """Event fields collected so far during a creation conversation."""

    event_id: str | None = None
    created_by: str | None = None
    welcome_text: str | None = None
    description: str | None = None
    background_image: ImageRef | None = None
    service_type: ServiceType = ServiceType.BOTH
    upload_limit: int = DEFAULT_UPLOAD_LIMIT
    preloaded_photos: tuple[PreloadedImage, ...] = field(default_factory=tuple)


def generate_event_id() -> str:
    """Return a short, shareable event identifier like ``EVT_7K2M9QX4B``."""
    suffix = "".join(secrets.choice(_EVENT_ID_ALPHABET) for _ in range(9))
    return f"EVT_{suffix}"
