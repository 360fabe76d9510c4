"""Domain models for event photos."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from uuid import UUID


class UploadType(Enum):
    """Origin of a photo."""

    PRELOADED = "preloaded"
    GUEST = "guest"


@dataclass(frozen=True)
class UploaderInfo:
    """Identity of an anonymous guest uploader."""

    ip: str
    user_agent: str | None


@dataclass(frozen=True)
class Photo:
    """A photo attached to an event."""

    id: UUID
    event_id: str
    storage_id: str
    url: str
    upload_type: UploadType
    uploaded_at: datetime
    uploader: UploaderInfo | None = None
    approved: bool = True
