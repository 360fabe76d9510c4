"""Domain models for event creation conversations."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from photo_events.domain.events import EventDraft


class ConversationStep(Enum):
    """Steps of the organizer conversation, in creation order."""

    WELCOME_TEXT = "welcomeText"
    DESCRIPTION = "description"
    BACKGROUND_IMAGE = "backgroundImage"
    SERVICE_TYPE = "serviceType"
    UPLOAD_LIMIT = "uploadLimit"
    PRELOADED_PHOTOS = "preloadedPhotos"
    EVENT_ID_FOR_DISABLE = "eventIdForDisable"


@dataclass(frozen=True)
class ConversationSession:
    """Conversation state for a single organizer."""

    user_id: str
    step: ConversationStep
    draft: EventDraft
    updated_at: datetime
