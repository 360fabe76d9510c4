"""Conversation state machine for creating photo events over Telegram."""

import logging
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from typing import assert_never

from photo_events.domain.conversations import ConversationSession, ConversationStep
from photo_events.domain.errors import (
    EventNotFoundError,
    InputValidationError,
    PreloadedPhotosError,
)
from photo_events.domain.events import (
    DESCRIPTION_MAX_LENGTH,
    UPLOAD_LIMIT_MAX,
    UPLOAD_LIMIT_MIN,
    WELCOME_TEXT_MAX_LENGTH,
    Event,
    EventDraft,
    EventStatus,
    PreloadedImage,
    ServiceType,
    generate_event_id,
)
from photo_events.services.events import EventService
from photo_events.services.images import (
    BACKGROUND_NAMESPACE,
    PRELOADED_NAMESPACE,
    ImageIngestionService,
)
from photo_events.services.locks import KeyedLock
from photo_events.services.session_store import ConversationStore

logger = logging.getLogger(__name__)

_STEP_PROMPTS: dict[ConversationStep, str] = {
    ConversationStep.WELCOME_TEXT: (
        f"Enter a welcome text (max {WELCOME_TEXT_MAX_LENGTH} chars):"
    ),
    ConversationStep.DESCRIPTION: (
        f"Enter a description (max {DESCRIPTION_MAX_LENGTH} chars):"
    ),
    ConversationStep.BACKGROUND_IMAGE: "Send a background image:",
    ConversationStep.SERVICE_TYPE: "Choose: /both, /viewalbum, or /uploadpics",
    ConversationStep.UPLOAD_LIMIT: (
        f"Enter the upload limit per guest ({UPLOAD_LIMIT_MIN}-{UPLOAD_LIMIT_MAX}):"
    ),
    ConversationStep.PRELOADED_PHOTOS: (
        "Send photos to preload (type /done when finished):"
    ),
    ConversationStep.EVENT_ID_FOR_DISABLE: "Enter Event ID to disable uploads:",
}


@dataclass(frozen=True)
class SessionPrompt:
    """Represents the next user-facing reply."""

    text: str


@dataclass
class ConversationService:
    """Walk an organizer through event creation one message at a time.

    Each organizer has at most one session. Every inbound message is
    handled under a per-user lock so exactly one step transition happens
    per message. Invalid input re-prompts and leaves the session as it was.
    """

    store: ConversationStore
    event_service: EventService
    image_ingestion: ImageIngestionService
    frontend_url: str
    locks: KeyedLock = field(default_factory=KeyedLock)

    async def start(self, user_id: str) -> SessionPrompt:
        """Begin a new event, discarding any session the user already had."""
        async with self.locks.hold(user_id):
            event_id = generate_event_id()
            self.store.save(
                ConversationSession(
                    user_id=user_id,
                    step=ConversationStep.WELCOME_TEXT,
                    draft=EventDraft(event_id=event_id, created_by=user_id),
                    updated_at=_now(),
                )
            )
        return SessionPrompt(
            text=(
                f"Event created! ID: {event_id}\n"
                f"{_STEP_PROMPTS[ConversationStep.WELCOME_TEXT]}"
            )
        )

    async def start_disable(self, user_id: str) -> SessionPrompt:
        """Ask for the id of an event whose uploads should be disabled."""
        async with self.locks.hold(user_id):
            self.store.save(
                ConversationSession(
                    user_id=user_id,
                    step=ConversationStep.EVENT_ID_FOR_DISABLE,
                    draft=EventDraft(created_by=user_id),
                    updated_at=_now(),
                )
            )
        return SessionPrompt(text=_STEP_PROMPTS[ConversationStep.EVENT_ID_FOR_DISABLE])

    async def cancel(self, user_id: str) -> SessionPrompt | None:
        """Drop the user's session, if any."""
        async with self.locks.hold(user_id):
            if self.store.get(user_id) is None:
                return None
            self.store.delete(user_id)
        return SessionPrompt(text="Cancelled. Send /start to create a new event.")

    async def handle_text(self, user_id: str, text: str) -> SessionPrompt | None:
        """Apply a text reply to the current step."""
        async with self.locks.hold(user_id):
            session = self.store.get(user_id)
            if session is None:
                return None
            match session.step:
                case ConversationStep.WELCOME_TEXT:
                    return self._set_welcome_text(session, text)
                case ConversationStep.DESCRIPTION:
                    return self._set_description(session, text)
                case ConversationStep.BACKGROUND_IMAGE:
                    return SessionPrompt(text="Please send an image.")
                case ConversationStep.SERVICE_TYPE:
                    return self._set_service_type(session, text)
                case ConversationStep.UPLOAD_LIMIT:
                    return self._set_upload_limit(session, text)
                case ConversationStep.PRELOADED_PHOTOS:
                    return SessionPrompt(text="Send a photo, or /done to finish.")
                case ConversationStep.EVENT_ID_FOR_DISABLE:
                    return self._disable_event(session, text)
                case unreachable:
                    assert_never(unreachable)

    async def handle_image(self, user_id: str, file_id: str) -> SessionPrompt | None:
        """Store an inbound photo as background or preloaded image."""
        async with self.locks.hold(user_id):
            session = self.store.get(user_id)
            if session is None:
                return None
            if session.step is ConversationStep.BACKGROUND_IMAGE:
                namespace = BACKGROUND_NAMESPACE
            elif session.step is ConversationStep.PRELOADED_PHOTOS:
                namespace = PRELOADED_NAMESPACE
            else:
                return SessionPrompt(
                    text=f"No image needed here. {_STEP_PROMPTS[session.step]}"
                )

            try:
                image = await self.image_ingestion.ingest(file_id, namespace)
            except Exception:
                logger.exception(
                    "Photo upload failed",
                    extra={"user_id": user_id, "step": session.step.value},
                )
                return SessionPrompt(text="Failed to upload image. Please resend it.")

            if session.step is ConversationStep.BACKGROUND_IMAGE:
                self._advance(
                    session,
                    ConversationStep.SERVICE_TYPE,
                    background_image=image,
                )
                return SessionPrompt(
                    text=(
                        "Background set! "
                        f"{_STEP_PROMPTS[ConversationStep.SERVICE_TYPE]}"
                    )
                )

            preloaded = PreloadedImage(
                storage_id=image.storage_id, url=image.url, uploaded_at=_now()
            )
            self._advance(
                session,
                ConversationStep.PRELOADED_PHOTOS,
                preloaded_photos=(*session.draft.preloaded_photos, preloaded),
            )
            return SessionPrompt(text="Photo added! Send more or /done")

    async def finish(self, user_id: str) -> SessionPrompt | None:
        """Persist the drafted event; a no-op outside the preloaded step."""
        async with self.locks.hold(user_id):
            session = self.store.get(user_id)
            if session is None:
                return None
            if session.step is not ConversationStep.PRELOADED_PHOTOS:
                return None
            self.store.delete(user_id)
            try:
                event = self.event_service.create_event(_build_event(session.draft))
            except PreloadedPhotosError as exc:
                return SessionPrompt(
                    text=(
                        "Event created, but the preloaded photos could not be "
                        "saved.\n"
                        f"ID: {exc.event_id}\n"
                        f"URL: {self._event_url(exc.event_id)}\n"
                        "Use /disable to stop uploads."
                    )
                )
            except Exception:
                logger.exception(
                    "Event creation failed",
                    extra={"user_id": user_id, "event_id": session.draft.event_id},
                )
                return SessionPrompt(
                    text="Failed to create event. Send /start to try again."
                )
        return SessionPrompt(
            text=(
                "Event Complete!\n"
                f"ID: {event.event_id}\n"
                f"URL: {self._event_url(event.event_id)}\n"
                "Use /disable to stop uploads."
            )
        )

    def _event_url(self, event_id: str) -> str:
        return f"{self.frontend_url.rstrip('/')}/event/{event_id}"

    def _set_welcome_text(
        self, session: ConversationSession, text: str
    ) -> SessionPrompt:
        if not text.strip() or len(text) > WELCOME_TEXT_MAX_LENGTH:
            return SessionPrompt(
                text=f"Too long or empty! Max {WELCOME_TEXT_MAX_LENGTH} chars:"
            )
        self._advance(session, ConversationStep.DESCRIPTION, welcome_text=text)
        return SessionPrompt(
            text=f"Saved. {_STEP_PROMPTS[ConversationStep.DESCRIPTION]}"
        )

    def _set_description(
        self, session: ConversationSession, text: str
    ) -> SessionPrompt:
        if not text.strip() or len(text) > DESCRIPTION_MAX_LENGTH:
            return SessionPrompt(
                text=f"Too long or empty! Max {DESCRIPTION_MAX_LENGTH} chars:"
            )
        self._advance(session, ConversationStep.BACKGROUND_IMAGE, description=text)
        return SessionPrompt(
            text=f"Saved. {_STEP_PROMPTS[ConversationStep.BACKGROUND_IMAGE]}"
        )

    def _set_service_type(
        self, session: ConversationSession, text: str
    ) -> SessionPrompt:
        service_type = _parse_service_type(text)
        if service_type is None:
            return SessionPrompt(text="Use /both, /viewalbum, or /uploadpics")
        self._advance(session, ConversationStep.UPLOAD_LIMIT, service_type=service_type)
        return SessionPrompt(
            text=f"Saved. {_STEP_PROMPTS[ConversationStep.UPLOAD_LIMIT]}"
        )

    def _set_upload_limit(
        self, session: ConversationSession, text: str
    ) -> SessionPrompt:
        upload_limit = _parse_upload_limit(text)
        if upload_limit is None:
            return SessionPrompt(
                text=f"Enter a number {UPLOAD_LIMIT_MIN}-{UPLOAD_LIMIT_MAX}:"
            )
        self._advance(
            session, ConversationStep.PRELOADED_PHOTOS, upload_limit=upload_limit
        )
        return SessionPrompt(
            text=f"Saved. {_STEP_PROMPTS[ConversationStep.PRELOADED_PHOTOS]}"
        )

    def _disable_event(
        self, session: ConversationSession, text: str
    ) -> SessionPrompt:
        event_id = text.strip()
        try:
            self.event_service.disable_event(event_id)
        except EventNotFoundError:
            return SessionPrompt(text="Event not found. Enter a valid Event ID:")
        except Exception:
            logger.exception(
                "Disable failed",
                extra={"user_id": session.user_id, "event_id": event_id},
            )
            return SessionPrompt(text="Failed to disable event. Please try again.")
        self.store.delete(session.user_id)
        return SessionPrompt(text=f"Uploads disabled for event: {event_id}")

    def _advance(
        self,
        session: ConversationSession,
        step: ConversationStep,
        **changes: object,
    ) -> None:
        self.store.save(
            replace(
                session,
                step=step,
                draft=replace(session.draft, **changes),
                updated_at=_now(),
            )
        )


def _now() -> datetime:
    return datetime.now(tz=UTC)


def _parse_service_type(text: str) -> ServiceType | None:
    """Parse ``/both``, ``both`` or ``/both@SomeBot`` into a service type."""
    token = text.strip().split("@", maxsplit=1)[0].removeprefix("/").lower()
    try:
        return ServiceType(token)
    except ValueError:
        return None


def _parse_upload_limit(text: str) -> int | None:
    cleaned = text.strip()
    if not (cleaned.isascii() and cleaned.isdigit()):
        return None
    value = int(cleaned)
    if UPLOAD_LIMIT_MIN <= value <= UPLOAD_LIMIT_MAX:
        return value
    return None


def _build_event(draft: EventDraft) -> Event:
    if (
        draft.event_id is None
        or draft.created_by is None
        or draft.welcome_text is None
        or draft.description is None
    ):
        raise InputValidationError("Event draft is incomplete")
    return Event(
        event_id=draft.event_id,
        welcome_text=draft.welcome_text,
        description=draft.description,
        background_image=draft.background_image,
        service_type=draft.service_type,
        upload_limit=draft.upload_limit,
        preloaded_photos=draft.preloaded_photos,
        created_by=draft.created_by,
        status=EventStatus.ACTIVE,
        created_at=_now(),
    )
