"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from photo_events.adapters.supabase_event_repository import SupabaseEventRepository
from photo_events.adapters.supabase_image_storage import SupabaseImageStorage
from photo_events.adapters.supabase_photo_repository import SupabasePhotoRepository
from photo_events.adapters.telegram_client import (
    HttpxTelegramClient,
    TelegramClient,
)
from photo_events.adapters.telegram_file_client import HttpxTelegramFileClient
from photo_events.config import Settings
from photo_events.services.conversations import ConversationService
from photo_events.services.events import EventService
from photo_events.services.images import ImageIngestionService
from photo_events.services.session_store import InMemoryConversationStore
from photo_events.services.uploads import UploadGatekeeper


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    telegram_client: TelegramClient
    conversation_service: ConversationService
    event_service: EventService
    upload_gatekeeper: UploadGatekeeper
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    event_repository = SupabaseEventRepository(supabase_client)
    photo_repository = SupabasePhotoRepository(supabase_client)
    image_storage = SupabaseImageStorage(
        client=supabase_client, bucket=resolved_settings.supabase_storage_bucket
    )
    telegram_client = HttpxTelegramClient.create(resolved_settings.telegram_bot_token)
    telegram_file_client = HttpxTelegramFileClient.create(
        resolved_settings.telegram_bot_token
    )
    event_service = EventService(
        event_repository=event_repository,
        photo_repository=photo_repository,
    )
    conversation_service = ConversationService(
        store=InMemoryConversationStore(
            ttl_seconds=resolved_settings.conversation_ttl_seconds
        ),
        event_service=event_service,
        image_ingestion=ImageIngestionService(
            file_client=telegram_file_client,
            storage=image_storage,
        ),
        frontend_url=resolved_settings.frontend_url,
    )
    upload_gatekeeper = UploadGatekeeper(
        event_repository=event_repository,
        photo_repository=photo_repository,
        storage=image_storage,
    )

    async def close_resources() -> None:
        await telegram_client.close()
        await telegram_file_client.close()

    return AppContainer(
        settings=resolved_settings,
        telegram_client=telegram_client,
        conversation_service=conversation_service,
        event_service=event_service,
        upload_gatekeeper=upload_gatekeeper,
        close_resources=close_resources,
    )
