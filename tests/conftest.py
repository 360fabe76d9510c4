"""Shared test fixtures."""

import pytest

from photo_events.config import Settings
from photo_events.containers import AppContainer
from photo_events.services.conversations import ConversationService
from photo_events.services.events import EventService
from photo_events.services.images import ImageIngestionService
from photo_events.services.session_store import InMemoryConversationStore
from photo_events.services.uploads import UploadGatekeeper
from tests.fakes import (
    FakeImageStorage,
    FakeTelegramClient,
    FakeTelegramFileClient,
    InMemoryEventRepository,
    InMemoryPhotoRepository,
)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        telegram_bot_token="test-token",
        supabase_url="https://example.supabase.co",
        supabase_service_key="header.payload.signature",
        frontend_url="https://photos.example.com",
    )


@pytest.fixture
def event_repository() -> InMemoryEventRepository:
    return InMemoryEventRepository()


@pytest.fixture
def photo_repository() -> InMemoryPhotoRepository:
    return InMemoryPhotoRepository()


@pytest.fixture
def image_storage() -> FakeImageStorage:
    return FakeImageStorage()


@pytest.fixture
def file_client() -> FakeTelegramFileClient:
    return FakeTelegramFileClient()


@pytest.fixture
def telegram_client() -> FakeTelegramClient:
    return FakeTelegramClient()


@pytest.fixture
def event_service(
    event_repository: InMemoryEventRepository,
    photo_repository: InMemoryPhotoRepository,
) -> EventService:
    return EventService(
        event_repository=event_repository, photo_repository=photo_repository
    )


@pytest.fixture
def conversation_service(
    event_service: EventService,
    image_storage: FakeImageStorage,
    file_client: FakeTelegramFileClient,
    settings: Settings,
) -> ConversationService:
    return ConversationService(
        store=InMemoryConversationStore(),
        event_service=event_service,
        image_ingestion=ImageIngestionService(
            file_client=file_client, storage=image_storage
        ),
        frontend_url=settings.frontend_url,
    )


@pytest.fixture
def upload_gatekeeper(
    event_repository: InMemoryEventRepository,
    photo_repository: InMemoryPhotoRepository,
    image_storage: FakeImageStorage,
) -> UploadGatekeeper:
    return UploadGatekeeper(
        event_repository=event_repository,
        photo_repository=photo_repository,
        storage=image_storage,
    )


@pytest.fixture
def container(
    settings: Settings,
    telegram_client: FakeTelegramClient,
    conversation_service: ConversationService,
    event_service: EventService,
    upload_gatekeeper: UploadGatekeeper,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        telegram_client=telegram_client,
        conversation_service=conversation_service,
        event_service=event_service,
        upload_gatekeeper=upload_gatekeeper,
        close_resources=close_resources,
    )
