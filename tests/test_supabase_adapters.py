"""Tests for Supabase adapter implementations."""

import asyncio
from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import uuid4

import pytest

from photo_events.adapters.supabase_event_repository import SupabaseEventRepository
from photo_events.adapters.supabase_image_storage import SupabaseImageStorage
from photo_events.adapters.supabase_photo_repository import SupabasePhotoRepository
from photo_events.domain.errors import StorageFailureError
from photo_events.domain.events import EventStatus, PreloadedImage, ServiceType
from photo_events.domain.photos import Photo, UploaderInfo, UploadType
from tests.fakes import make_event


@dataclass
class FakeResponse:
    data: list[dict[str, object]] | None
    count: int | None = None


@dataclass
class FakeTable:
    name: str
    response_queue: dict[str, list[list[dict[str, object]]]] = field(
        default_factory=lambda: {"select": [], "insert": [], "update": []}
    )
    count: int | None = None
    last_payload: object | None = None
    last_filters: list[tuple[str, object]] = field(default_factory=list)
    last_order: tuple[str, bool] | None = None

    def queue(self, action: str, data: list[dict[str, object]]) -> None:
        self.response_queue[action].append(data)

    def select(self, *_args, **_kwargs) -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "select"
        return self

    def insert(self, payload) -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "insert"
        self.last_payload = payload
        return self

    def update(self, payload) -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "update"
        self.last_payload = payload
        return self

    def eq(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append((column, value))
        return self

    def limit(self, _count: int) -> "FakeTable":
        return self

    def order(self, column: str, desc: bool = False) -> "FakeTable":
        self.last_order = (column, desc)
        return self

    def execute(self) -> FakeResponse:
        action = getattr(self, "_action", "select")
        queue = self.response_queue.get(action, [])
        data = queue.pop(0) if queue else []
        return FakeResponse(data=data, count=self.count)


@dataclass
class FakeBucket:
    uploads: list[tuple[str, bytes, dict[str, str]]] = field(default_factory=list)
    fail: bool = False

    def upload(self, path: str, file: bytes, file_options: dict[str, str]) -> None:
        if self.fail:
            raise RuntimeError("bucket unavailable")
        self.uploads.append((path, file, file_options))

    def get_public_url(self, path: str) -> str:
        return f"https://storage.test/{path}"


@dataclass
class FakeStorage:
    buckets: dict[str, FakeBucket] = field(default_factory=dict)

    def from_(self, bucket: str) -> FakeBucket:
        return self.buckets.setdefault(bucket, FakeBucket())


@dataclass
class FakeSupabaseClient:
    tables: dict[str, FakeTable] = field(default_factory=dict)
    storage: FakeStorage = field(default_factory=FakeStorage)

    def table(self, name: str) -> FakeTable:
        if name not in self.tables:
            self.tables[name] = FakeTable(name=name)
        return self.tables[name]


def _event_row(**overrides: object) -> dict[str, object]:
    row: dict[str, object] = {
        "event_id": "EVT_TEST00001",
        "welcome_text": "Welcome!",
        "description": "A party",
        "background_image": {"storage_id": "bg/1.jpg", "url": "https://cdn/bg.jpg"},
        "service_type": "uploadpics",
        "upload_limit": 3,
        "preloaded_photos": [
            {
                "storage_id": "p/1.jpg",
                "url": "https://cdn/p1.jpg",
                "uploaded_at": "2024-05-01T10:00:00+00:00",
            }
        ],
        "created_by": "42",
        "status": "active",
        "created_at": "2024-05-01T09:00:00.123456+00:00",
    }
    row.update(overrides)
    return row


def test_event_repository_insert_serializes_event() -> None:
    client = FakeSupabaseClient()
    events_table = client.table("events")
    events_table.queue("insert", [_event_row()])
    preloaded = PreloadedImage(
        storage_id="p/1.jpg",
        url="https://cdn/p1.jpg",
        uploaded_at=datetime(2024, 5, 1, 10, tzinfo=UTC),
    )

    created = SupabaseEventRepository(client).create_event(
        make_event(preloaded_photos=(preloaded,))
    )

    payload = events_table.last_payload
    assert isinstance(payload, dict)
    assert payload["service_type"] == "both"
    assert payload["status"] == "active"
    assert payload["background_image"] == {
        "storage_id": "bg/1.jpg",
        "url": "https://cdn/bg.jpg",
    }
    assert payload["preloaded_photos"][0]["storage_id"] == "p/1.jpg"
    assert created.service_type is ServiceType.UPLOADPICS
    assert isinstance(created.preloaded_photos, tuple)
    assert created.preloaded_photos[0].uploaded_at.hour == 10


def test_event_repository_insert_without_rows_fails() -> None:
    client = FakeSupabaseClient()

    with pytest.raises(StorageFailureError):
        SupabaseEventRepository(client).create_event(make_event())


def test_event_repository_get_and_missing() -> None:
    client = FakeSupabaseClient()
    events_table = client.table("events")
    events_table.queue("select", [_event_row(background_image=None, status="disabled")])
    repository = SupabaseEventRepository(client)

    event = repository.get_event("EVT_TEST00001")
    missing = repository.get_event("EVT_MISSING00")

    assert event is not None
    assert event.background_image is None
    assert event.status is EventStatus.DISABLED
    assert event.upload_limit == 3
    assert ("event_id", "EVT_TEST00001") in events_table.last_filters
    assert missing is None


def test_event_repository_update_status() -> None:
    client = FakeSupabaseClient()
    events_table = client.table("events")
    events_table.queue("update", [_event_row(status="disabled")])

    SupabaseEventRepository(client).update_status("EVT_TEST00001", EventStatus.DISABLED)

    assert events_table.last_payload == {"status": "disabled"}


def test_photo_repository_insert_and_list() -> None:
    client = FakeSupabaseClient()
    photos_table = client.table("photos")
    photo = Photo(
        id=uuid4(),
        event_id="EVT_TEST00001",
        storage_id="events/EVT_TEST00001/a.jpg",
        url="https://cdn/a.jpg",
        upload_type=UploadType.GUEST,
        uploaded_at=datetime(2024, 5, 1, 12, tzinfo=UTC),
        uploader=UploaderInfo(ip="10.0.0.1", user_agent="agent"),
    )
    row = {
        "id": str(photo.id),
        "event_id": photo.event_id,
        "storage_id": photo.storage_id,
        "url": photo.url,
        "upload_type": "guest",
        "uploader_ip": "10.0.0.1",
        "uploader_user_agent": "agent",
        "approved": True,
        "uploaded_at": "2024-05-01T12:00:00+00:00",
    }
    photos_table.queue("insert", [row])
    photos_table.queue("select", [row])
    repository = SupabasePhotoRepository(client)

    created = repository.create_photo(photo)
    listed = repository.list_photos(
        "EVT_TEST00001", UploadType.GUEST, approved_only=True
    )

    assert created == photo
    assert listed == [photo]
    assert ("approved", True) in photos_table.last_filters
    assert photos_table.last_order == ("uploaded_at", True)


def test_photo_repository_batch_insert_skips_empty() -> None:
    client = FakeSupabaseClient()

    assert SupabasePhotoRepository(client).create_photos([]) == []
    assert "photos" not in client.tables


def test_photo_repository_counts_guest_uploads() -> None:
    client = FakeSupabaseClient()
    photos_table = client.table("photos")
    photos_table.count = 4

    count = SupabasePhotoRepository(client).count_guest_photos(
        "EVT_TEST00001", "10.0.0.1"
    )

    assert count == 4
    assert ("upload_type", "guest") in photos_table.last_filters
    assert ("uploader_ip", "10.0.0.1") in photos_table.last_filters


def test_image_storage_uploads_under_namespace() -> None:
    client = FakeSupabaseClient()
    storage = SupabaseImageStorage(client=client, bucket="photo-events")

    image = asyncio.run(storage.upload(b"png-bytes", "events/backgrounds", "image/png"))

    path, content, options = client.storage.buckets["photo-events"].uploads[0]
    assert path.startswith("events/backgrounds/")
    assert path.endswith(".png")
    assert content == b"png-bytes"
    assert options == {"content-type": "image/png"}
    assert image.storage_id == path
    assert image.url == f"https://storage.test/{path}"


def test_image_storage_wraps_failures() -> None:
    client = FakeSupabaseClient()
    client.storage.from_("photo-events").fail = True
    storage = SupabaseImageStorage(client=client, bucket="photo-events")

    with pytest.raises(StorageFailureError):
        asyncio.run(storage.upload(b"jpeg", "events/EVT_TEST00001"))
