"""Supabase-backed photo repository."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from photo_events.domain.errors import StorageFailureError
from photo_events.domain.photos import Photo, UploaderInfo, UploadType
from photo_events.services.events import PhotoRepository

_COLUMNS = (
    "id, event_id, storage_id, url, upload_type, uploader_ip, "
    "uploader_user_agent, approved, uploaded_at"
)


@dataclass
class SupabasePhotoRepository(PhotoRepository):
    """Supabase implementation for event photos."""

    client: Client

    def create_photo(self, photo: Photo) -> Photo:
        """Insert a photo row and return the stored photo."""
        response = self.client.table("photos").insert(_to_row(photo)).execute()
        if not response.data:
            raise StorageFailureError("Failed to save photo")
        return _from_row(response.data[0])

    def create_photos(self, photos: list[Photo]) -> list[Photo]:
        """Insert photo rows in one request."""
        if not photos:
            return []
        response = (
            self.client.table("photos")
            .insert([_to_row(photo) for photo in photos])
            .execute()
        )
        if not response.data:
            raise StorageFailureError("Failed to save photos")
        return [_from_row(row) for row in response.data]

    def count_guest_photos(self, event_id: str, uploader_ip: str) -> int:
        """Count guest photos uploaded to an event from one address."""
        response = (
            self.client.table("photos")
            .select("id", count="exact")
            .eq("event_id", event_id)
            .eq("upload_type", UploadType.GUEST.value)
            .eq("uploader_ip", uploader_ip)
            .execute()
        )
        return response.count or 0

    def list_photos(
        self, event_id: str, upload_type: UploadType, approved_only: bool = False
    ) -> list[Photo]:
        """Return photos for an event ordered newest first."""
        query = (
            self.client.table("photos")
            .select(_COLUMNS)
            .eq("event_id", event_id)
            .eq("upload_type", upload_type.value)
        )
        if approved_only:
            query = query.eq("approved", True)
        response = query.order("uploaded_at", desc=True).execute()
        return [_from_row(row) for row in response.data or []]


def _to_row(photo: Photo) -> dict[str, object]:
    return {
        "id": str(photo.id),
        "event_id": photo.event_id,
        "storage_id": photo.storage_id,
        "url": photo.url,
        "upload_type": photo.upload_type.value,
        "uploader_ip": photo.uploader.ip if photo.uploader else None,
        "uploader_user_agent": photo.uploader.user_agent if photo.uploader else None,
        "approved": photo.approved,
        "uploaded_at": photo.uploaded_at.isoformat(),
    }


def _from_row(row: dict[str, object]) -> Photo:
    ip = row.get("uploader_ip")
    return Photo(
        id=UUID(str(row["id"])),
        event_id=str(row["event_id"]),
        storage_id=str(row["storage_id"]),
        url=str(row["url"]),
        upload_type=UploadType(row["upload_type"]),
        uploaded_at=datetime.fromisoformat(str(row["uploaded_at"])),
        uploader=(
            UploaderInfo(ip=str(ip), user_agent=row.get("uploader_user_agent"))
            if ip
            else None
        ),
        approved=bool(row.get("approved", True)),
    )
