"""Public event endpoints: gallery read and guest uploads."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, File, Request, UploadFile

from photo_events.api.schemas import EventViewOut, PhotoOut, UploadOut
from photo_events.domain.errors import (
    EventNotFoundError,
    InputValidationError,
    UploadsDisabledError,
)

if TYPE_CHECKING:
    from photo_events.containers import AppContainer

router = APIRouter(prefix="/api", tags=["events"])


@router.get("/events/{event_id}", response_model=EventViewOut)
async def get_event(event_id: str, request: Request) -> EventViewOut:
    """Return an event with its preloaded and guest galleries."""
    container: AppContainer = request.app.state.container
    view = container.event_service.get_event_view(event_id)
    return EventViewOut.model_validate(view)


@router.post("/upload/{event_id}", response_model=UploadOut)
async def upload_photo(
    event_id: str,
    request: Request,
    photo: UploadFile | None = File(default=None),
) -> UploadOut:
    """Accept a guest photo if the event's upload rules allow it."""
    container: AppContainer = request.app.state.container
    if photo is None:
        raise InputValidationError("No photo provided")
    content_type = photo.content_type or ""
    if not content_type.startswith("image/"):
        raise InputValidationError("Only image uploads are allowed")
    content = await photo.read()
    if not content:
        raise InputValidationError("Uploaded photo is empty")

    try:
        created = await container.upload_gatekeeper.submit(
            event_id=event_id,
            uploader_ip=uploader_address(
                request, container.settings.trust_forwarded_for
            ),
            user_agent=request.headers.get("user-agent"),
            content=content,
            content_type=content_type,
        )
    except EventNotFoundError as exc:
        raise UploadsDisabledError() from exc
    return UploadOut(photo=PhotoOut.model_validate(created))


def uploader_address(request: Request, trust_forwarded_for: bool) -> str:
    """Return the address used to key per-uploader quotas."""
    if trust_forwarded_for:
        forwarded = request.headers.get("x-forwarded-for")
        if forwarded:
            return forwarded.split(",")[0].strip()
    if request.client is None:
        return "unknown"
    return request.client.host
