"""ASGI entrypoint for the photo events API."""

from photo_events.api.app import create_app
from photo_events.containers import build_container

app = create_app(build_container())
