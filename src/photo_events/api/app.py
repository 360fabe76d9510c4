"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from photo_events.api.events import router as events_router
from photo_events.api.telegram_models import TelegramPhotoSize, TelegramUpdate
from photo_events.app_logging import configure_logging
from photo_events.config import parse_allowed_origins
from photo_events.containers import AppContainer
from photo_events.domain.errors import PhotoEventError
from photo_events.services.conversations import SessionPrompt
from photo_events.telegram_commands import (
    CHAT_MENU_BUTTON,
    BotCommand,
    parse_bot_command,
    telegram_commands,
)

_IDLE_PROMPT = SessionPrompt(text="Send /start to create an event.")


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        try:
            await app.state.container.telegram_client.set_my_commands(
                telegram_commands()
            )
            await app.state.container.telegram_client.set_chat_menu_button(
                CHAT_MENU_BUTTON
            )
        except Exception:
            logger.exception("Failed to sync Telegram bot commands")
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container
    app.add_middleware(
        CORSMiddleware,
        allow_origins=parse_allowed_origins(container.settings.cors_allowed_origins),
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(events_router)

    @app.exception_handler(PhotoEventError)
    async def photo_event_error_handler(
        request: Request, exc: PhotoEventError
    ) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error(
                "Request failed: %s",
                exc.message,
                extra={"path": request.url.path},
            )
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(Exception)
    async def unexpected_error_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        logger.exception(
            "Unhandled exception on %s %s", request.method, request.url.path
        )
        return JSONResponse(status_code=500, content={"error": "Server error"})

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok", "timestamp": datetime.now(tz=UTC).isoformat()}

    @app.post("/telegram/webhook")
    async def telegram_webhook(
        update: TelegramUpdate, request: Request
    ) -> dict[str, str]:
        """Feed a Telegram message into the organizer conversation."""
        state_container: AppContainer = request.app.state.container
        message = update.message
        if message is None or message.from_user is None:
            return {"status": "ok"}

        user_id = str(message.from_user.id)
        conversations = state_container.conversation_service
        command = parse_bot_command(message.text)
        prompt: SessionPrompt | None
        if command is BotCommand.START:
            prompt = await conversations.start(user_id)
        elif command is BotCommand.DONE:
            prompt = await conversations.finish(user_id)
        elif command is BotCommand.DISABLE:
            prompt = await conversations.start_disable(user_id)
        elif command is BotCommand.CANCEL:
            prompt = await conversations.cancel(user_id) or SessionPrompt(
                text="Nothing to cancel."
            )
        elif message.photo:
            photo = _select_largest_photo(message.photo)
            prompt = (
                await conversations.handle_image(user_id, photo.file_id)
                or _IDLE_PROMPT
            )
        elif message.text is not None:
            prompt = (
                await conversations.handle_text(user_id, message.text) or _IDLE_PROMPT
            )
        else:
            prompt = None

        # Telegram redelivers on non-2xx; the step has already advanced.
        if prompt is not None:
            try:
                await state_container.telegram_client.send_message(
                    chat_id=message.chat.id, text=prompt.text
                )
            except Exception:
                logger.exception(
                    "Failed to send Telegram reply",
                    extra={"user_id": user_id, "update_id": update.update_id},
                )
        return {"status": "ok"}

    return app


def _select_largest_photo(photos: list[TelegramPhotoSize]) -> TelegramPhotoSize:
    """Select the largest photo size from the Telegram payload."""
    return max(photos, key=lambda photo: (photo.width * photo.height))
