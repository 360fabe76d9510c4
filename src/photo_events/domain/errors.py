"""Errors raised by photo event services."""


class PhotoEventError(Exception):
    """Base error carrying a user-facing message and an HTTP status."""

    status_code: int = 400

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InputValidationError(PhotoEventError):
    """Input failed validation."""


class EventNotFoundError(PhotoEventError):
    """No event exists for the given id."""

    status_code = 404

    def __init__(self, event_id: str) -> None:
        super().__init__("Event not found")
        self.event_id = event_id


class UploadsDisabledError(PhotoEventError):
    """The event does not accept guest uploads."""

    def __init__(self) -> None:
        super().__init__("Uploads not allowed")


class QuotaExceededError(PhotoEventError):
    """The uploader has reached the event's upload limit."""

    def __init__(self, upload_limit: int) -> None:
        super().__init__("Upload limit reached")
        self.upload_limit = upload_limit


class StorageFailureError(PhotoEventError):
    """A database or object storage operation failed."""

    status_code = 500


class PreloadedPhotosError(StorageFailureError):
    """The event row was stored but its preloaded photos were not."""

    def __init__(self, event_id: str) -> None:
        super().__init__("Preloaded photos could not be saved")
        self.event_id = event_id
