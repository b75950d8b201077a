"""
Error taxonomy for the Image Store Sync service.

Every collaborator adapter translates the failures of its client library into
one of these types, so the audit and the relay branch on domain outcomes
rather than on library exceptions.
"""

from typing import Optional


class ImageSyncError(Exception):
    """Base exception for all service errors."""


class StoreUnavailable(ImageSyncError):
    """The metadata catalog or the blob store could not be read."""

    def __init__(self, store: str, message: str) -> None:
        self.store = store
        super().__init__(f"{store} unavailable: {message}")


class BlobNotFound(ImageSyncError):
    """A single-key blob operation referenced a key that does not exist."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"Blob not found: {key}")


class QueueUnavailable(ImageSyncError):
    """The notification queue could not be reached for receive or send."""


class DeleteFailure(ImageSyncError):
    """Acknowledging a received message failed."""

    def __init__(self, message: str, receipt_token: Optional[str] = None) -> None:
        self.receipt_token = receipt_token
        super().__init__(message)


class TokenExpired(DeleteFailure):
    """The receipt token is no longer valid (already used or visibility window lapsed)."""


class BrokerUnavailable(ImageSyncError):
    """The fanout broker rejected or could not accept a request."""


class DeserializationFailure(ImageSyncError):
    """A queue message body is not a valid upload notice."""

    def __init__(self, message: str, body: Optional[str] = None) -> None:
        self.body = body
        super().__init__(message)
