"""Errors raised by the notification fan-out and its collaborators."""

from __future__ import annotations


class NotificationError(RuntimeError):
    """Base class for notification delivery errors."""


class Unauthorized(NotificationError):
    """The caller is not allowed to fan out notifications."""


class InvalidArgument(NotificationError, ValueError):
    """Malformed input such as an empty title or a non-positive concurrency."""


class DirectoryFetchFailed(NotificationError):
    """The recipient directory could not be enumerated."""


class DeliveryFailed(NotificationError):
    """A per-recipient notification write failed."""

    def __init__(self, recipient_id: object, message: str | None = None) -> None:
        self.recipient_id = recipient_id
        super().__init__(message or f"Delivery to recipient {recipient_id} failed")


class DeliveryTimeout(DeliveryFailed):
    """A per-recipient write did not settle before its timeout.

    The underlying write may still complete afterwards.
    """

    def __init__(self, recipient_id: object, timeout: float) -> None:
        self.timeout = timeout
        super().__init__(
            recipient_id,
            f"Delivery to recipient {recipient_id} timed out after {timeout:g}s",
        )


class BroadcastFailed(NotificationError):
    """The shared broadcast record could not be stored."""


__all__ = [
    "BroadcastFailed",
    "DeliveryFailed",
    "DeliveryTimeout",
    "DirectoryFetchFailed",
    "InvalidArgument",
    "NotificationError",
    "Unauthorized",
]
