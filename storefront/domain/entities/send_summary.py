"""Result of a notification fan-out."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class DeliveryStatus(Enum):
    """Caller-visible classification of a fan-out result."""

    NO_RECIPIENTS = "no_recipients"
    DELIVERED = "delivered"
    BROADCAST_ONLY = "broadcast_only"
    PARTIAL = "partial"
    FAILED = "failed"


@dataclass(frozen=True)
class SendSummary:
    """Aggregated outcome of a ``send_to_all`` call."""

    total: int
    failed: int
    broadcast_ok: bool

    @property
    def delivered(self) -> int:
        return self.total - self.failed

    @property
    def status(self) -> DeliveryStatus:
        if self.total == 0:
            return DeliveryStatus.NO_RECIPIENTS
        if self.failed == 0:
            return DeliveryStatus.DELIVERED
        if self.failed == self.total:
            if self.broadcast_ok:
                return DeliveryStatus.BROADCAST_ONLY
            return DeliveryStatus.FAILED
        return DeliveryStatus.PARTIAL


__all__ = ["DeliveryStatus", "SendSummary"]
