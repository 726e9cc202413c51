"""Domain entity describing a notification recipient."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Recipient:
    """Entry of the recipient directory read at the start of every fan-out."""

    id: int
    email: str | None = None
    name: str | None = None


__all__ = ["Recipient"]
