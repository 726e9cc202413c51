"""Schemas describing background activity."""

from pydantic import BaseModel, Field


class ActivityRead(BaseModel):
    busy: bool
    active_operations: int = Field(..., ge=0)
