"""Shared schema pieces."""

from datetime import datetime, timezone
from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel


class Pagination(BaseModel):
    """Pagination block of list responses."""

    offset: int
    limit: int
    total: int
    has_more: bool

    @classmethod
    def build(cls, offset: int, limit: int, total: int) -> "Pagination":
        return cls(offset=offset, limit=limit, total=total, has_more=offset + limit < total)


def iso(value: Optional[datetime]) -> Optional[str]:
    """ISO 8601 in UTC. Naive values (SQLite) are stored as UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()


def str_id(value: Optional[UUID | Any]) -> Optional[str]:
    return str(value) if value is not None else None
