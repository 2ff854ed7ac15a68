"""Column types and mixins shared by the dashboard models.

PostgreSQL gets native ``UUID`` and ``JSONB`` columns inside the
``govdash`` schema. SQLite, used by the test suite, stores both as text
and has no schemas.
"""

import json
from datetime import datetime, timezone
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import DateTime, String, Text, TypeDecorator
from sqlalchemy.dialects.postgresql import JSONB, UUID as PG_UUID
from sqlalchemy.engine import Dialect
from sqlalchemy.orm import Mapped, mapped_column

from compliance_dashboard.config import get_settings
from compliance_dashboard.database import Base

SCHEMA: str | None = None if "sqlite" in get_settings().database_url else "govdash"


def utcnow() -> datetime:
    # Microsecond resolution keeps same-request inserts ordered
    return datetime.now(timezone.utc)


def schema_args() -> dict[str, str]:
    """``__table_args__`` entry placing a table in the dashboard schema."""
    return {"schema": SCHEMA} if SCHEMA else {}


def _is_postgres(dialect: Dialect) -> bool:
    return dialect.name == "postgresql"


class JSONType(TypeDecorator):
    """JSONB on PostgreSQL, serialized TEXT elsewhere."""

    impl = Text
    cache_ok = True

    def load_dialect_impl(self, dialect: Dialect):
        return dialect.type_descriptor(JSONB() if _is_postgres(dialect) else Text())

    def process_bind_param(self, value: Any, dialect: Dialect) -> Any:
        if value is None or _is_postgres(dialect):
            return value
        return json.dumps(value)

    def process_result_value(self, value: Any, dialect: Dialect) -> Any:
        if isinstance(value, str) and not _is_postgres(dialect):
            return json.loads(value)
        return value


class UUIDType(TypeDecorator):
    """Native UUID on PostgreSQL, 36 character string elsewhere."""

    impl = String(36)
    cache_ok = True

    def load_dialect_impl(self, dialect: Dialect):
        if _is_postgres(dialect):
            return dialect.type_descriptor(PG_UUID(as_uuid=True))
        return dialect.type_descriptor(String(36))

    def process_bind_param(self, value: Any, dialect: Dialect) -> Any:
        if value is None or _is_postgres(dialect):
            return value
        return str(value)

    def process_result_value(self, value: Any, dialect: Dialect) -> Any:
        if value is None or isinstance(value, UUID):
            return value
        return UUID(value)


class TimestampMixin:
    """``created_at`` / ``updated_at`` for the editable entities."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False, index=True
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )


class MetadataMixin:
    """Opaque metadata map plus ordered tags."""

    meta: Mapped[dict[str, Any]] = mapped_column(JSONType(), default=dict, nullable=False)
    tags: Mapped[list[str]] = mapped_column(JSONType(), default=list, nullable=False)


class DashboardBase(Base):
    """Base class for all dashboard models.

    Cross-entity references are plain indexed UUID columns without foreign
    key constraints, so deleting a rule leaves its artifacts, suites, runs
    and audit entries in place.
    """

    __abstract__ = True
    __table_args__ = schema_args()

    id: Mapped[UUID] = mapped_column(UUIDType(), primary_key=True, default=uuid4)
