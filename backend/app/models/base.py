"""Base mixins, common columns and portable column types for models."""
from __future__ import annotations

from datetime import datetime
from uuid import uuid4

from pgvector.sqlalchemy import Vector
from sqlalchemy import JSON, DateTime, Uuid, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

# pgvector on Postgres; JSON array elsewhere (SQLite in tests). Length is checked in code.
EmbeddingType = JSON().with_variant(Vector(), "postgresql")

# Flat attribute_key -> attribute_value maps
AttributeMapType = JSON().with_variant(JSONB(), "postgresql")


def gen_uuid():
    return str(uuid4())


class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )


class UUIDPrimaryKeyMixin:
    id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        primary_key=True,
        default=gen_uuid,
    )
