"""Item embeddings: one vector per content item, last write wins."""
from __future__ import annotations

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.db.session import Base
from app.models.base import EmbeddingType, TimestampMixin


class ItemVector(Base, TimestampMixin):
    __tablename__ = "item_vectors"

    item_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    vector: Mapped[list] = mapped_column(EmbeddingType, nullable=False)
    # Text the embedding was computed from, kept for debugging
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
