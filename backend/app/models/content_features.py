"""Analyzed content item: flat attribute map produced by the vision-analysis pipeline."""
from __future__ import annotations

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from app.db.session import Base
from app.models.base import AttributeMapType, TimestampMixin


class ContentFeatures(Base, TimestampMixin):
    __tablename__ = "content_features"

    item_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    # Overwritten wholesale on re-analysis, never merged
    attributes: Mapped[dict] = mapped_column(AttributeMapType, nullable=False)
    raw_features: Mapped[dict | None] = mapped_column(AttributeMapType, nullable=True)
    media_type: Mapped[str] = mapped_column(String(32), nullable=False, default="video")
