"""Learned preference per (attribute_key, attribute_value); no vectors."""
from __future__ import annotations

from sqlalchemy import Float, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.db.session import Base
from app.models.base import TimestampMixin, UUIDPrimaryKeyMixin


class PreferenceEntry(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "preference_entries"
    __table_args__ = (
        UniqueConstraint("attribute_key", "attribute_value", name="uq_preference_attribute"),
    )

    attribute_key: Mapped[str] = mapped_column(String(128), nullable=False)
    attribute_value: Mapped[str] = mapped_column(String(255), nullable=False)
    # Running mean of every feedback weight applied to this pair
    score: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    sample_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
