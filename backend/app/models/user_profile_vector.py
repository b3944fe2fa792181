"""User profile: running mean of liked item embeddings."""
from __future__ import annotations

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.db.session import Base
from app.models.base import EmbeddingType, TimestampMixin


class UserProfileVector(Base, TimestampMixin):
    __tablename__ = "user_profile_vectors"

    user_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    vector: Mapped[list] = mapped_column(EmbeddingType, nullable=False)
    count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
