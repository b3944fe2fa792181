"""Raw feedback log; idempotency_hash guards against replayed events."""
from __future__ import annotations

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from app.db.session import Base
from app.models.base import TimestampMixin, UUIDPrimaryKeyMixin


class FeedbackEvent(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "feedback_events"

    item_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    feedback_type: Mapped[str] = mapped_column(String(32), nullable=False)  # 'like' or 'dislike'
    summary_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    idempotency_hash: Mapped[str | None] = mapped_column(String(64), unique=True, nullable=True, index=True)
