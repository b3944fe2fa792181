"""Feedback log repository: raw events and idempotency lookups."""
from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.models.feedback_event import FeedbackEvent


def event_exists(db: Session, idempotency_hash: str) -> bool:
    found = db.execute(
        select(FeedbackEvent.id).where(FeedbackEvent.idempotency_hash == idempotency_hash)
    ).first()
    return found is not None


def insert_event(
    db: Session,
    item_id: str,
    feedback_type: str,
    summary_id: str | None = None,
    idempotency_hash: str | None = None,
) -> None:
    """Caller owns the transaction; a duplicate hash raises IntegrityError on flush."""
    db.add(
        FeedbackEvent(
            item_id=item_id,
            feedback_type=feedback_type,
            summary_id=summary_id,
            idempotency_hash=idempotency_hash,
        )
    )
    db.flush()
