"""Feature repository: analyzed attribute maps per content item."""
from __future__ import annotations

from typing import Any

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.models.content_features import ContentFeatures
from app.repositories.dialect import upsert_insert


def upsert_features(
    db: Session,
    item_id: str,
    attributes: dict[str, str],
    raw_features: dict[str, Any] | None = None,
    media_type: str = "video",
) -> None:
    """Replace the stored analysis for one item wholesale."""
    stmt = upsert_insert(db, ContentFeatures).values(
        item_id=item_id,
        attributes=attributes,
        raw_features=raw_features,
        media_type=media_type,
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=[ContentFeatures.item_id],
        set_={
            "attributes": stmt.excluded["attributes"],
            "raw_features": stmt.excluded["raw_features"],
            "media_type": stmt.excluded["media_type"],
            "updated_at": func.now(),
        },
    )
    db.execute(stmt)


def get_attributes(db: Session, item_id: str) -> dict[str, str] | None:
    """Attribute map for one item, or None if the item was never analyzed."""
    attributes = db.execute(
        select(ContentFeatures.attributes).where(ContentFeatures.item_id == item_id)
    ).scalar_one_or_none()
    if attributes is None:
        return None
    return {str(k): str(v) for k, v in attributes.items()}
