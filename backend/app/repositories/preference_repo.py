"""Preference repository: atomic running-mean updates and reads."""
from __future__ import annotations

from typing import Any

from sqlalchemy import func, select, text
from sqlalchemy.orm import Session

from app.models.preference_entry import PreferenceEntry
from app.repositories.dialect import upsert_insert
from app.repositories.queries import SQL_PREFERENCE_COUNTS, SQL_TOP_DISLIKED, SQL_TOP_LIKED


def apply_weight(db: Session, attribute_key: str, attribute_value: str, weight: float) -> None:
    """
    Fold one feedback weight into the running mean for (key, value).
    Single INSERT ... ON CONFLICT DO UPDATE: the read of score/sample_count and
    the write happen under the row lock, so concurrent updates never lose a sample.
    """
    stmt = upsert_insert(db, PreferenceEntry).values(
        attribute_key=attribute_key,
        attribute_value=attribute_value,
        score=weight,
        sample_count=1,
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=[PreferenceEntry.attribute_key, PreferenceEntry.attribute_value],
        set_={
            "score": (PreferenceEntry.score * PreferenceEntry.sample_count + weight)
            / (PreferenceEntry.sample_count + 1),
            "sample_count": PreferenceEntry.sample_count + 1,
            "updated_at": func.now(),
        },
    )
    db.execute(stmt)


def get_entry(db: Session, attribute_key: str, attribute_value: str) -> tuple[float, int] | None:
    row = db.execute(
        select(PreferenceEntry.score, PreferenceEntry.sample_count).where(
            PreferenceEntry.attribute_key == attribute_key,
            PreferenceEntry.attribute_value == attribute_value,
        )
    ).first()
    if row is None:
        return None
    return float(row[0]), int(row[1])


def get_positive_entries(db: Session, attribute_keys: list[str]) -> list[tuple[str, str, float, int]]:
    """Entries with score > 0 whose key is one of `attribute_keys`; caller matches values."""
    if not attribute_keys:
        return []
    rows = db.execute(
        select(
            PreferenceEntry.attribute_key,
            PreferenceEntry.attribute_value,
            PreferenceEntry.score,
            PreferenceEntry.sample_count,
        ).where(
            PreferenceEntry.attribute_key.in_(attribute_keys),
            PreferenceEntry.score > 0,
        )
    ).all()
    return [(r[0], r[1], float(r[2]), int(r[3])) for r in rows]


def list_entries(db: Session) -> list[dict[str, Any]]:
    rows = db.execute(
        select(PreferenceEntry).order_by(
            PreferenceEntry.score.desc(),
            PreferenceEntry.sample_count.desc(),
        )
    ).scalars().all()
    return [
        {
            "attribute_key": r.attribute_key,
            "attribute_value": r.attribute_value,
            "score": float(r.score),
            "sample_count": int(r.sample_count),
        }
        for r in rows
    ]


def preference_counts(db: Session) -> dict[str, int]:
    row = db.execute(text(SQL_PREFERENCE_COUNTS)).fetchone()
    return {
        "total_features": int(row[0] or 0),
        "liked_features": int(row[1] or 0),
        "disliked_features": int(row[2] or 0),
    }


def top_entries(db: Session, liked: bool, limit: int = 10) -> list[dict[str, Any]]:
    sql = SQL_TOP_LIKED if liked else SQL_TOP_DISLIKED
    rows = db.execute(text(sql), {"limit": limit}).fetchall()
    return [
        {
            "attribute_key": r[0],
            "attribute_value": r[1],
            "score": float(r[2]),
            "sample_count": int(r[3]),
        }
        for r in rows
    ]
