"""Vector repository: item embeddings and user profile vectors."""
from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.models.item_vector import ItemVector
from app.models.user_profile_vector import UserProfileVector
from app.repositories.dialect import as_float_list, upsert_insert


def upsert_item_vector(
    db: Session,
    item_id: str,
    vector: list[float],
    description: str | None = None,
) -> None:
    stmt = upsert_insert(db, ItemVector).values(
        item_id=item_id,
        vector=vector,
        description=description,
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=[ItemVector.item_id],
        set_={
            "vector": stmt.excluded["vector"],
            "description": stmt.excluded["description"],
            "updated_at": func.now(),
        },
    )
    db.execute(stmt)


def get_item_vector(db: Session, item_id: str) -> list[float] | None:
    vector = db.execute(
        select(ItemVector.vector).where(ItemVector.item_id == item_id)
    ).scalar_one_or_none()
    return as_float_list(vector) if vector is not None else None


def get_item_vectors(db: Session, item_ids: list[str]) -> dict[str, list[float]]:
    """Vectors for the given ids; ids without a vector are omitted."""
    if not item_ids:
        return {}
    rows = db.execute(
        select(ItemVector.item_id, ItemVector.vector).where(ItemVector.item_id.in_(item_ids))
    ).all()
    return {r[0]: as_float_list(r[1]) for r in rows}


def get_profile(db: Session, user_id: str) -> tuple[list[float], int] | None:
    row = db.execute(
        select(UserProfileVector.vector, UserProfileVector.count).where(
            UserProfileVector.user_id == user_id
        )
    ).first()
    if row is None:
        return None
    return as_float_list(row[0]), int(row[1])


def get_profile_for_update(db: Session, user_id: str) -> UserProfileVector | None:
    """Profile row locked until the caller's transaction ends (no-op lock on SQLite)."""
    return db.execute(
        select(UserProfileVector)
        .where(UserProfileVector.user_id == user_id)
        .with_for_update()
    ).scalar_one_or_none()


def insert_profile_if_absent(db: Session, user_id: str, vector: list[float]) -> bool:
    """
    Create the profile from its first liked vector. False when another
    transaction created it first; the caller then locks and updates that row.
    """
    stmt = upsert_insert(db, UserProfileVector).values(user_id=user_id, vector=vector, count=1)
    stmt = stmt.on_conflict_do_nothing(index_elements=[UserProfileVector.user_id])
    return db.execute(stmt).rowcount == 1


def save_profile(db: Session, profile: UserProfileVector, vector: list[float], count: int) -> None:
    profile.vector = vector
    profile.count = count
    db.flush()
