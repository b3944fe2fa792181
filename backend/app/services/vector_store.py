"""
Vector store: item embeddings and the running user-profile embedding.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator, Optional, Sequence

from sqlalchemy.orm import Session, sessionmaker

from app.core.errors import DimensionMismatchError
from app.core.locks import KeyedLock
from app.db.session import use_session
from app.repositories import vector_repo

logger = logging.getLogger(__name__)


class VectorStore:
    def __init__(
        self,
        session_factory: sessionmaker,
        dimension: Optional[int] = None,
        default_user_id: str = "default",
    ) -> None:
        self._session_factory = session_factory
        self.dimension = dimension
        self.default_user_id = default_user_id
        self._profile_locks = KeyedLock()

    def _check_dimension(self, vector: Sequence[float], context: str) -> None:
        if self.dimension is not None and len(vector) != self.dimension:
            raise DimensionMismatchError(self.dimension, len(vector), context)

    @contextmanager
    def profile_lock(self, user_id: Optional[str] = None) -> Iterator[None]:
        """
        Serialize read-modify-write of one profile within this process.
        Hold it across the whole transaction when joining an outer unit of work.
        """
        with self._profile_locks(user_id or self.default_user_id):
            yield

    def put_item_vector(
        self,
        item_id: str,
        vector: Sequence[float],
        description: Optional[str] = None,
        db: Optional[Session] = None,
    ) -> None:
        """Upsert; the last write for an item wins."""
        vector = [float(x) for x in vector]
        self._check_dimension(vector, f"item {item_id}")
        with use_session(self._session_factory, db) as session:
            vector_repo.upsert_item_vector(session, item_id, vector, description)

    def get_item_vector(self, item_id: str, db: Optional[Session] = None) -> Optional[list[float]]:
        with use_session(self._session_factory, db) as session:
            return vector_repo.get_item_vector(session, item_id)

    def get_item_vectors(self, item_ids: Sequence[str], db: Optional[Session] = None) -> dict[str, list[float]]:
        with use_session(self._session_factory, db) as session:
            return vector_repo.get_item_vectors(session, list(item_ids))

    def update_user_profile(
        self,
        liked_vector: Sequence[float],
        user_id: Optional[str] = None,
        db: Optional[Session] = None,
    ) -> list[float]:
        """
        Fold one liked embedding into the profile's running mean.

        First like: the profile becomes the liked vector with count 1.
        Afterwards: new[i] = (old[i] * count + liked[i]) / (count + 1).
        Every like keeps equal weight regardless of when it arrived.
        """
        user_id = user_id or self.default_user_id
        liked = [float(x) for x in liked_vector]
        self._check_dimension(liked, f"profile {user_id}")

        with self.profile_lock(user_id), use_session(self._session_factory, db) as session:
            profile = vector_repo.get_profile_for_update(session, user_id)
            if profile is None and vector_repo.insert_profile_if_absent(session, user_id, liked):
                updated, count = liked, 1
            else:
                if profile is None:
                    profile = vector_repo.get_profile_for_update(session, user_id)
                current = [float(x) for x in profile.vector]
                if len(current) != len(liked):
                    raise DimensionMismatchError(len(current), len(liked), f"profile {user_id}")
                count = int(profile.count)
                updated = [(c * count + v) / (count + 1) for c, v in zip(current, liked)]
                count += 1
                vector_repo.save_profile(session, profile, updated, count)

        logger.debug(f"Profile {user_id} now averages {count} liked items")
        return updated

    def get_user_profile_vector(self, user_id: Optional[str] = None, db: Optional[Session] = None) -> Optional[list[float]]:
        profile = self.get_user_profile(user_id, db=db)
        return profile[0] if profile else None

    def get_user_profile(self, user_id: Optional[str] = None, db: Optional[Session] = None) -> Optional[tuple[list[float], int]]:
        """(vector, count) or None before the first like with an embedding."""
        with use_session(self._session_factory, db) as session:
            return vector_repo.get_profile(session, user_id or self.default_user_id)
