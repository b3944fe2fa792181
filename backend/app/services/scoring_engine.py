"""
Scoring engine: blends the attribute match score with profile/item cosine similarity.
"""
from __future__ import annotations

import logging
from typing import Optional, Sequence

import numpy as np
from sqlalchemy.orm import Session, sessionmaker

from app.core.errors import DimensionMismatchError
from app.db.session import use_session
from app.services.feature_store import FeatureStore
from app.services.preference_model import PreferenceModel
from app.services.vector_store import VectorStore

logger = logging.getLogger(__name__)


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """dot(a, b) / (|a| * |b|) in [-1, 1]; 0 when either vector has zero norm."""
    va = np.asarray(a, dtype=np.float64)
    vb = np.asarray(b, dtype=np.float64)
    if va.shape != vb.shape:
        raise DimensionMismatchError(va.size, vb.size, "cosine similarity")
    norm_a = np.linalg.norm(va)
    norm_b = np.linalg.norm(vb)
    if norm_a == 0 or norm_b == 0:
        return 0.0
    similarity = float(np.dot(va, vb) / (norm_a * norm_b))
    # Rounding can push identical vectors slightly past 1
    return max(-1.0, min(1.0, similarity))


def normalize_similarity(similarity: float) -> float:
    """Map [-1, 1] onto [0, 10], the nominal range of the tag score."""
    return (similarity + 1.0) * 5.0


class ScoringEngine:
    def __init__(
        self,
        session_factory: sessionmaker,
        features: FeatureStore,
        preferences: PreferenceModel,
        vectors: VectorStore,
        vector_weight: float = 0.7,
    ) -> None:
        if not 0.0 <= vector_weight <= 1.0:
            raise ValueError(f"vector_weight must be within [0, 1], got {vector_weight}")
        self._session_factory = session_factory
        self._features = features
        self._preferences = preferences
        self._vectors = vectors
        self.vector_weight = vector_weight

    def blend(self, tag_score: float, similarity: float) -> float:
        vector_score = normalize_similarity(similarity)
        return tag_score * (1.0 - self.vector_weight) + vector_score * self.vector_weight

    def score(self, item_id: str, user_id: Optional[str] = None, db: Optional[Session] = None) -> float:
        """
        Ranking score for one item.

        Unanalyzed items score 0 (neutral, not excluded). Without both an item
        embedding and a profile vector the attribute match score is returned
        unchanged; otherwise the two are blended by `vector_weight`.
        """
        with use_session(self._session_factory, db) as session:
            attributes = self._features.get_attributes(item_id, db=session)
            if attributes is None:
                return 0.0
            tag_score = self._preferences.match_score(attributes, db=session)

            item_vector = self._vectors.get_item_vector(item_id, db=session)
            if item_vector is None:
                return tag_score
            profile_vector = self._vectors.get_user_profile_vector(user_id, db=session)
            if profile_vector is None:
                return tag_score

        similarity = cosine_similarity(profile_vector, item_vector)
        return self.blend(tag_score, similarity)

    def rank(
        self,
        item_ids: Sequence[str],
        user_id: Optional[str] = None,
        db: Optional[Session] = None,
    ) -> list[tuple[str, float]]:
        """(item_id, score) pairs, highest first; ties keep the input order."""
        with use_session(self._session_factory, db) as session:
            scored = [(item_id, self.score(item_id, user_id=user_id, db=session)) for item_id in item_ids]
        # sorted() is stable, including with reverse=True
        ranked = sorted(scored, key=lambda pair: pair[1], reverse=True)
        logger.info(f"Ranked {len(ranked)} items")
        return ranked
