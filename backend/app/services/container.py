"""
Composition root: builds the ranking services once and wires their dependencies.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Sequence

from sqlalchemy.orm import sessionmaker

from app.core.config import Settings
from app.db.session import session_scope
from app.services.feature_store import FeatureStore
from app.services.feedback_processor import FeedbackProcessor
from app.services.preference_model import PreferenceModel
from app.services.scoring_engine import ScoringEngine
from app.services.vector_store import VectorStore


@dataclass
class RankingServices:
    session_factory: sessionmaker
    features: FeatureStore
    vectors: VectorStore
    preferences: PreferenceModel
    scoring: ScoringEngine
    feedback: FeedbackProcessor

    def ingest_analysis(
        self,
        item_id: str,
        raw_features: Optional[dict] = None,
        attributes: Optional[Mapping[str, str]] = None,
        embedding: Optional[Sequence[float]] = None,
        description: Optional[str] = None,
        media_type: str = "video",
    ) -> dict[str, Any]:
        """
        Store one item's analysis (attributes and optional embedding) atomically.
        Explicit `attributes` take precedence over ones extracted from `raw_features`.
        """
        with session_scope(self.session_factory) as db:
            if attributes is not None:
                self.features.put_attributes(item_id, attributes, raw_features, media_type, db=db)
                stored = {str(k): str(v) for k, v in attributes.items()}
            else:
                stored = self.features.put_analysis(item_id, raw_features or {}, media_type, db=db)
            if embedding is not None:
                self.vectors.put_item_vector(item_id, embedding, description, db=db)
        return {"item_id": item_id, "attributes": stored, "has_embedding": embedding is not None}


def build_services(settings: Settings, session_factory: sessionmaker) -> RankingServices:
    features = FeatureStore(session_factory)
    vectors = VectorStore(
        session_factory,
        dimension=settings.embedding_dim,
        default_user_id=settings.default_user_id,
    )
    preferences = PreferenceModel(session_factory)
    scoring = ScoringEngine(
        session_factory,
        features,
        preferences,
        vectors,
        vector_weight=settings.preference_vector_weight,
    )
    feedback = FeedbackProcessor(
        session_factory,
        features,
        preferences,
        vectors,
        like_weight=settings.preference_like_weight,
        dislike_weight=settings.preference_dislike_weight,
    )
    return RankingServices(
        session_factory=session_factory,
        features=features,
        vectors=vectors,
        preferences=preferences,
        scoring=scoring,
        feedback=feedback,
    )
