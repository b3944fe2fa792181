"""
Preference model: running-mean score per (attribute_key, attribute_value).

Every feedback event folds a signed weight into each attribute pair of the
item it targets. Scores are cumulative means, not exponentially decayed, so
each event keeps equal influence and results are reproducible.
"""
from __future__ import annotations

import logging
import math
from typing import Any, Mapping, Optional

from sqlalchemy.orm import Session, sessionmaker

from app.db.session import use_session
from app.repositories import preference_repo

logger = logging.getLogger(__name__)


class PreferenceModel:
    def __init__(self, session_factory: sessionmaker) -> None:
        self._session_factory = session_factory

    def record_feedback(
        self,
        attributes: Mapping[str, str],
        weight: float,
        db: Optional[Session] = None,
    ) -> int:
        """
        Apply `weight` to every pair in `attributes`; returns the number of pairs touched.

        Not idempotent: replaying the same call counts it twice.
        """
        with use_session(self._session_factory, db) as session:
            # Fixed order so concurrent calls take row locks in the same sequence
            for key, value in sorted(attributes.items()):
                preference_repo.apply_weight(session, str(key), str(value), float(weight))
        return len(attributes)

    def get_attribute_score(
        self,
        attribute_key: str,
        attribute_value: str,
        db: Optional[Session] = None,
    ) -> Optional[tuple[float, int]]:
        """(score, sample_count) or None if the pair was never observed."""
        with use_session(self._session_factory, db) as session:
            return preference_repo.get_entry(session, attribute_key, attribute_value)

    def match_score(self, attributes: Mapping[str, str], db: Optional[Session] = None) -> float:
        """
        Mean confidence-weighted score of the item's liked attributes.

        Only stored pairs with score > 0 contribute, each as
        score * ln(sample_count + 1). The result is the average over the
        contributing pairs (0 when none match), so one strong match is not
        outweighed by many weak ones simply by count.
        """
        if not attributes:
            return 0.0
        with use_session(self._session_factory, db) as session:
            entries = preference_repo.get_positive_entries(session, list(attributes.keys()))

        contributions = [
            score * math.log(sample_count + 1)
            for key, value, score, sample_count in entries
            if attributes.get(key) == value
        ]
        if not contributions:
            return 0.0
        # fsum is exact, so the result does not depend on row order
        return math.fsum(contributions) / len(contributions)

    def list_preferences(self, db: Optional[Session] = None) -> list[dict[str, Any]]:
        with use_session(self._session_factory, db) as session:
            return preference_repo.list_entries(session)

    def stats(self, top_n: int = 10, db: Optional[Session] = None) -> dict[str, Any]:
        with use_session(self._session_factory, db) as session:
            result: dict[str, Any] = preference_repo.preference_counts(session)
            result["top_liked"] = preference_repo.top_entries(session, liked=True, limit=top_n)
            result["top_disliked"] = preference_repo.top_entries(session, liked=False, limit=top_n)
        return result
