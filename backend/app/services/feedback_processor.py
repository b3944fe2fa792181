"""
Feedback processor: applies one like/dislike to the preference model and the
user profile vector in a single transaction.
"""
from __future__ import annotations

import hashlib
import logging
from contextlib import nullcontext
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Iterable, Mapping, Optional, Union

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from app.core.errors import InvalidFeedbackTypeError, RankingError
from app.db.session import session_scope
from app.repositories import feedback_repo
from app.services.feature_store import FeatureStore
from app.services.preference_model import PreferenceModel
from app.services.vector_store import VectorStore

logger = logging.getLogger(__name__)


class FeedbackType(str, Enum):
    LIKE = "like"
    DISLIKE = "dislike"

    @classmethod
    def parse(cls, value: Union[str, "FeedbackType"]) -> "FeedbackType":
        try:
            return cls(value)
        except ValueError:
            raise InvalidFeedbackTypeError(value) from None


@dataclass
class FeedbackResult:
    item_id: str
    feedback_type: str
    success: bool
    duplicate: bool = False
    error: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def idempotency_hash(event_id: str) -> str:
    return hashlib.sha256(event_id.encode("utf-8")).hexdigest()


# (item_id, feedback_type) or {"item_id", "feedback_type", "event_id"?, "summary_id"?, "user_id"?}
FeedbackInput = Union[tuple, Mapping[str, Any]]


def _unpack_event(event: FeedbackInput) -> tuple:
    if isinstance(event, Mapping):
        return (
            event["item_id"],
            event["feedback_type"],
            event.get("event_id"),
            event.get("summary_id"),
            event.get("user_id"),
        )
    item_id, feedback_type = event
    return item_id, feedback_type, None, None, None


class FeedbackProcessor:
    def __init__(
        self,
        session_factory: sessionmaker,
        features: FeatureStore,
        preferences: PreferenceModel,
        vectors: VectorStore,
        like_weight: float = 1.0,
        dislike_weight: float = -1.0,
    ) -> None:
        self._session_factory = session_factory
        self._features = features
        self._preferences = preferences
        self._vectors = vectors
        self.like_weight = like_weight
        self.dislike_weight = dislike_weight

    def weight_for(self, feedback_type: FeedbackType) -> float:
        return self.like_weight if feedback_type is FeedbackType.LIKE else self.dislike_weight

    def process_feedback(
        self,
        item_id: str,
        feedback_type: Union[str, FeedbackType],
        event_id: Optional[str] = None,
        summary_id: Optional[str] = None,
        user_id: Optional[str] = None,
    ) -> bool:
        """
        Apply one feedback event. False when the item has no stored attributes
        (nothing is written in that case). A like on an item without an
        embedding still updates attribute preferences and returns True.
        """
        return self.apply(item_id, feedback_type, event_id, summary_id, user_id).success

    def apply(
        self,
        item_id: str,
        feedback_type: Union[str, FeedbackType],
        event_id: Optional[str] = None,
        summary_id: Optional[str] = None,
        user_id: Optional[str] = None,
    ) -> FeedbackResult:
        """process_feedback with the full result (duplicate flag included)."""
        kind = FeedbackType.parse(feedback_type)
        weight = self.weight_for(kind)
        event_hash = idempotency_hash(event_id) if event_id else None
        # Likes may rewrite the profile: hold its lock until the transaction commits
        lock = self._vectors.profile_lock(user_id) if kind is FeedbackType.LIKE else nullcontext()

        try:
            with lock, session_scope(self._session_factory) as db:
                if event_hash and feedback_repo.event_exists(db, event_hash):
                    logger.info(f"Duplicate feedback event {event_id} for {item_id}; not re-applied")
                    return FeedbackResult(item_id, kind.value, success=True, duplicate=True)

                attributes = self._features.get_attributes(item_id, db=db)
                if attributes is None:
                    logger.warning(f"No stored features for {item_id}; feedback ignored")
                    return FeedbackResult(item_id, kind.value, success=False)

                touched = self._preferences.record_feedback(attributes, weight, db=db)

                if kind is FeedbackType.LIKE:
                    embedding = self._vectors.get_item_vector(item_id, db=db)
                    if embedding is None:
                        logger.warning(f"No embedding for {item_id}; profile vector not updated")
                    else:
                        self._vectors.update_user_profile(embedding, user_id=user_id, db=db)

                feedback_repo.insert_event(db, item_id, kind.value, summary_id, event_hash)
        except IntegrityError:
            # Same event_id committed concurrently by another worker
            if event_hash is None or not self._event_recorded(event_hash):
                raise
            logger.info(f"Duplicate feedback event {event_id} for {item_id}; not re-applied")
            return FeedbackResult(item_id, kind.value, success=True, duplicate=True)

        logger.info(f"Processed {kind.value} on {item_id}: {touched} attribute preferences updated")
        return FeedbackResult(item_id, kind.value, success=True)

    def _event_recorded(self, event_hash: str) -> bool:
        with session_scope(self._session_factory) as db:
            return feedback_repo.event_exists(db, event_hash)

    def process_batch_feedback(self, events: Iterable[FeedbackInput]) -> list[FeedbackResult]:
        """
        Apply events strictly in order, one at a time. Each event succeeds or
        fails on its own; a failure is reported and the batch continues.
        """
        results: list[FeedbackResult] = []
        for event in events:
            try:
                item_id, feedback_type, event_id, summary_id, user_id = _unpack_event(event)
            except (KeyError, TypeError, ValueError) as e:
                logger.error(f"Malformed feedback event {event!r}: {e!r}")
                item_id = event.get("item_id", "") if isinstance(event, Mapping) else ""
                results.append(FeedbackResult(str(item_id), "", success=False, error=f"malformed event: {e!r}"))
                continue

            try:
                result = self.apply(
                    item_id,
                    feedback_type,
                    event_id=event_id,
                    summary_id=summary_id,
                    user_id=user_id,
                )
            except (RankingError, SQLAlchemyError) as e:
                logger.error(f"Feedback on {item_id} failed: {e}")
                kind = getattr(feedback_type, "value", feedback_type)
                result = FeedbackResult(item_id, str(kind), success=False, error=str(e))
            results.append(result)

        succeeded = sum(1 for r in results if r.success)
        logger.info(f"Batch feedback processed: {succeeded}/{len(results)} succeeded")
        return results
