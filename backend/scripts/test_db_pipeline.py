#!/usr/bin/env python3
"""
End-to-end test for the ranking/feedback layer against a real database.

Run from the backend directory (after scripts/run_migrations.py):
  python scripts/test_db_pipeline.py

Attribute values, item ids and the profile user id are suffixed with a random
token so existing preferences do not affect the assertions. Rows created here
are deleted at the end.
"""
from __future__ import annotations

import math
import os
import sys
import uuid

# Ensure backend is on path so app is importable (whether run as script or from repo root)
_script_dir = os.path.dirname(os.path.abspath(__file__))
_backend = os.path.dirname(_script_dir)
if _backend not in sys.path:
    sys.path.insert(0, _backend)

from app.core.config import get_settings
from app.db.session import get_db, get_session_factory
from app.models import ContentFeatures, FeedbackEvent, ItemVector, PreferenceEntry, UserProfileVector
from app.services.container import build_services
from sqlalchemy import delete, select
from sqlalchemy.exc import OperationalError

TEST_PREFIX = "test-e2e-"


def _check_db() -> None:
    """Fail fast with a clear message if the database is not reachable."""
    try:
        with get_db() as db:
            db.execute(select(1))
    except OperationalError as e:
        print(
            "[FAIL] Cannot connect to the database. Is it running?\n"
            "  1. Set DATABASE_URL in backend/.env (Postgres with pgvector).\n"
            "  2. Run migrations: python scripts/run_migrations.py\n"
            "  3. Run this script again.",
            file=sys.stderr,
        )
        raise SystemExit(1) from e


def _cleanup(item_ids: list[str], user_id: str, suffix: str) -> None:
    with get_db() as db:
        db.execute(delete(FeedbackEvent).where(FeedbackEvent.item_id.in_(item_ids)))
        db.execute(delete(ItemVector).where(ItemVector.item_id.in_(item_ids)))
        db.execute(delete(ContentFeatures).where(ContentFeatures.item_id.in_(item_ids)))
        db.execute(delete(UserProfileVector).where(UserProfileVector.user_id == user_id))
        db.execute(delete(PreferenceEntry).where(PreferenceEntry.attribute_value.like(f"%{suffix}")))


def _run() -> None:
    _check_db()
    settings = get_settings()
    uid = str(uuid.uuid4())[:8]
    suffix = f"-{uid}"
    user_id = f"{TEST_PREFIX}user-{uid}"

    # Fresh profile per run; embedding length check off for the 2-d test vectors
    settings = settings.model_copy(update={"default_user_id": user_id, "embedding_dim": None})
    services = build_services(settings, get_session_factory())

    liked_item = f"{TEST_PREFIX}item-a-{uid}"
    disliked_item = f"{TEST_PREFIX}item-b-{uid}"
    scored_item = f"{TEST_PREFIX}item-c-{uid}"
    item_ids = [liked_item, disliked_item, scored_item]
    indoor = f"indoor{suffix}"
    cat = f"cat{suffix}"

    try:
        # --- a) Store analysis results ---
        services.ingest_analysis(liked_item, attributes={"scene_type": indoor, "tag_cat": cat}, embedding=[1.0, 0.0])
        services.ingest_analysis(disliked_item, attributes={"scene_type": indoor})
        services.ingest_analysis(scored_item, attributes={"scene_type": indoor}, embedding=[1.0, 0.0])

        # --- b) Scenario A: one like ---
        assert services.feedback.process_feedback(liked_item, "like", event_id=f"{TEST_PREFIX}{uid}-1")
        assert services.preferences.get_attribute_score("scene_type", indoor) == (1.0, 1)
        assert services.preferences.get_attribute_score("tag_cat", cat) == (1.0, 1)
        assert services.vectors.get_user_profile(user_id) == ([1.0, 0.0], 1)
        print("[PASS] Like: attribute preferences and profile vector created")

        # --- c) Replay of the same event is not counted twice ---
        assert services.feedback.process_feedback(liked_item, "like", event_id=f"{TEST_PREFIX}{uid}-1")
        assert services.preferences.get_attribute_score("scene_type", indoor) == (1.0, 1)
        print("[PASS] Idempotency: replayed event ignored")

        # --- d) Scenario B: dislike without embedding ---
        assert services.feedback.process_feedback(disliked_item, "dislike")
        score, count = services.preferences.get_attribute_score("scene_type", indoor)
        assert math.isclose(score, 0.0, abs_tol=1e-9) and count == 2
        assert services.vectors.get_user_profile(user_id) == ([1.0, 0.0], 1)
        print("[PASS] Dislike: running mean updated, profile vector unchanged")

        # --- e) Scenario C: blended score ---
        blended = services.scoring.score(scored_item)
        expected = 10 * settings.preference_vector_weight
        assert math.isclose(blended, expected, rel_tol=1e-9), f"Expected {expected}; got {blended}"
        print(f"[PASS] Blended score: {blended:.4f}")

        # --- f) Feedback on an unanalyzed item changes nothing ---
        assert not services.feedback.process_feedback(f"{TEST_PREFIX}missing-{uid}", "like")
        assert services.vectors.get_user_profile(user_id) == ([1.0, 0.0], 1)
        print("[PASS] Unanalyzed item: feedback rejected without side effects")
    finally:
        _cleanup(item_ids, user_id, suffix)

    print("\nAll assertions passed.")


def main() -> int:
    try:
        _run()
        return 0
    except Exception as e:
        print(f"\n[FAIL] {e}", file=sys.stderr)
        raise


if __name__ == "__main__":
    sys.exit(main())
