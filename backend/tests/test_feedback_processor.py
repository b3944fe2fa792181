import pytest
from sqlalchemy import func, select

from app.core.errors import InvalidFeedbackTypeError
from app.models import FeedbackEvent, PreferenceEntry
from app.services.feedback_processor import FeedbackProcessor, FeedbackType


@pytest.fixture
def analyzed(features, vectors):
    features.put_attributes("liked", {"scene_type": "indoor", "tag_cat": "cat"})
    vectors.put_item_vector("liked", [1.0, 0.0])
    features.put_attributes("disliked", {"scene_type": "indoor"})
    features.put_attributes("scored", {"scene_type": "indoor"})
    vectors.put_item_vector("scored", [1.0, 0.0])


def _event_count(session_factory):
    with session_factory() as db:
        return db.execute(select(func.count()).select_from(FeedbackEvent)).scalar()


def test_like_updates_preferences_and_profile(analyzed, processor, preferences, vectors):
    assert processor.process_feedback("liked", "like") is True

    assert preferences.get_attribute_score("scene_type", "indoor") == (1.0, 1)
    assert preferences.get_attribute_score("tag_cat", "cat") == (1.0, 1)
    assert vectors.get_user_profile() == ([1.0, 0.0], 1)


def test_dislike_updates_mean_and_leaves_profile(analyzed, processor, preferences, vectors):
    processor.process_feedback("liked", "like")

    assert processor.process_feedback("disliked", FeedbackType.DISLIKE) is True

    assert preferences.get_attribute_score("scene_type", "indoor") == (0.0, 2)
    assert preferences.get_attribute_score("tag_cat", "cat") == (1.0, 1)
    assert vectors.get_user_profile() == ([1.0, 0.0], 1)


def test_blended_score_after_like_and_dislike(analyzed, processor, scoring):
    processor.process_feedback("liked", "like")
    processor.process_feedback("disliked", "dislike")

    # indoor scores 0.0 so it is excluded; only the vector part remains
    assert scoring.score("scored") == pytest.approx(7.0)


def test_feedback_on_unanalyzed_item_changes_nothing(analyzed, processor, vectors, session_factory):
    assert processor.process_feedback("never-analyzed", "like") is False

    with session_factory() as db:
        assert db.execute(select(func.count()).select_from(PreferenceEntry)).scalar() == 0
    assert vectors.get_user_profile() is None
    assert _event_count(session_factory) == 0


def test_like_without_embedding_still_updates_preferences(analyzed, processor, preferences, vectors):
    assert processor.process_feedback("disliked", "like") is True

    assert preferences.get_attribute_score("scene_type", "indoor") == (1.0, 1)
    assert vectors.get_user_profile() is None


def test_configured_weights(session_factory, features, preferences, vectors, analyzed):
    processor = FeedbackProcessor(session_factory, features, preferences, vectors, like_weight=2.0, dislike_weight=-0.5)

    processor.process_feedback("disliked", "like")
    processor.process_feedback("disliked", "dislike")

    assert preferences.get_attribute_score("scene_type", "indoor") == (pytest.approx(0.75), 2)


def test_unknown_feedback_type_raises(analyzed, processor, preferences):
    with pytest.raises(InvalidFeedbackTypeError):
        processor.process_feedback("liked", "love")

    assert preferences.get_attribute_score("scene_type", "indoor") is None


def test_replayed_event_id_is_applied_once(analyzed, processor, preferences, vectors, session_factory):
    first = processor.apply("liked", "like", event_id="evt-1", summary_id="2026-10-19")
    again = processor.apply("liked", "like", event_id="evt-1", summary_id="2026-10-19")

    assert first.success and not first.duplicate
    assert again.success and again.duplicate
    assert preferences.get_attribute_score("tag_cat", "cat") == (1.0, 1)
    assert vectors.get_user_profile() == ([1.0, 0.0], 1)
    assert _event_count(session_factory) == 1


def test_events_without_id_are_not_deduplicated(analyzed, processor, preferences, session_factory):
    processor.process_feedback("liked", "like")
    processor.process_feedback("liked", "like")

    assert preferences.get_attribute_score("tag_cat", "cat") == (1.0, 2)
    assert _event_count(session_factory) == 2


def test_batch_is_ordered_and_failures_are_isolated(analyzed, processor, preferences):
    results = processor.process_batch_feedback(
        [
            ("liked", "like"),
            {"item_id": "missing", "feedback_type": "like"},
            ("liked", "meh"),
            {"item_id": "disliked", "feedback_type": "dislike", "event_id": "evt-9"},
        ]
    )

    assert [(r.item_id, r.success) for r in results] == [
        ("liked", True),
        ("missing", False),
        ("liked", False),
        ("disliked", True),
    ]
    assert results[1].error is None
    assert "meh" in results[2].error
    assert preferences.get_attribute_score("scene_type", "indoor") == (0.0, 2)


def test_malformed_batch_event_is_reported_and_batch_continues(analyzed, processor, preferences):
    results = processor.process_batch_feedback(
        [
            {"item_id": "liked", "feedback_type": "like"},
            {"item_id": "liked"},
            ("liked", "like", "extra"),
            ("liked", "like"),
        ]
    )

    assert [r.success for r in results] == [True, False, False, True]
    assert results[1].item_id == "liked"
    assert "malformed" in results[1].error
    assert results[2].item_id == ""
    assert "malformed" in results[2].error
    assert preferences.get_attribute_score("tag_cat", "cat") == (1.0, 2)


def test_batch_of_nothing(processor):
    assert processor.process_batch_feedback([]) == []
