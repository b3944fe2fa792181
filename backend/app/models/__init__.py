"""SQLAlchemy models only; no business logic."""
from app.models.base import TimestampMixin, UUIDPrimaryKeyMixin
from app.models.content_features import ContentFeatures
from app.models.feedback_event import FeedbackEvent
from app.models.item_vector import ItemVector
from app.models.preference_entry import PreferenceEntry
from app.models.user_profile_vector import UserProfileVector

__all__ = [
    "ContentFeatures",
    "FeedbackEvent",
    "ItemVector",
    "PreferenceEntry",
    "TimestampMixin",
    "UUIDPrimaryKeyMixin",
    "UserProfileVector",
]
