from app.repositories.features_repo import get_attributes, upsert_features
from app.repositories.feedback_repo import event_exists, insert_event
from app.repositories.preference_repo import (
    apply_weight,
    get_entry,
    get_positive_entries,
    list_entries,
    preference_counts,
    top_entries,
)
from app.repositories.vector_repo import (
    get_item_vector,
    get_item_vectors,
    get_profile,
    get_profile_for_update,
    insert_profile_if_absent,
    save_profile,
    upsert_item_vector,
)

__all__ = [
    "apply_weight",
    "event_exists",
    "get_attributes",
    "get_entry",
    "get_item_vector",
    "get_item_vectors",
    "get_positive_entries",
    "get_profile",
    "get_profile_for_update",
    "insert_event",
    "insert_profile_if_absent",
    "list_entries",
    "preference_counts",
    "save_profile",
    "top_entries",
    "upsert_features",
    "upsert_item_vector",
]
