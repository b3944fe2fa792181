"""
Feature store: flat attribute maps per content item.
Attributes come from the external vision-analysis pipeline; this module only
flattens and persists them.
"""
from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from sqlalchemy.orm import Session, sessionmaker

from app.db.session import use_session
from app.repositories import features_repo

logger = logging.getLogger(__name__)

# Analyzer list fields -> attribute key prefix
_LIST_FIELDS = (
    ("primary_colors", "color"),
    ("primary_styles", "style"),
    ("top_tags", "tag"),
)


def extract_attributes(raw_features: Any) -> dict[str, str]:
    """
    Flatten analyzer output into attribute_key -> attribute_value.

    primary_scene_type becomes scene_type; every color, style and tag becomes
    its own key (color_red -> red) so each can carry a separate preference.
    """
    attributes: dict[str, str] = {}
    if not isinstance(raw_features, Mapping):
        return attributes

    scene = raw_features.get("primary_scene_type")
    if scene:
        attributes["scene_type"] = str(scene)

    for field, prefix in _LIST_FIELDS:
        for value in raw_features.get(field) or []:
            attributes[f"{prefix}_{value}"] = str(value)

    return attributes


class FeatureStore:
    def __init__(self, session_factory: sessionmaker) -> None:
        self._session_factory = session_factory

    def put_attributes(
        self,
        item_id: str,
        attributes: Mapping[str, str],
        raw_features: Optional[dict] = None,
        media_type: str = "video",
        db: Optional[Session] = None,
    ) -> None:
        """Store an attribute map, replacing any previous analysis."""
        attributes = {str(k): str(v) for k, v in attributes.items()}
        with use_session(self._session_factory, db) as session:
            features_repo.upsert_features(session, item_id, attributes, raw_features, media_type)
        logger.debug(f"Stored {len(attributes)} attributes for {item_id}")

    def put_analysis(
        self,
        item_id: str,
        raw_features: dict,
        media_type: str = "video",
        db: Optional[Session] = None,
    ) -> dict[str, str]:
        """Store raw analyzer output together with the attributes extracted from it."""
        attributes = extract_attributes(raw_features)
        self.put_attributes(item_id, attributes, raw_features, media_type, db=db)
        return attributes

    def get_attributes(self, item_id: str, db: Optional[Session] = None) -> Optional[dict[str, str]]:
        with use_session(self._session_factory, db) as session:
            return features_repo.get_attributes(session, item_id)
