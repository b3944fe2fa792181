"""Thin API layer: store analyzer output and read item scores."""
from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError

from app.core.errors import DimensionMismatchError
from app.routers.deps import get_services
from app.services.container import RankingServices

router = APIRouter(prefix="/items", tags=["items"])


class AnalysisRequest(BaseModel):
    raw_features: Optional[dict[str, Any]] = None
    attributes: Optional[dict[str, str]] = None
    embedding: Optional[list[float]] = None
    description: Optional[str] = None
    media_type: str = "video"


@router.put("/{item_id}/analysis")
def put_analysis(
    item_id: str,
    body: AnalysisRequest,
    services: RankingServices = Depends(get_services),
):
    """
    Store the vision-analysis result for one item (replaces any previous one).
    Attributes are extracted from raw_features unless given explicitly.
    """
    if body.raw_features is None and body.attributes is None:
        raise HTTPException(status_code=422, detail="raw_features or attributes is required")
    try:
        return services.ingest_analysis(
            item_id,
            raw_features=body.raw_features,
            attributes=body.attributes,
            embedding=body.embedding,
            description=body.description,
            media_type=body.media_type,
        )
    except DimensionMismatchError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except SQLAlchemyError as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/{item_id}/attributes")
def get_attributes(item_id: str, services: RankingServices = Depends(get_services)):
    attributes = services.features.get_attributes(item_id)
    if attributes is None:
        raise HTTPException(status_code=404, detail="Item not analyzed")
    return {"item_id": item_id, "attributes": attributes}


@router.get("/{item_id}/score")
def get_score(
    item_id: str,
    user_id: Optional[str] = None,
    services: RankingServices = Depends(get_services),
):
    """Blended ranking score; unanalyzed items score 0."""
    try:
        score = services.scoring.score(item_id, user_id=user_id)
    except DimensionMismatchError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"item_id": item_id, "score": score}
