"""Thin API layer: ranking for the digest/feed and learned preferences."""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel

from app.core.errors import DimensionMismatchError
from app.routers.deps import get_services
from app.services.container import RankingServices

router = APIRouter(tags=["ranking"])


class RankingRequest(BaseModel):
    item_ids: list[str]
    user_id: Optional[str] = None


@router.post("/ranking")
def rank_items(body: RankingRequest, services: RankingServices = Depends(get_services)):
    """Items ordered by blended score, highest first; ties keep request order."""
    try:
        ranked = services.scoring.rank(body.item_ids, user_id=body.user_id)
    except DimensionMismatchError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return [{"item_id": item_id, "score": score} for item_id, score in ranked]


@router.get("/preferences")
def list_preferences(services: RankingServices = Depends(get_services)):
    return services.preferences.list_preferences()


@router.get("/preferences/stats")
def preference_stats(
    top_n: int = Query(10, ge=1, le=100),
    services: RankingServices = Depends(get_services),
):
    """Counts of liked/disliked attribute pairs plus the strongest of each."""
    return services.preferences.stats(top_n=top_n)
