"""Thin API layer: like/dislike feedback from the digest page."""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy.exc import SQLAlchemyError

from app.core.errors import DimensionMismatchError, InvalidFeedbackTypeError
from app.routers.deps import get_services
from app.services.container import RankingServices

router = APIRouter(prefix="/feedback", tags=["feedback"])


class FeedbackRequest(BaseModel):
    item_id: str
    feedback_type: str
    # Client-generated id; resubmitting the same id is not counted twice
    event_id: Optional[str] = None
    summary_id: Optional[str] = None
    # Profile to update on a like; defaults to DEFAULT_USER_ID
    user_id: Optional[str] = None


class BatchFeedbackRequest(BaseModel):
    events: list[FeedbackRequest] = Field(default_factory=list)


@router.post("")
def submit_feedback(body: FeedbackRequest, services: RankingServices = Depends(get_services)):
    """success is false when the item has not been analyzed yet."""
    try:
        result = services.feedback.apply(
            body.item_id,
            body.feedback_type,
            event_id=body.event_id,
            summary_id=body.summary_id,
            user_id=body.user_id,
        )
    except (InvalidFeedbackTypeError, DimensionMismatchError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    except SQLAlchemyError as e:
        raise HTTPException(status_code=500, detail=str(e))
    return result.to_dict()


@router.post("/batch")
def submit_batch_feedback(body: BatchFeedbackRequest, services: RankingServices = Depends(get_services)):
    """Processed in order; each event reports its own result."""
    results = services.feedback.process_batch_feedback(e.model_dump() for e in body.events)
    return [r.to_dict() for r in results]
