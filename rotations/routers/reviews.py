from fastapi import APIRouter, Depends, status, Query
from sqlalchemy.orm import Session
from typing import List, Optional

from rotations.core.security import get_current_actor
from rotations.database import get_db
from rotations.models.base import MAX_ID
from rotations.routers.params import RowId
from rotations.schemas.auth import Actor
from rotations.schemas.review import RatingSummary, Review, ReviewUpsert
from rotations.services import relations

router = APIRouter(prefix="/reviews", tags=["reviews"])


def _public_view(review) -> Review:
    view = Review.model_validate(review)
    if view.is_anonymous:
        view.author_id = None
    return view


@router.get("/", response_model=List[Review])
def read_reviews(
    program_id: Optional[int] = Query(None, ge=1, le=MAX_ID),
    author_id: Optional[str] = Query(None),
    db: Session = Depends(get_db)
):
    reviews = relations.list_reviews(db, program_id=program_id, author_id=author_id)
    if author_id is not None:
        # Listing by author would reveal who wrote the anonymous ones
        reviews = [r for r in reviews if not r.is_anonymous]
    return [_public_view(r) for r in reviews]


@router.get("/summary/{program_id}", response_model=RatingSummary)
def read_rating_summary(program_id: RowId, db: Session = Depends(get_db)):
    return relations.rating_summary(db, program_id)


@router.put("/{program_id}", response_model=Review)
def upsert_review(
    program_id: RowId,
    review: ReviewUpsert,
    db: Session = Depends(get_db),
    current_actor: Actor = Depends(get_current_actor)
):
    return relations.upsert_review(
        db,
        current_actor.id,
        program_id,
        review.rating,
        review.comment,
        title=review.title,
        is_anonymous=review.is_anonymous,
    )


@router.delete("/{review_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_review(
    review_id: RowId,
    db: Session = Depends(get_db),
    current_actor: Actor = Depends(get_current_actor)
):
    relations.delete_review(db, review_id, current_actor)
    return None
