"""Favorites and reviews, both keyed by (actor, program).

Favorites have set semantics: adding twice or removing something absent is a
successful no-op. Reviews are a keyed upsert: one row per author and
program, edited in place.
"""
import logging
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from rotations.core.errors import NotFound, PermissionDenied, ValidationError
from rotations.models.favorite import Favorite
from rotations.models.program import Program
from rotations.models.review import Review
from rotations.schemas.auth import Actor

logger = logging.getLogger(__name__)

MIN_RATING = 1
MAX_RATING = 5
MIN_COMMENT_LENGTH = 10


def _require_program(db: Session, program_id: int) -> None:
    if db.query(Program.id).filter(Program.id == program_id).first() is None:
        raise NotFound(f"Program {program_id} not found")


def _find_favorite(db: Session, actor_id: str, program_id: int) -> Optional[Favorite]:
    return (
        db.query(Favorite)
        .filter(Favorite.applicant_id == actor_id, Favorite.program_id == program_id)
        .first()
    )


def add_favorite(db: Session, actor_id: str, program_id: int) -> Favorite:
    _require_program(db, program_id)
    existing = _find_favorite(db, actor_id, program_id)
    if existing is not None:
        return existing

    favorite = Favorite(applicant_id=actor_id, program_id=program_id)
    db.add(favorite)
    try:
        db.commit()
    except IntegrityError:
        # A concurrent request inserted the same pair first
        db.rollback()
        existing = _find_favorite(db, actor_id, program_id)
        if existing is None:
            raise
        return existing

    db.refresh(favorite)
    return favorite


def remove_favorite(db: Session, actor_id: str, program_id: int) -> None:
    db.query(Favorite).filter(
        Favorite.applicant_id == actor_id,
        Favorite.program_id == program_id,
    ).delete(synchronize_session=False)
    db.commit()


def is_favorite(db: Session, actor_id: str, program_id: int) -> bool:
    return _find_favorite(db, actor_id, program_id) is not None


def list_favorites(db: Session, actor_id: str) -> List[Favorite]:
    return (
        db.query(Favorite)
        .filter(Favorite.applicant_id == actor_id)
        .order_by(Favorite.created_at.desc(), Favorite.id.desc())
        .all()
    )


def validate_review(rating, comment) -> None:
    if isinstance(rating, bool) or not isinstance(rating, int) or not MIN_RATING <= rating <= MAX_RATING:
        raise ValidationError("rating", f"rating must be an integer between {MIN_RATING} and {MAX_RATING}")
    if not isinstance(comment, str) or len(comment.strip()) < MIN_COMMENT_LENGTH:
        raise ValidationError("comment", f"comment must be at least {MIN_COMMENT_LENGTH} characters")


def _find_review(db: Session, actor_id: str, program_id: int) -> Optional[Review]:
    return (
        db.query(Review)
        .filter(Review.author_id == actor_id, Review.program_id == program_id)
        .first()
    )


def upsert_review(
    db: Session,
    actor_id: str,
    program_id: int,
    rating: int,
    comment: str,
    title: Optional[str] = None,
    is_anonymous: bool = False,
) -> Review:
    validate_review(rating, comment)
    _require_program(db, program_id)

    comment = comment.strip()
    review = _find_review(db, actor_id, program_id)
    if review is None:
        review = Review(
            author_id=actor_id,
            program_id=program_id,
            rating=rating,
            comment=comment,
            title=title,
            is_anonymous=is_anonymous,
        )
        db.add(review)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            review = _find_review(db, actor_id, program_id)
            if review is None:
                raise
            logger.info("Review by %s on program %s created concurrently; updating", actor_id, program_id)
        else:
            db.refresh(review)
            return review

    review.rating = rating
    review.comment = comment
    if title is not None:
        review.title = title
    review.is_anonymous = is_anonymous
    db.commit()
    db.refresh(review)
    return review


def delete_review(db: Session, review_id: int, actor: Actor) -> None:
    review = db.get(Review, review_id)
    if review is None:
        raise NotFound(f"Review {review_id} not found")
    if review.author_id != actor.id and not actor.is_admin:
        raise PermissionDenied("Only the author or an admin may delete a review")
    db.delete(review)
    db.commit()


def list_reviews(
    db: Session,
    program_id: Optional[int] = None,
    author_id: Optional[str] = None,
) -> List[Review]:
    query = db.query(Review)
    if program_id is not None:
        query = query.filter(Review.program_id == program_id)
    if author_id is not None:
        query = query.filter(Review.author_id == author_id)
    return query.order_by(Review.created_at.desc(), Review.id.desc()).all()


def rating_summary(db: Session, program_id: int) -> dict:
    _require_program(db, program_id)
    count, average = (
        db.query(func.count(Review.id), func.avg(Review.rating))
        .filter(Review.program_id == program_id)
        .one()
    )
    return {
        "program_id": program_id,
        "count": count,
        "average": round(float(average), 2) if average is not None else None,
    }
