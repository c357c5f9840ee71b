# rotations/models/review.py
from sqlalchemy import (
    Column, Integer, String, Text, Boolean, DateTime, ForeignKey,
    UniqueConstraint, CheckConstraint
)
from sqlalchemy.orm import relationship
from rotations.models.base import Base, utc_now


class Review(Base):
    __tablename__ = "reviews"
    __table_args__ = (
        UniqueConstraint("author_id", "program_id", name="uq_reviews_author_program"),
        CheckConstraint("rating BETWEEN 1 AND 5", name="ck_reviews_rating_range"),
    )

    id = Column(Integer, primary_key=True, index=True)
    author_id = Column(String(64), nullable=False, index=True)
    program_id = Column(Integer, ForeignKey("programs.id", ondelete="CASCADE"), nullable=False, index=True)
    rating = Column(Integer, nullable=False)
    title = Column(String(200))
    comment = Column(Text, nullable=False)
    is_anonymous = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=utc_now, nullable=False)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now, nullable=False)

    program = relationship("Program", back_populates="reviews")
