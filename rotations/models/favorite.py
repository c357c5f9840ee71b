# rotations/models/favorite.py
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from rotations.models.base import Base, utc_now


class Favorite(Base):
    __tablename__ = "favorites"
    __table_args__ = (
        UniqueConstraint("applicant_id", "program_id", name="uq_favorites_applicant_program"),
    )

    id = Column(Integer, primary_key=True)
    applicant_id = Column(String(64), nullable=False, index=True)
    program_id = Column(Integer, ForeignKey("programs.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime, default=utc_now, nullable=False)

    program = relationship("Program", back_populates="favorites")
