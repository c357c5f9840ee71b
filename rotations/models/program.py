# rotations/models/program.py
from sqlalchemy import (
    Column, Integer, String, Text, Boolean, Date, DateTime, Numeric, JSON,
    ForeignKey, CheckConstraint, Enum as SQLEnum
)
from sqlalchemy.orm import relationship
from enum import Enum as PyEnum
from rotations.models.base import Base, utc_now, enum_values


class ProgramType(str, PyEnum):
    OBSERVERSHIP = "observership"
    HANDS_ON = "hands_on"
    FELLOWSHIP = "fellowship"
    CLERKSHIP = "clerkship"


class Program(Base):
    __tablename__ = "programs"
    __table_args__ = (
        CheckConstraint("total_seats > 0", name="ck_programs_total_seats_positive"),
        CheckConstraint("available_seats >= 0", name="ck_programs_available_seats_non_negative"),
        CheckConstraint("available_seats <= total_seats", name="ck_programs_available_within_total"),
        CheckConstraint("duration_weeks > 0", name="ck_programs_duration_positive"),
        CheckConstraint("fee IS NULL OR fee >= 0", name="ck_programs_fee_non_negative"),
    )

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(200), nullable=False)
    type = Column(
        SQLEnum(ProgramType, name="program_type", native_enum=False, length=20,
                values_callable=enum_values),
        nullable=False,
        index=True
    )
    specialty_id = Column(Integer, ForeignKey("specialties.id", ondelete="SET NULL"), index=True)
    hospital_name = Column(String(200), nullable=False)
    mentor_name = Column(String(150), nullable=False)
    mentor_title = Column(String(150))
    location = Column(String(200), nullable=False)  # "City, Country"
    country = Column(String(100), nullable=False)
    city = Column(String(100), nullable=False)
    description = Column(Text, nullable=False)
    requirements = Column(JSON, nullable=False, default=list)
    duration_weeks = Column(Integer, nullable=False)
    start_date = Column(Date, nullable=False, index=True)

    # Seat counters are written only by services.availability
    total_seats = Column(Integer, nullable=False)
    available_seats = Column(Integer, nullable=False)

    fee = Column(Numeric(10, 2))  # NULL means free
    currency = Column(String(3), nullable=False, default="USD")
    is_active = Column(Boolean, nullable=False, default=True, index=True)
    is_featured = Column(Boolean, nullable=False, default=False)
    preceptor_id = Column(String(64), index=True)
    created_at = Column(DateTime, default=utc_now, nullable=False)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now, nullable=False)

    # Relationships
    specialty = relationship("Specialty", back_populates="programs", lazy="joined")
    applications = relationship("Application", back_populates="program")
    favorites = relationship("Favorite", back_populates="program", cascade="all, delete-orphan")
    reviews = relationship("Review", back_populates="program", cascade="all, delete-orphan")

    @property
    def is_free(self) -> bool:
        return self.fee is None or self.fee == 0

    @property
    def held_seats(self) -> int:
        return self.total_seats - self.available_seats
