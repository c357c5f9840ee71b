# rotations/models/application.py
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Index, text, Enum as SQLEnum
from sqlalchemy.orm import relationship
from enum import Enum as PyEnum
from rotations.models.base import Base, utc_now, enum_values


class ApplicationStatus(str, PyEnum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    WAITLISTED = "waitlisted"


# A seat is reserved from claim time until the application is rejected.
SEAT_HOLDING_STATUSES = frozenset({
    ApplicationStatus.PENDING,
    ApplicationStatus.WAITLISTED,
    ApplicationStatus.ACCEPTED,
})

OPEN_STATUSES = frozenset({ApplicationStatus.PENDING, ApplicationStatus.WAITLISTED})
TERMINAL_STATUSES = frozenset({ApplicationStatus.ACCEPTED, ApplicationStatus.REJECTED})

ALLOWED_TRANSITIONS = {
    ApplicationStatus.PENDING: frozenset({
        ApplicationStatus.ACCEPTED,
        ApplicationStatus.REJECTED,
        ApplicationStatus.WAITLISTED,
    }),
    ApplicationStatus.WAITLISTED: frozenset({
        ApplicationStatus.ACCEPTED,
        ApplicationStatus.REJECTED,
    }),
    ApplicationStatus.ACCEPTED: frozenset(),
    ApplicationStatus.REJECTED: frozenset(),
}


class Application(Base):
    __tablename__ = "applications"
    __table_args__ = (
        # At most one open application per applicant and program
        Index(
            "uq_applications_open_per_applicant",
            "applicant_id", "program_id",
            unique=True,
            postgresql_where=text("status IN ('pending', 'waitlisted')"),
            sqlite_where=text("status IN ('pending', 'waitlisted')"),
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    program_id = Column(Integer, ForeignKey("programs.id", ondelete="RESTRICT"), nullable=False, index=True)
    applicant_id = Column(String(64), nullable=False, index=True)
    status = Column(
        SQLEnum(ApplicationStatus, name="application_status", native_enum=False, length=20,
                values_callable=enum_values),
        nullable=False,
        default=ApplicationStatus.PENDING,
        index=True
    )
    cover_letter = Column(Text)
    review_notes = Column(Text)
    reviewed_by = Column(String(64))
    created_at = Column(DateTime, default=utc_now, nullable=False)
    status_changed_at = Column(DateTime, default=utc_now, nullable=False)

    program = relationship("Program", back_populates="applications")
