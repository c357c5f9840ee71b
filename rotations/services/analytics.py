"""Aggregate counts for the admin dashboard. Read-only."""
from sqlalchemy import func
from sqlalchemy.orm import Session

from rotations.models.application import Application, ApplicationStatus
from rotations.models.program import Program, ProgramType


def summary(db: Session) -> dict:
    total_programs = db.query(func.count(Program.id)).scalar()
    active_programs, total_seats, available_seats = (
        db.query(
            func.count(Program.id),
            func.coalesce(func.sum(Program.total_seats), 0),
            func.coalesce(func.sum(Program.available_seats), 0),
        )
        .filter(Program.is_active.is_(True))
        .one()
    )

    by_status = {status.value: 0 for status in ApplicationStatus}
    for status, count in (
        db.query(Application.status, func.count(Application.id))
        .group_by(Application.status)
        .all()
    ):
        by_status[ApplicationStatus(status).value] = count

    by_type = {program_type.value: 0 for program_type in ProgramType}
    for program_type, count in (
        db.query(Program.type, func.count(Program.id))
        .group_by(Program.type)
        .all()
    ):
        by_type[ProgramType(program_type).value] = count

    return {
        "total_programs": total_programs,
        "active_programs": active_programs,
        "total_seats": int(total_seats),
        "available_seats": int(available_seats),
        "applications_by_status": by_status,
        "programs_by_type": by_type,
    }
