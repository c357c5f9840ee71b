"""Availability engine.

Sole owner of ``Program.available_seats``. Seats move only through
``claim_seat`` (decrement), ``release_seat`` (increment, called inside an
application transition) and ``resize_program`` (admin). Each of these is a
conditional UPDATE whose WHERE clause re-checks the bound, so two writers
racing on the last seat cannot both win even where row locks are not
available (SQLite). On PostgreSQL the program row is additionally locked
with SELECT ... FOR UPDATE for the duration of the transaction.
"""
import logging
from typing import List, Optional, Tuple

from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, lazyload

from rotations.core.errors import (
    DuplicateApplication,
    InvariantViolation,
    NotFound,
    ProgramInactive,
    SeatUnavailable,
    ValidationError,
)
from rotations.core.security import ensure_admin
from rotations.models.application import Application, ApplicationStatus, OPEN_STATUSES
from rotations.models.program import Program
from rotations.models.specialty import Specialty
from rotations.schemas.auth import Actor
from rotations.schemas.program import ProgramCreate, ProgramFilter, ProgramUpdate

logger = logging.getLogger(__name__)

_REQUIRED_FIELDS = frozenset({
    "title", "type", "hospital_name", "mentor_name", "location", "country", "city",
    "description", "requirements", "duration_weeks", "start_date", "currency", "is_featured",
})


def like_pattern(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def get_program(db: Session, program_id: int, lock: bool = False) -> Program:
    query = db.query(Program).filter(Program.id == program_id)
    if lock:
        # Skip the joined specialty load: FOR UPDATE cannot cover an outer join
        query = query.options(lazyload(Program.specialty)).with_for_update()
    program = query.first()
    if program is None:
        raise NotFound(f"Program {program_id} not found")
    return program


def list_programs(
    db: Session,
    filters: ProgramFilter,
    skip: int = 0,
    limit: int = 20,
) -> Tuple[List[Program], int]:
    """Active programs matching every supplied predicate.

    Ordered by start date, then id, so identical queries page identically.
    Returns ``(items, total)``.
    """
    if (
        filters.min_duration is not None
        and filters.max_duration is not None
        and filters.min_duration > filters.max_duration
    ):
        raise ValidationError("min_duration", "min_duration cannot be greater than max_duration")

    query = db.query(Program).filter(Program.is_active.is_(True))

    if filters.specialty:
        query = query.join(Specialty, Program.specialty_id == Specialty.id).filter(
            func.lower(Specialty.name) == filters.specialty.strip().lower()
        )
    if filters.location:
        query = query.filter(Program.location.ilike(like_pattern(filters.location.strip()), escape="\\"))
    if filters.type is not None:
        query = query.filter(Program.type == filters.type)
    if filters.min_duration is not None:
        query = query.filter(Program.duration_weeks >= filters.min_duration)
    if filters.max_duration is not None:
        query = query.filter(Program.duration_weeks <= filters.max_duration)
    if filters.is_free is not None:
        if filters.is_free:
            query = query.filter(or_(Program.fee.is_(None), Program.fee == 0))
        else:
            query = query.filter(Program.fee > 0)
    if filters.search:
        pattern = like_pattern(filters.search.strip())
        query = query.filter(
            or_(
                Program.title.ilike(pattern, escape="\\"),
                Program.description.ilike(pattern, escape="\\"),
                Program.hospital_name.ilike(pattern, escape="\\"),
            )
        )

    total = query.count()
    items = (
        query.order_by(Program.start_date.asc(), Program.id.asc())
        .offset(skip)
        .limit(limit)
        .all()
    )
    return items, total


def _ensure_specialty(db: Session, specialty_id: Optional[int]) -> None:
    if specialty_id is not None and db.get(Specialty, specialty_id) is None:
        raise ValidationError("specialty_id", f"Specialty {specialty_id} does not exist")


def create_program(db: Session, actor: Actor, data: ProgramCreate) -> Program:
    ensure_admin(actor, "create programs")
    _ensure_specialty(db, data.specialty_id)

    fields = data.model_dump(exclude={"available_seats"})
    available = data.available_seats if data.available_seats is not None else data.total_seats
    program = Program(**fields, available_seats=available, is_active=True)
    db.add(program)
    db.commit()
    db.refresh(program)
    logger.info("Program %s created by %s with %s seats", program.id, actor.id, program.total_seats)
    return program


def update_program(db: Session, actor: Actor, program_id: int, data: ProgramUpdate) -> Program:
    ensure_admin(actor, "modify programs")
    program = get_program(db, program_id)

    changes = data.model_dump(exclude_unset=True)
    if "specialty_id" in changes:
        _ensure_specialty(db, changes["specialty_id"])
    for name, value in changes.items():
        if value is None and name in _REQUIRED_FIELDS:
            raise ValidationError(name, f"{name} cannot be null")
        setattr(program, name, value)

    db.commit()
    db.refresh(program)
    return program


def set_program_active(db: Session, actor: Actor, program_id: int, is_active: bool) -> Program:
    ensure_admin(actor, "activate or deactivate programs")
    program = get_program(db, program_id)
    program.is_active = is_active
    db.commit()
    db.refresh(program)
    logger.info("Program %s %s by %s", program_id, "activated" if is_active else "deactivated", actor.id)
    return program


def delete_program(db: Session, actor: Actor, program_id: int) -> None:
    ensure_admin(actor, "delete programs")
    program = get_program(db, program_id)
    has_applications = db.query(Application.id).filter(Application.program_id == program_id).first()
    if has_applications:
        raise ValidationError(
            "program_id",
            "Program has applications and cannot be deleted; deactivate it instead"
        )
    db.delete(program)
    db.commit()
    logger.info("Program %s deleted by %s", program_id, actor.id)


def resize_program(db: Session, actor: Actor, program_id: int, total_seats: int) -> Program:
    """Change capacity; available seats shift by the same delta.

    Refused when the new total is below the number of seats already held.
    """
    ensure_admin(actor, "resize programs")
    if total_seats <= 0:
        raise ValidationError("total_seats", "total_seats must be a positive integer")
    get_program(db, program_id, lock=True)

    updated = (
        db.query(Program)
        .filter(
            Program.id == program_id,
            Program.total_seats - Program.available_seats <= total_seats,
        )
        .update(
            {
                Program.available_seats: Program.available_seats + (total_seats - Program.total_seats),
                Program.total_seats: total_seats,
            },
            synchronize_session=False,
        )
    )
    if updated != 1:
        db.rollback()
        program = get_program(db, program_id)
        raise ValidationError(
            "total_seats",
            f"total_seats cannot be below the {program.held_seats} seats already held"
        )

    db.commit()
    program = get_program(db, program_id)
    logger.info("Program %s resized to %s seats by %s", program_id, total_seats, actor.id)
    return program


def claim_seat(
    db: Session,
    program_id: int,
    applicant_id: str,
    cover_letter: Optional[str] = None,
) -> Application:
    """Reserve one seat and record a pending application, atomically.

    Raises NotFound, ProgramInactive, DuplicateApplication or SeatUnavailable;
    on any failure nothing is written.
    """
    try:
        program = get_program(db, program_id, lock=True)
        if not program.is_active:
            raise ProgramInactive(f"Program {program_id} is not accepting applications")

        existing = (
            db.query(Application)
            .filter(
                Application.program_id == program_id,
                Application.applicant_id == applicant_id,
                Application.status.in_(OPEN_STATUSES | {ApplicationStatus.ACCEPTED}),
            )
            .first()
        )
        if existing is not None:
            raise DuplicateApplication(
                f"Applicant already holds a {existing.status.value} application for program {program_id}"
            )

        # Compare-and-decrement
        claimed = (
            db.query(Program)
            .filter(
                Program.id == program_id,
                Program.is_active.is_(True),
                Program.available_seats > 0,
            )
            .update(
                {Program.available_seats: Program.available_seats - 1},
                synchronize_session=False,
            )
        )
        if claimed != 1:
            db.rollback()
            program = get_program(db, program_id)
            if not program.is_active:
                raise ProgramInactive(f"Program {program_id} is not accepting applications")
            raise SeatUnavailable(f"No seats left in program {program_id}")

        application = Application(
            program_id=program_id,
            applicant_id=applicant_id,
            status=ApplicationStatus.PENDING,
            cover_letter=cover_letter,
        )
        db.add(application)
        db.flush()
        db.commit()
    except IntegrityError:
        # Lost a race against the same applicant's concurrent claim
        db.rollback()
        logger.warning("Concurrent duplicate claim by %s on program %s", applicant_id, program_id)
        raise DuplicateApplication(
            f"Applicant already holds an open application for program {program_id}"
        )
    except (NotFound, ProgramInactive, DuplicateApplication, SeatUnavailable) as e:
        db.rollback()
        logger.info("Seat claim by %s on program %s refused: %s", applicant_id, program_id, e.code)
        raise

    db.refresh(application)
    logger.info("Seat claimed on program %s by %s (application %s)", program_id, applicant_id, application.id)
    return application


def release_seat(db: Session, program_id: int) -> None:
    """Return one seat to the program inside the caller's transaction.

    Does not commit. Raises InvariantViolation if the program is already at
    full capacity; the caller is expected to roll back.
    """
    released = (
        db.query(Program)
        .filter(
            Program.id == program_id,
            Program.available_seats < Program.total_seats,
        )
        .update(
            {Program.available_seats: Program.available_seats + 1},
            synchronize_session=False,
        )
    )
    if released != 1:
        logger.error("Refused seat release on program %s: already at capacity", program_id)
        raise InvariantViolation(
            f"Releasing a seat would push program {program_id} above its total capacity"
        )
    logger.info("Seat released on program %s", program_id)
