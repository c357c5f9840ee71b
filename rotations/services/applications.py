"""Application ledger: status transitions and read access."""
import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from rotations.core.errors import (
    IllegalTransition,
    InvariantViolation,
    NotFound,
    PermissionDenied,
)
from rotations.models.application import (
    ALLOWED_TRANSITIONS,
    SEAT_HOLDING_STATUSES,
    Application,
    ApplicationStatus,
)
from rotations.models.base import utc_now
from rotations.models.program import Program
from rotations.schemas.auth import Actor, ActorRole
from rotations.services import availability

logger = logging.getLogger(__name__)


def can_transition(current: ApplicationStatus, target: ApplicationStatus) -> bool:
    return target in ALLOWED_TRANSITIONS[ApplicationStatus(current)]


def _can_review(actor: Actor, program: Program) -> bool:
    if actor.is_admin:
        return True
    return actor.role == ActorRole.preceptor and program.preceptor_id == actor.id


def get_application(db: Session, application_id: int, actor: Actor) -> Application:
    application = db.get(Application, application_id)
    if application is None:
        raise NotFound(f"Application {application_id} not found")
    if application.applicant_id != actor.id and not _can_review(actor, application.program):
        raise PermissionDenied("Not allowed to view this application")
    return application


def list_applications(
    db: Session,
    actor: Actor,
    program_id: Optional[int] = None,
    applicant_id: Optional[str] = None,
    status: Optional[ApplicationStatus] = None,
    skip: int = 0,
    limit: int = 100,
) -> List[Application]:
    """Admin view across all applications; preceptors see their own programs."""
    query = db.query(Application)
    if actor.role == ActorRole.preceptor:
        query = query.join(Program, Application.program_id == Program.id).filter(
            Program.preceptor_id == actor.id
        )
    elif not actor.is_admin:
        raise PermissionDenied("Admin or preceptor privileges required to list applications")

    if program_id is not None:
        query = query.filter(Application.program_id == program_id)
    if applicant_id is not None:
        query = query.filter(Application.applicant_id == applicant_id)
    if status is not None:
        query = query.filter(Application.status == status)

    return (
        query.order_by(Application.created_at.desc(), Application.id.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )


def list_my_applications(db: Session, actor: Actor) -> List[Application]:
    return (
        db.query(Application)
        .filter(Application.applicant_id == actor.id)
        .order_by(Application.created_at.desc(), Application.id.desc())
        .all()
    )


def transition_application(
    db: Session,
    application_id: int,
    new_status: ApplicationStatus,
    actor: Actor,
    review_notes: Optional[str] = None,
) -> Application:
    """Move an application along the status table.

    Entering ``rejected`` from a seat-holding state returns the seat in the
    same transaction as the status write; if the release is refused the
    status change is rolled back too.
    """
    new_status = ApplicationStatus(new_status)
    try:
        application = (
            db.query(Application)
            .filter(Application.id == application_id)
            .with_for_update()
            .first()
        )
        if application is None:
            raise NotFound(f"Application {application_id} not found")

        program = availability.get_program(db, application.program_id)
        if not _can_review(actor, program):
            raise PermissionDenied("Only an admin or the program's preceptor may review applications")

        current = application.status
        if not can_transition(current, new_status):
            raise IllegalTransition(
                f"Cannot move application {application_id} from {current.value} to {new_status.value}"
            )

        # Compare-and-set on the status so a concurrent reviewer cannot apply
        # a second transition from the same starting state.
        updated = (
            db.query(Application)
            .filter(Application.id == application_id, Application.status == current)
            .update(
                {
                    Application.status: new_status,
                    Application.status_changed_at: utc_now(),
                    Application.review_notes: review_notes if review_notes is not None else Application.review_notes,
                    Application.reviewed_by: actor.id,
                },
                synchronize_session=False,
            )
        )
        if updated != 1:
            raise IllegalTransition(
                f"Application {application_id} changed status concurrently; re-read before retrying"
            )

        if new_status == ApplicationStatus.REJECTED and current in SEAT_HOLDING_STATUSES:
            availability.release_seat(db, application.program_id)

        db.commit()
    except (NotFound, PermissionDenied, IllegalTransition, InvariantViolation) as e:
        db.rollback()
        logger.info("Transition of application %s to %s refused: %s", application_id, new_status.value, e.code)
        raise

    db.refresh(application)
    logger.info(
        "Application %s moved %s -> %s by %s",
        application_id, current.value, new_status.value, actor.id
    )
    return application
