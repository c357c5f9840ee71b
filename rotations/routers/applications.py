from fastapi import APIRouter, Depends, status, Query
from sqlalchemy.orm import Session
from typing import List, Optional
import logging

from rotations.core.security import get_current_actor
from rotations.database import get_db
from rotations.models.application import ApplicationStatus
from rotations.models.base import MAX_ID
from rotations.routers.params import RowId
from rotations.schemas.application import Application, ApplicationCreate, ApplicationTransition
from rotations.schemas.auth import Actor
from rotations.services import applications, availability

router = APIRouter(prefix="/applications", tags=["applications"])
logger = logging.getLogger(__name__)


# 1. Apply to a program (claims a seat)
@router.post("/", response_model=Application, status_code=status.HTTP_201_CREATED)
def create_application(
    application: ApplicationCreate,
    db: Session = Depends(get_db),
    current_actor: Actor = Depends(get_current_actor)
):
    """Reserve a seat and open a pending application.

    A timed-out request has an unknown outcome: re-read /applications/me
    before retrying.
    """
    return availability.claim_seat(
        db,
        application.program_id,
        current_actor.id,
        cover_letter=application.cover_letter,
    )


# 2. List applications (admin: all, preceptor: own programs)
@router.get("/", response_model=List[Application])
def read_applications(
    program_id: Optional[int] = Query(None, ge=1, le=MAX_ID),
    applicant_id: Optional[str] = Query(None),
    status: Optional[ApplicationStatus] = Query(None),
    skip: int = Query(0, ge=0, le=MAX_ID),
    limit: int = Query(100, ge=1, le=500),
    db: Session = Depends(get_db),
    current_actor: Actor = Depends(get_current_actor)
):
    return applications.list_applications(
        db,
        current_actor,
        program_id=program_id,
        applicant_id=applicant_id,
        status=status,
        skip=skip,
        limit=limit,
    )


# 3. Current actor's own applications
@router.get("/me", response_model=List[Application])
def read_my_applications(
    db: Session = Depends(get_db),
    current_actor: Actor = Depends(get_current_actor)
):
    return applications.list_my_applications(db, current_actor)


# 4. Single application
@router.get("/{application_id}", response_model=Application)
def read_application(
    application_id: RowId,
    db: Session = Depends(get_db),
    current_actor: Actor = Depends(get_current_actor)
):
    return applications.get_application(db, application_id, current_actor)


# 5. Review decision
@router.post("/{application_id}/transition", response_model=Application)
def transition_application(
    application_id: RowId,
    transition: ApplicationTransition,
    db: Session = Depends(get_db),
    current_actor: Actor = Depends(get_current_actor)
):
    return applications.transition_application(
        db,
        application_id,
        transition.status,
        current_actor,
        review_notes=transition.review_notes,
    )
