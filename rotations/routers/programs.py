from fastapi import APIRouter, Depends, status, Query
from sqlalchemy.orm import Session
from typing import Optional
import logging

from rotations.core.config import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from rotations.core.security import get_current_actor
from rotations.database import get_db
from rotations.models.base import MAX_ID
from rotations.routers.params import RowId
from rotations.models.program import ProgramType
from rotations.schemas.auth import Actor
from rotations.schemas.program import (
    Program,
    ProgramActivation,
    ProgramCreate,
    ProgramFilter,
    ProgramPaginated,
    ProgramUpdate,
    SeatResize,
)
from rotations.services import availability

router = APIRouter(prefix="/programs", tags=["programs"])
logger = logging.getLogger(__name__)


# 1. LIST PROGRAMS (filtered, ordered by start date)
@router.get("/", response_model=ProgramPaginated)
def read_programs(
    specialty: Optional[str] = Query(None, description="Specialty name, case-insensitive"),
    location: Optional[str] = Query(None, description="Substring of the location"),
    type: Optional[ProgramType] = Query(None),
    min_duration: Optional[int] = Query(None, gt=0, le=MAX_ID, description="Minimum length in weeks"),
    max_duration: Optional[int] = Query(None, gt=0, le=MAX_ID, description="Maximum length in weeks"),
    is_free: Optional[bool] = Query(None),
    search: Optional[str] = Query(None, description="Matches title, description or hospital"),
    skip: int = Query(0, ge=0, le=MAX_ID),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    db: Session = Depends(get_db)
):
    filters = ProgramFilter(
        specialty=specialty,
        location=location,
        type=type,
        min_duration=min_duration,
        max_duration=max_duration,
        is_free=is_free,
        search=search,
    )
    items, total = availability.list_programs(db, filters, skip=skip, limit=limit)
    return {
        "total": total,
        "items": items,
        "skip": skip,
        "limit": limit,
        "has_more": skip + len(items) < total,
    }


# 2. READ SINGLE PROGRAM
@router.get("/{program_id}", response_model=Program)
def read_program(program_id: RowId, db: Session = Depends(get_db)):
    return availability.get_program(db, program_id)


# 3. CREATE PROGRAM (admin)
@router.post("/", response_model=Program, status_code=status.HTTP_201_CREATED)
def create_program(
    program: ProgramCreate,
    db: Session = Depends(get_db),
    current_actor: Actor = Depends(get_current_actor)
):
    return availability.create_program(db, current_actor, program)


# 4. UPDATE PROGRAM DETAILS (admin, never seat counters)
@router.patch("/{program_id}", response_model=Program)
def update_program(
    program_id: RowId,
    program_update: ProgramUpdate,
    db: Session = Depends(get_db),
    current_actor: Actor = Depends(get_current_actor)
):
    return availability.update_program(db, current_actor, program_id, program_update)


# 5. RESIZE SEATS (admin)
@router.put("/{program_id}/seats", response_model=Program)
def resize_program(
    program_id: RowId,
    resize: SeatResize,
    db: Session = Depends(get_db),
    current_actor: Actor = Depends(get_current_actor)
):
    return availability.resize_program(db, current_actor, program_id, resize.total_seats)


# 6. ACTIVATE / DEACTIVATE (admin)
@router.put("/{program_id}/active", response_model=Program)
def set_program_active(
    program_id: RowId,
    activation: ProgramActivation,
    db: Session = Depends(get_db),
    current_actor: Actor = Depends(get_current_actor)
):
    return availability.set_program_active(db, current_actor, program_id, activation.is_active)


# 7. DELETE PROGRAM (admin)
@router.delete("/{program_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_program(
    program_id: RowId,
    db: Session = Depends(get_db),
    current_actor: Actor = Depends(get_current_actor)
):
    availability.delete_program(db, current_actor, program_id)
    return None
