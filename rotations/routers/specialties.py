from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from rotations.core.security import get_current_admin
from rotations.database import get_db
from rotations.schemas.auth import Actor
from rotations.schemas.specialty import Specialty, SpecialtyCreate
from rotations.services import specialties

router = APIRouter(prefix="/specialties", tags=["specialties"])


@router.get("/", response_model=List[Specialty])
def read_specialties(db: Session = Depends(get_db)):
    return specialties.list_specialties(db)


@router.post("/", response_model=Specialty, status_code=status.HTTP_201_CREATED)
def create_specialty(
    specialty: SpecialtyCreate,
    db: Session = Depends(get_db),
    current_admin: Actor = Depends(get_current_admin)
):
    return specialties.create_specialty(db, current_admin, specialty)
