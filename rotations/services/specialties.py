from typing import List

from sqlalchemy import func
from sqlalchemy.orm import Session

from rotations.core.errors import ValidationError
from rotations.core.security import ensure_admin
from rotations.models.specialty import Specialty
from rotations.schemas.auth import Actor
from rotations.schemas.specialty import SpecialtyCreate


def list_specialties(db: Session) -> List[Specialty]:
    return db.query(Specialty).order_by(Specialty.name.asc()).all()


def create_specialty(db: Session, actor: Actor, data: SpecialtyCreate) -> Specialty:
    ensure_admin(actor, "create specialties")
    name = data.name.strip()
    if db.query(Specialty).filter(func.lower(Specialty.name) == name.lower()).first():
        raise ValidationError("name", f"Specialty '{name}' already exists")

    specialty = Specialty(name=name, description=data.description)
    db.add(specialty)
    db.commit()
    db.refresh(specialty)
    return specialty
