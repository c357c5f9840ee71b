from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from rotations.core.security import get_current_actor
from rotations.database import get_db
from rotations.routers.params import RowId
from rotations.schemas.auth import Actor
from rotations.schemas.favorite import Favorite, FavoriteCheck
from rotations.services import relations

router = APIRouter(prefix="/favorites", tags=["favorites"])


@router.get("/", response_model=List[Favorite])
def read_favorites(
    db: Session = Depends(get_db),
    current_actor: Actor = Depends(get_current_actor)
):
    return relations.list_favorites(db, current_actor.id)


# PUT because adding is idempotent
@router.put("/{program_id}", response_model=Favorite)
def add_favorite(
    program_id: RowId,
    db: Session = Depends(get_db),
    current_actor: Actor = Depends(get_current_actor)
):
    return relations.add_favorite(db, current_actor.id, program_id)


@router.delete("/{program_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_favorite(
    program_id: RowId,
    db: Session = Depends(get_db),
    current_actor: Actor = Depends(get_current_actor)
):
    relations.remove_favorite(db, current_actor.id, program_id)
    return None


@router.get("/{program_id}/check", response_model=FavoriteCheck)
def check_favorite(
    program_id: RowId,
    db: Session = Depends(get_db),
    current_actor: Actor = Depends(get_current_actor)
):
    return {
        "program_id": program_id,
        "is_favorite": relations.is_favorite(db, current_actor.id, program_id),
    }
