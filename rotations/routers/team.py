from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from rotations.core.security import get_current_admin
from rotations.database import get_db
from rotations.routers.params import RowId
from rotations.schemas.auth import Actor
from rotations.schemas.team import TeamMember, TeamMemberCreate, TeamMemberUpdate, TeamReorder
from rotations.services import team

router = APIRouter(prefix="/team-members", tags=["team"])


@router.get("/", response_model=List[TeamMember])
def read_members(db: Session = Depends(get_db)):
    return team.list_members(db)


# Must stay ahead of /{member_id}
@router.put("/reorder", response_model=List[TeamMember])
def reorder_members(
    order: TeamReorder,
    db: Session = Depends(get_db),
    current_admin: Actor = Depends(get_current_admin)
):
    return team.reorder_members(db, current_admin, order.member_ids)


@router.get("/{member_id}", response_model=TeamMember)
def read_member(member_id: RowId, db: Session = Depends(get_db)):
    return team.get_member(db, member_id)


@router.post("/", response_model=TeamMember, status_code=status.HTTP_201_CREATED)
def create_member(
    member: TeamMemberCreate,
    db: Session = Depends(get_db),
    current_admin: Actor = Depends(get_current_admin)
):
    return team.create_member(db, current_admin, member)


@router.put("/{member_id}", response_model=TeamMember)
def update_member(
    member_id: RowId,
    member: TeamMemberUpdate,
    db: Session = Depends(get_db),
    current_admin: Actor = Depends(get_current_admin)
):
    return team.update_member(db, current_admin, member_id, member)


@router.delete("/{member_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_member(
    member_id: RowId,
    db: Session = Depends(get_db),
    current_admin: Actor = Depends(get_current_admin)
):
    team.delete_member(db, current_admin, member_id)
    return None
