"""Team members shown on the public "about" pages, in an admin-chosen order."""
import logging
from typing import List

from sqlalchemy import func
from sqlalchemy.orm import Session

from rotations.core.errors import NotFound, ValidationError
from rotations.core.security import ensure_admin
from rotations.models.team import TeamMember
from rotations.schemas.auth import Actor
from rotations.schemas.team import TeamMemberCreate, TeamMemberUpdate

logger = logging.getLogger(__name__)


def _active(db: Session):
    return db.query(TeamMember).filter(TeamMember.is_active.is_(True))


def list_members(db: Session) -> List[TeamMember]:
    return _active(db).order_by(TeamMember.sort_order.asc(), TeamMember.id.asc()).all()


def get_member(db: Session, member_id: int) -> TeamMember:
    member = db.get(TeamMember, member_id)
    if member is None or not member.is_active:
        raise NotFound(f"Team member {member_id} not found")
    return member


def create_member(db: Session, actor: Actor, data: TeamMemberCreate) -> TeamMember:
    ensure_admin(actor, "manage the team")
    sort_order = data.sort_order
    if sort_order is None:
        current_max = _active(db).with_entities(func.max(TeamMember.sort_order)).scalar()
        sort_order = 0 if current_max is None else current_max + 1

    member = TeamMember(**data.model_dump(mode="json", exclude={"sort_order"}), sort_order=sort_order)
    db.add(member)
    db.commit()
    db.refresh(member)
    logger.info("Team member %s added at position %s", member.id, sort_order)
    return member


def update_member(db: Session, actor: Actor, member_id: int, data: TeamMemberUpdate) -> TeamMember:
    ensure_admin(actor, "manage the team")
    member = get_member(db, member_id)
    for key, value in data.model_dump(mode="json", exclude_unset=True).items():
        if value is None and key in ("name", "title"):
            raise ValidationError(key, f"{key} cannot be empty")
        setattr(member, key, value)

    db.commit()
    db.refresh(member)
    return member


def delete_member(db: Session, actor: Actor, member_id: int) -> None:
    """Hide the member; the row is kept."""
    ensure_admin(actor, "manage the team")
    member = get_member(db, member_id)
    member.is_active = False
    db.commit()


def reorder_members(db: Session, actor: Actor, member_ids: List[int]) -> List[TeamMember]:
    """Give each active member the position of its id in ``member_ids``.

    The list must name every active member exactly once, so a stale client
    cannot silently drop someone from the ordering.
    """
    ensure_admin(actor, "manage the team")
    members = {m.id: m for m in _active(db).all()}
    if len(set(member_ids)) != len(member_ids):
        raise ValidationError("member_ids", "member_ids contains duplicates")
    if set(member_ids) != set(members):
        unknown = sorted(set(member_ids) - set(members))
        missing = sorted(set(members) - set(member_ids))
        raise ValidationError(
            "member_ids",
            f"member_ids must list every active member exactly once (unknown: {unknown}, missing: {missing})",
        )

    for position, member_id in enumerate(member_ids):
        members[member_id].sort_order = position
    db.commit()
    logger.info("Team reordered: %s", member_ids)
    return list_members(db)
