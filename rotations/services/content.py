"""CMS pages resolved into ordered, typed sections.

Payloads are checked against their content-type tag when written, so
``resolve_page`` can hand sections to the renderer without re-validating.
"""
import logging
from typing import List, Tuple, Union

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from rotations.core.errors import InvalidSectionPayload, NotFound, ValidationError
from rotations.core.security import ensure_admin
from rotations.models.base import MAX_ID
from rotations.models.content import Page, Section, SectionType
from rotations.schemas.auth import Actor
from rotations.schemas.content import SECTION_PAYLOADS, PageCreate, SectionCreate, SectionUpdate

logger = logging.getLogger(__name__)


def validate_payload(content_type: str, payload) -> Tuple[SectionType, dict]:
    """Return the normalised ``(tag, payload)`` or raise InvalidSectionPayload."""
    try:
        section_type = SectionType(content_type)
    except ValueError:
        allowed = ", ".join(t.value for t in SectionType)
        raise InvalidSectionPayload(
            f"Unknown content type '{content_type}'; expected one of: {allowed}",
            field="content_type",
        )

    if not isinstance(payload, dict):
        raise InvalidSectionPayload(f"{section_type.value} payload must be an object", field="payload")

    try:
        model = SECTION_PAYLOADS[section_type].model_validate(payload)
    except PydanticValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in err['loc']) or 'payload'}: {err['msg']}"
            for err in e.errors()
        )
        raise InvalidSectionPayload(
            f"Invalid {section_type.value} payload: {problems}",
            field="payload",
        )
    return section_type, model.model_dump(mode="json", exclude_none=True)


def _get_page(db: Session, page_ref: Union[int, str]) -> Page:
    page = None
    ref = str(page_ref)
    if ref.isdecimal():
        # Ids beyond the key range cannot exist; skip the lookup instead of overflowing
        if len(ref) <= len(str(MAX_ID)) and int(ref) <= MAX_ID:
            page = db.get(Page, int(ref))
    else:
        page = db.query(Page).filter(Page.slug == ref).first()
    if page is None:
        raise NotFound(f"Page '{page_ref}' not found")
    return page


def create_page(db: Session, actor: Actor, data: PageCreate) -> Page:
    ensure_admin(actor, "create pages")
    page = Page(slug=data.slug, title=data.title, is_published=data.is_published)
    db.add(page)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ValidationError("slug", f"Page slug '{data.slug}' already exists")
    db.refresh(page)
    return page


def create_section(db: Session, actor: Actor, page_id: int, data: SectionCreate) -> Section:
    ensure_admin(actor, "edit page content")
    page = _get_page(db, page_id)
    section_type, payload = validate_payload(data.content_type, data.payload)

    sort_order = data.sort_order
    if sort_order is None:
        current_max = (
            db.query(func.max(Section.sort_order))
            .filter(Section.page_id == page.id)
            .scalar()
        )
        sort_order = 0 if current_max is None else current_max + 1

    section = Section(
        page_id=page.id,
        name=data.name,
        content_type=section_type.value,
        payload=payload,
        sort_order=sort_order,
    )
    db.add(section)
    db.commit()
    db.refresh(section)
    logger.info("Section %s (%s) added to page %s", section.id, section_type.value, page.slug)
    return section


def _get_section(db: Session, section_id: int) -> Section:
    section = db.get(Section, section_id)
    if section is None or not section.is_active:
        raise NotFound(f"Section {section_id} not found")
    return section


def update_section(db: Session, actor: Actor, section_id: int, data: SectionUpdate) -> Section:
    ensure_admin(actor, "edit page content")
    section = _get_section(db, section_id)
    changes = data.model_dump(exclude_unset=True)

    if "content_type" in changes or "payload" in changes:
        content_type = changes.get("content_type") or section.content_type
        payload = changes.get("payload") if changes.get("payload") is not None else section.payload
        section_type, payload = validate_payload(content_type, payload)
        section.content_type = section_type.value
        section.payload = payload
    if changes.get("name") is not None:
        section.name = changes["name"]
    if changes.get("sort_order") is not None:
        section.sort_order = changes["sort_order"]

    db.commit()
    db.refresh(section)
    return section


def delete_section(db: Session, actor: Actor, section_id: int) -> None:
    ensure_admin(actor, "edit page content")
    section = _get_section(db, section_id)
    section.is_active = False
    db.commit()


def resolve_page(db: Session, page_ref: Union[int, str], include_unpublished: bool = False) -> Tuple[Page, List[Section]]:
    page = _get_page(db, page_ref)
    if not page.is_published and not include_unpublished:
        raise NotFound(f"Page '{page_ref}' not found")
    sections = (
        db.query(Section)
        .filter(Section.page_id == page.id, Section.is_active.is_(True))
        .order_by(Section.sort_order.asc(), Section.id.asc())
        .all()
    )
    return page, sections
