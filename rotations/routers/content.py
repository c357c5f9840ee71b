from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import Optional

from rotations.core.security import get_current_admin, get_optional_actor
from rotations.database import get_db
from rotations.routers.params import RowId
from rotations.schemas.auth import Actor
from rotations.schemas.content import Page, PageCreate, ResolvedPage, Section, SectionCreate, SectionUpdate
from rotations.services import content

router = APIRouter(tags=["content"])


@router.post("/pages", response_model=Page, status_code=status.HTTP_201_CREATED)
def create_page(
    page: PageCreate,
    db: Session = Depends(get_db),
    current_admin: Actor = Depends(get_current_admin)
):
    return content.create_page(db, current_admin, page)


@router.get("/pages/{page_ref}", response_model=ResolvedPage)
def resolve_page(
    page_ref: str,
    db: Session = Depends(get_db),
    current_actor: Optional[Actor] = Depends(get_optional_actor)
):
    """Page with its active sections in render order; ``page_ref`` is an id or slug.

    Admins also see unpublished pages.
    """
    include_unpublished = current_actor is not None and current_actor.is_admin
    page, sections = content.resolve_page(db, page_ref, include_unpublished=include_unpublished)
    resolved = ResolvedPage.model_validate(page)
    resolved.sections = [Section.model_validate(s) for s in sections]
    return resolved


@router.post("/pages/{page_id}/sections", response_model=Section, status_code=status.HTTP_201_CREATED)
def create_section(
    page_id: RowId,
    section: SectionCreate,
    db: Session = Depends(get_db),
    current_admin: Actor = Depends(get_current_admin)
):
    return content.create_section(db, current_admin, page_id, section)


@router.patch("/sections/{section_id}", response_model=Section)
def update_section(
    section_id: RowId,
    section: SectionUpdate,
    db: Session = Depends(get_db),
    current_admin: Actor = Depends(get_current_admin)
):
    return content.update_section(db, current_admin, section_id, section)


@router.delete("/sections/{section_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_section(
    section_id: RowId,
    db: Session = Depends(get_db),
    current_admin: Actor = Depends(get_current_admin)
):
    content.delete_section(db, current_admin, section_id)
    return None
