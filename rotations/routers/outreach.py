from fastapi import APIRouter, Depends, status, Query
from sqlalchemy.orm import Session
from typing import List, Optional

from rotations.core.security import get_current_admin
from rotations.database import get_db
from rotations.models.outreach import ContactStatus
from rotations.routers.params import RowId
from rotations.schemas.auth import Actor
from rotations.schemas.outreach import (
    ContactQuery,
    ContactQueryCreate,
    ContactResponse,
    NewsletterRequest,
    NewsletterSubscription,
)
from rotations.services import outreach

router = APIRouter(tags=["outreach"])


@router.post("/newsletter/subscribe", response_model=NewsletterSubscription)
def subscribe(request: NewsletterRequest, db: Session = Depends(get_db)):
    return outreach.subscribe(db, request.email)


@router.post("/newsletter/unsubscribe", status_code=status.HTTP_204_NO_CONTENT)
def unsubscribe(request: NewsletterRequest, db: Session = Depends(get_db)):
    outreach.unsubscribe(db, request.email)
    return None


@router.post("/contact", response_model=ContactQuery, status_code=status.HTTP_201_CREATED)
def create_contact_query(query: ContactQueryCreate, db: Session = Depends(get_db)):
    return outreach.create_contact_query(db, query)


@router.get("/contact", response_model=List[ContactQuery])
def read_contact_queries(
    status: Optional[ContactStatus] = Query(None),
    db: Session = Depends(get_db),
    current_admin: Actor = Depends(get_current_admin)
):
    return outreach.list_contact_queries(db, current_admin, status=status)


@router.patch("/contact/{query_id}", response_model=ContactQuery)
def respond_to_contact_query(
    query_id: RowId,
    response: ContactResponse,
    db: Session = Depends(get_db),
    current_admin: Actor = Depends(get_current_admin)
):
    return outreach.respond_to_contact_query(db, current_admin, query_id, response)
