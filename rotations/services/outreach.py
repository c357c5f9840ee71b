"""Newsletter subscriptions and contact-form queries."""
import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from rotations.core.errors import NotFound
from rotations.core.security import ensure_admin
from rotations.models.base import utc_now
from rotations.models.outreach import ContactQuery, ContactStatus, NewsletterSubscription
from rotations.schemas.auth import Actor
from rotations.schemas.outreach import ContactQueryCreate, ContactResponse

logger = logging.getLogger(__name__)


def _find_subscription(db: Session, email: str) -> Optional[NewsletterSubscription]:
    return db.query(NewsletterSubscription).filter(NewsletterSubscription.email == email).first()


def subscribe(db: Session, email: str) -> NewsletterSubscription:
    """Subscribe ``email``; repeating it, or re-subscribing, is not an error."""
    email = email.strip().lower()
    subscription = _find_subscription(db, email)
    if subscription is None:
        subscription = NewsletterSubscription(email=email)
        db.add(subscription)
        try:
            db.commit()
        except IntegrityError:
            # A concurrent request subscribed the same address first
            db.rollback()
            subscription = _find_subscription(db, email)
            if subscription is None:
                raise
    if not subscription.is_active:
        subscription.is_active = True
        subscription.subscribed_at = utc_now()
        subscription.unsubscribed_at = None
        db.commit()

    db.refresh(subscription)
    return subscription


def unsubscribe(db: Session, email: str) -> None:
    subscription = _find_subscription(db, email.strip().lower())
    if subscription is None or not subscription.is_active:
        return
    subscription.is_active = False
    subscription.unsubscribed_at = utc_now()
    db.commit()


def create_contact_query(db: Session, data: ContactQueryCreate) -> ContactQuery:
    query = ContactQuery(
        name=data.name.strip(),
        email=str(data.email),
        subject=data.subject.strip(),
        message=data.message.strip(),
    )
    db.add(query)
    db.commit()
    db.refresh(query)
    logger.info("Contact query %s received", query.id)
    return query


def list_contact_queries(
    db: Session,
    actor: Actor,
    status: Optional[ContactStatus] = None,
) -> List[ContactQuery]:
    ensure_admin(actor, "read contact queries")
    query = db.query(ContactQuery)
    if status is not None:
        query = query.filter(ContactQuery.status == status)
    return query.order_by(ContactQuery.created_at.desc(), ContactQuery.id.desc()).all()


def respond_to_contact_query(db: Session, actor: Actor, query_id: int, data: ContactResponse) -> ContactQuery:
    ensure_admin(actor, "answer contact queries")
    query = db.get(ContactQuery, query_id)
    if query is None:
        raise NotFound(f"Contact query {query_id} not found")

    query.status = data.status
    if data.response is not None:
        query.response = data.response.strip()
        query.responded_by = actor.id
        query.responded_at = utc_now()
    db.commit()
    db.refresh(query)
    return query
