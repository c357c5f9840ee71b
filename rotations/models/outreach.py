# rotations/models/outreach.py
from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, Enum as SQLEnum
from enum import Enum as PyEnum
from rotations.models.base import Base, utc_now, enum_values


class ContactStatus(str, PyEnum):
    NEW = "new"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"


class NewsletterSubscription(Base):
    __tablename__ = "newsletter_subscriptions"

    id = Column(Integer, primary_key=True, index=True)
    # Stored lower-cased so one address maps to one row
    email = Column(String(255), unique=True, nullable=False, index=True)
    is_active = Column(Boolean, nullable=False, default=True)
    subscribed_at = Column(DateTime, default=utc_now, nullable=False)
    unsubscribed_at = Column(DateTime)


class ContactQuery(Base):
    __tablename__ = "contact_queries"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(150), nullable=False)
    email = Column(String(255), nullable=False)
    subject = Column(String(200), nullable=False)
    message = Column(Text, nullable=False)
    status = Column(
        SQLEnum(ContactStatus, name="contact_status", native_enum=False, length=20,
                values_callable=enum_values),
        nullable=False,
        default=ContactStatus.NEW,
        index=True,
    )
    response = Column(Text)
    responded_by = Column(String(64))
    responded_at = Column(DateTime)
    created_at = Column(DateTime, default=utc_now, nullable=False)
