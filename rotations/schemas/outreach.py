from typing import Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict, EmailStr, Field

from rotations.models.outreach import ContactStatus


class NewsletterRequest(BaseModel):
    email: EmailStr


class NewsletterSubscription(BaseModel):
    email: str
    is_active: bool
    subscribed_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ContactQueryCreate(BaseModel):
    name: str = Field(..., min_length=2, max_length=150)
    email: EmailStr
    subject: str = Field(..., min_length=2, max_length=200)
    message: str = Field(..., min_length=10, max_length=5000)


class ContactResponse(BaseModel):
    status: ContactStatus
    response: Optional[str] = Field(None, min_length=1)


class ContactQuery(BaseModel):
    id: int
    name: str
    email: str
    subject: str
    message: str
    status: ContactStatus
    response: Optional[str] = None
    responded_by: Optional[str] = None
    responded_at: Optional[datetime] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
