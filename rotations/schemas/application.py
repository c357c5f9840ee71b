from typing import Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field, computed_field

from rotations.models.application import ApplicationStatus
from rotations.models.base import MAX_ID

# Presentation projection of the status enum. Derived, never stored.
STATUS_DISPLAY = {
    ApplicationStatus.PENDING: {"label": "Under review", "color": "yellow"},
    ApplicationStatus.WAITLISTED: {"label": "Waitlisted", "color": "blue"},
    ApplicationStatus.ACCEPTED: {"label": "Accepted", "color": "green"},
    ApplicationStatus.REJECTED: {"label": "Not selected", "color": "red"},
}


def status_display(status: ApplicationStatus) -> dict:
    return dict(STATUS_DISPLAY[ApplicationStatus(status)])


class ApplicationCreate(BaseModel):
    program_id: int = Field(..., gt=0, le=MAX_ID)
    cover_letter: Optional[str] = Field(None, max_length=5000)


class ApplicationTransition(BaseModel):
    status: ApplicationStatus
    review_notes: Optional[str] = Field(None, max_length=5000)


class Application(BaseModel):
    id: int
    program_id: int
    applicant_id: str
    status: ApplicationStatus
    cover_letter: Optional[str] = None
    review_notes: Optional[str] = None
    reviewed_by: Optional[str] = None
    created_at: datetime
    status_changed_at: datetime

    @computed_field
    def display(self) -> dict:
        return status_display(self.status)

    model_config = ConfigDict(from_attributes=True)
