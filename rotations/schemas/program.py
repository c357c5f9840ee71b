from typing import List, Optional
from datetime import date, datetime
from decimal import Decimal
from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator

from rotations.models.base import MAX_ID
from rotations.models.program import ProgramType
from rotations.schemas.specialty import Specialty

MAX_SEATS = 10_000
MAX_DURATION_WEEKS = 520


class ProgramBase(BaseModel):
    title: str = Field(..., min_length=3, max_length=200, examples=["Cardiology Observership"])
    type: ProgramType
    specialty_id: Optional[int] = Field(None, ge=1, le=MAX_ID)
    hospital_name: str = Field(..., min_length=2, max_length=200)
    mentor_name: str = Field(..., min_length=2, max_length=150)
    mentor_title: Optional[str] = Field(None, max_length=150)
    location: str = Field(..., min_length=2, max_length=200, examples=["Boston, USA"])
    country: str = Field(..., min_length=2, max_length=100)
    city: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1)
    requirements: List[str] = Field(default_factory=list)
    duration_weeks: int = Field(..., gt=0, le=MAX_DURATION_WEEKS, description="Length of the rotation in weeks")
    start_date: date
    fee: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2,
                                   description="Leave empty for free programs")
    currency: str = Field("USD", min_length=3, max_length=3)
    is_featured: bool = False
    preceptor_id: Optional[str] = Field(None, max_length=64)


class ProgramCreate(ProgramBase):
    total_seats: int = Field(..., gt=0, le=MAX_SEATS)
    available_seats: Optional[int] = Field(
        None,
        ge=0,
        description="Defaults to total_seats"
    )

    @model_validator(mode="after")
    def check_seats(self):
        if self.available_seats is not None and self.available_seats > self.total_seats:
            raise ValueError("available_seats cannot exceed total_seats")
        return self


class ProgramUpdate(BaseModel):
    """Descriptive fields only; seat counters change through /seats."""
    title: Optional[str] = Field(None, min_length=3, max_length=200)
    type: Optional[ProgramType] = None
    specialty_id: Optional[int] = Field(None, ge=1, le=MAX_ID)
    hospital_name: Optional[str] = Field(None, min_length=2, max_length=200)
    mentor_name: Optional[str] = Field(None, min_length=2, max_length=150)
    mentor_title: Optional[str] = Field(None, max_length=150)
    location: Optional[str] = Field(None, min_length=2, max_length=200)
    country: Optional[str] = Field(None, min_length=2, max_length=100)
    city: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, min_length=1)
    requirements: Optional[List[str]] = None
    duration_weeks: Optional[int] = Field(None, gt=0, le=MAX_DURATION_WEEKS)
    start_date: Optional[date] = None
    fee: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    is_featured: Optional[bool] = None
    preceptor_id: Optional[str] = Field(None, max_length=64)


class SeatResize(BaseModel):
    total_seats: int = Field(..., gt=0, le=MAX_SEATS)


class ProgramActivation(BaseModel):
    is_active: bool


class ProgramFilter(BaseModel):
    specialty: Optional[str] = None
    location: Optional[str] = None
    type: Optional[ProgramType] = None
    min_duration: Optional[int] = Field(None, gt=0)
    max_duration: Optional[int] = Field(None, gt=0)
    is_free: Optional[bool] = None
    search: Optional[str] = None


class Program(ProgramBase):
    id: int
    total_seats: int
    available_seats: int
    is_active: bool
    specialty: Optional[Specialty] = None
    created_at: datetime
    updated_at: datetime

    @computed_field
    def is_free(self) -> bool:
        return self.fee is None or self.fee == 0

    model_config = ConfigDict(from_attributes=True)


class ProgramPaginated(BaseModel):
    total: int
    items: List[Program]
    skip: int
    limit: int
    has_more: bool
