from typing import Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field


class ReviewUpsert(BaseModel):
    # Range and length are enforced by services.relations so the caller gets
    # a field-level ValidationError instead of a schema error.
    rating: int
    comment: str
    title: Optional[str] = Field(None, max_length=200)
    is_anonymous: bool = False


class Review(BaseModel):
    id: int
    author_id: Optional[str] = None
    program_id: int
    rating: int
    title: Optional[str] = None
    comment: str
    is_anonymous: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class RatingSummary(BaseModel):
    program_id: int
    count: int
    average: Optional[float] = None
