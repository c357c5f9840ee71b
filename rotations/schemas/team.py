from typing import List, Optional
from datetime import datetime
from pydantic import AnyHttpUrl, BaseModel, ConfigDict, EmailStr, Field

from rotations.models.base import MAX_ID


class TeamMemberBase(BaseModel):
    name: str = Field(..., min_length=2, max_length=150, examples=["Dr. Sarah Chen"])
    title: str = Field(..., min_length=2, max_length=150, examples=["Medical Director"])
    bio: Optional[str] = None
    profile_image: Optional[AnyHttpUrl] = None
    email: Optional[EmailStr] = None
    linkedin_url: Optional[AnyHttpUrl] = None


class TeamMemberCreate(TeamMemberBase):
    sort_order: Optional[int] = Field(None, ge=0, le=MAX_ID, description="Defaults to the end of the list")


class TeamMemberUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=2, max_length=150)
    title: Optional[str] = Field(None, min_length=2, max_length=150)
    bio: Optional[str] = None
    profile_image: Optional[AnyHttpUrl] = None
    email: Optional[EmailStr] = None
    linkedin_url: Optional[AnyHttpUrl] = None


class TeamReorder(BaseModel):
    member_ids: List[int] = Field(..., min_length=1, description="Every active member id, in display order")


class TeamMember(BaseModel):
    id: int
    name: str
    title: str
    bio: Optional[str] = None
    profile_image: Optional[str] = None
    email: Optional[str] = None
    linkedin_url: Optional[str] = None
    sort_order: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
