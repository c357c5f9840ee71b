from typing import Annotated, Any, Dict, List, Optional
from datetime import datetime
from pydantic import AnyHttpUrl, BaseModel, ConfigDict, Field, StringConstraints, field_validator

from rotations.models.base import MAX_ID
from rotations.models.content import SectionType

NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


# Payload shapes, one per section content type
class ImagePayload(BaseModel):
    url: AnyHttpUrl
    alt_text: Optional[str] = None

    model_config = ConfigDict(extra="forbid")


class RichTextPayload(BaseModel):
    body: NonEmptyStr

    model_config = ConfigDict(extra="forbid")


class ListPayload(BaseModel):
    items: List[NonEmptyStr] = Field(..., min_length=1)

    model_config = ConfigDict(extra="forbid")


class VideoPayload(BaseModel):
    url: AnyHttpUrl
    caption: Optional[str] = None

    model_config = ConfigDict(extra="forbid")


SECTION_PAYLOADS = {
    SectionType.IMAGE: ImagePayload,
    SectionType.RICH_TEXT: RichTextPayload,
    SectionType.LIST: ListPayload,
    SectionType.VIDEO: VideoPayload,
}


SLUG_PATTERN = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"


class PageCreate(BaseModel):
    slug: str = Field(..., min_length=1, max_length=100, pattern=SLUG_PATTERN, examples=["about-us"])
    title: str = Field(..., min_length=1, max_length=200)
    is_published: bool = True

    @field_validator("slug")
    @classmethod
    def slug_is_not_an_id(cls, value: str) -> str:
        # All-digit references resolve as page ids
        if value.isdigit():
            raise ValueError("slug must contain at least one letter")
        return value


class SectionCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100, examples=["hero"])
    # Plain strings so an unknown tag reaches the resolver and is reported
    # as an invalid section payload.
    content_type: str
    payload: Dict[str, Any]
    sort_order: Optional[int] = Field(None, ge=0, le=MAX_ID)


class SectionUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    content_type: Optional[str] = None
    payload: Optional[Dict[str, Any]] = None
    sort_order: Optional[int] = Field(None, ge=0, le=MAX_ID)


class Section(BaseModel):
    id: int
    page_id: int
    name: str
    content_type: SectionType
    payload: Dict[str, Any]
    sort_order: int

    model_config = ConfigDict(from_attributes=True)


class Page(BaseModel):
    id: int
    slug: str
    title: str
    is_published: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ResolvedPage(Page):
    sections: List[Section] = Field(default_factory=list)
