from typing import List, Optional
from datetime import datetime
from pydantic import AnyHttpUrl, BaseModel, ConfigDict, Field, field_validator

from rotations.models.blog import BlogPostStatus
from rotations.schemas.content import SLUG_PATTERN


class BlogCategoryCreate(BaseModel):
    name: str = Field(..., min_length=2, max_length=100, examples=["Residency Tips"])
    description: Optional[str] = None


class BlogCategory(BlogCategoryCreate):
    id: int

    model_config = ConfigDict(from_attributes=True)


class BlogPostBase(BaseModel):
    title: str = Field(..., min_length=3, max_length=200, examples=["How to ace your first observership"])
    slug: str = Field(..., min_length=1, max_length=200, pattern=SLUG_PATTERN)
    excerpt: Optional[str] = None
    content: str = Field(..., min_length=1)
    author: str = Field(..., min_length=2, max_length=150)
    category: str = Field(..., min_length=2, max_length=100)
    tags: List[str] = Field(default_factory=list)
    featured_image: Optional[AnyHttpUrl] = None
    read_time: Optional[int] = Field(None, gt=0, le=600, description="Minutes")


class BlogPostCreate(BlogPostBase):
    status: BlogPostStatus = BlogPostStatus.DRAFT
    published_at: Optional[datetime] = None

    @field_validator("tags")
    @classmethod
    def strip_tags(cls, value: List[str]) -> List[str]:
        return [tag.strip() for tag in value if tag.strip()]


class BlogPostUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=3, max_length=200)
    slug: Optional[str] = Field(None, min_length=1, max_length=200, pattern=SLUG_PATTERN)
    excerpt: Optional[str] = None
    content: Optional[str] = Field(None, min_length=1)
    author: Optional[str] = Field(None, min_length=2, max_length=150)
    category: Optional[str] = Field(None, min_length=2, max_length=100)
    tags: Optional[List[str]] = None
    featured_image: Optional[AnyHttpUrl] = None
    read_time: Optional[int] = Field(None, gt=0, le=600)
    status: Optional[BlogPostStatus] = None
    published_at: Optional[datetime] = None


class BlogPost(BaseModel):
    id: int
    title: str
    slug: str
    excerpt: Optional[str] = None
    content: str
    author: str
    category: str
    tags: List[str] = Field(default_factory=list)
    featured_image: Optional[str] = None
    read_time: Optional[int] = None
    status: BlogPostStatus
    published_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class BlogStats(BaseModel):
    total: int
    published: int
    draft: int
    archived: int
    categories: int
