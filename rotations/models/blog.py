# rotations/models/blog.py
from sqlalchemy import Column, Integer, String, Text, DateTime, JSON, Enum as SQLEnum
from enum import Enum as PyEnum
from rotations.models.base import Base, utc_now, enum_values


class BlogPostStatus(str, PyEnum):
    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"


class BlogCategory(Base):
    __tablename__ = "blog_categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), unique=True, nullable=False)
    description = Column(Text)
    created_at = Column(DateTime, default=utc_now, nullable=False)


class BlogPost(Base):
    __tablename__ = "blog_posts"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(200), nullable=False)
    slug = Column(String(200), unique=True, nullable=False, index=True)
    excerpt = Column(Text)
    content = Column(Text, nullable=False)
    author = Column(String(150), nullable=False)
    # Category name rather than a key so renaming stays an admin chore
    category = Column(String(100), nullable=False, index=True)
    tags = Column(JSON, nullable=False, default=list)
    featured_image = Column(String(500))
    read_time = Column(Integer)
    status = Column(
        SQLEnum(BlogPostStatus, name="blog_post_status", native_enum=False, length=20,
                values_callable=enum_values),
        nullable=False,
        default=BlogPostStatus.DRAFT,
        index=True,
    )
    published_at = Column(DateTime)
    created_by = Column(String(64))
    created_at = Column(DateTime, default=utc_now, nullable=False)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now, nullable=False)
