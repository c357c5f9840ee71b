# rotations/models/content.py
from sqlalchemy import Column, Integer, String, Boolean, DateTime, JSON, ForeignKey
from sqlalchemy.orm import relationship
from enum import Enum as PyEnum
from rotations.models.base import Base, utc_now


class SectionType(str, PyEnum):
    IMAGE = "image"
    RICH_TEXT = "richText"
    LIST = "list"
    VIDEO = "video"


class Page(Base):
    __tablename__ = "pages"

    id = Column(Integer, primary_key=True, index=True)
    slug = Column(String(100), unique=True, nullable=False, index=True)
    title = Column(String(200), nullable=False)
    is_published = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=utc_now, nullable=False)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now, nullable=False)

    sections = relationship(
        "Section",
        back_populates="page",
        cascade="all, delete-orphan",
        order_by="[Section.sort_order, Section.id]"
    )


class Section(Base):
    __tablename__ = "sections"

    id = Column(Integer, primary_key=True, index=True)
    page_id = Column(Integer, ForeignKey("pages.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    # Stored as the plain tag string; payload shape is checked on write
    content_type = Column(String(20), nullable=False)
    payload = Column(JSON, nullable=False)
    sort_order = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True, index=True)
    created_at = Column(DateTime, default=utc_now, nullable=False)

    page = relationship("Page", back_populates="sections")
