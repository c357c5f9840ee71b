# rotations/models/team.py
from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime
from rotations.models.base import Base, utc_now


class TeamMember(Base):
    __tablename__ = "team_members"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(150), nullable=False)
    title = Column(String(150), nullable=False)
    bio = Column(Text)
    profile_image = Column(String(500))
    email = Column(String(255))
    linkedin_url = Column(String(500))
    sort_order = Column(Integer, nullable=False, default=0, index=True)
    is_active = Column(Boolean, nullable=False, default=True, index=True)
    created_at = Column(DateTime, default=utc_now, nullable=False)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now, nullable=False)
