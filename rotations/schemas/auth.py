from pydantic import BaseModel, Field
from typing import Optional
from enum import Enum


class ActorRole(str, Enum):
    learner = "learner"
    preceptor = "preceptor"
    admin = "admin"

    @classmethod
    def has_value(cls, value):
        return value in cls._value2member_map_


class TokenData(BaseModel):
    sub: Optional[str] = None
    role: Optional[str] = None


class Actor(BaseModel):
    """Authenticated caller as asserted by the identity provider."""
    id: str = Field(..., min_length=1, max_length=64)
    role: ActorRole

    @property
    def is_admin(self) -> bool:
        return self.role == ActorRole.admin
