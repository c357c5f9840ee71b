from pydantic import BaseModel, Field, ConfigDict
from typing import Optional


class SpecialtyBase(BaseModel):
    name: str = Field(
        ...,
        min_length=2,
        max_length=100,
        examples=["Cardiology", "Internal Medicine"],
        description="Display name of the specialty"
    )
    description: Optional[str] = None


class SpecialtyCreate(SpecialtyBase):
    pass


class Specialty(SpecialtyBase):
    id: int

    model_config = ConfigDict(from_attributes=True)
