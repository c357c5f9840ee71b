from datetime import datetime
from pydantic import BaseModel, ConfigDict


class Favorite(BaseModel):
    id: int
    applicant_id: str
    program_id: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class FavoriteCheck(BaseModel):
    program_id: int
    is_favorite: bool
