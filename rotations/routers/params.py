from typing import Annotated

from fastapi import Path

from rotations.models.base import MAX_ID

RowId = Annotated[int, Path(ge=1, le=MAX_ID)]
