from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from rotations.core.security import get_current_admin
from rotations.database import get_db
from rotations.schemas.analytics import AnalyticsSummary
from rotations.schemas.auth import Actor
from rotations.services import analytics

router = APIRouter(prefix="/analytics", tags=["analytics"])


@router.get("/summary", response_model=AnalyticsSummary)
def read_summary(
    db: Session = Depends(get_db),
    current_admin: Actor = Depends(get_current_admin)
):
    return analytics.summary(db)
