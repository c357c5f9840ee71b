from typing import Dict
from pydantic import BaseModel


class AnalyticsSummary(BaseModel):
    total_programs: int
    active_programs: int
    total_seats: int
    available_seats: int
    applications_by_status: Dict[str, int]
    programs_by_type: Dict[str, int]
