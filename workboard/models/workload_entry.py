"""WorkloadEntry model - one allocation of hours to a task for a user on a day"""
import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from workboard.services.calendar_day import to_calendar_day


class WorkloadEntry(BaseModel):
    """Planned (and optionally logged) hours for one user, task and calendar day"""

    id: str
    user_id: str
    project_id: str
    task_id: str
    date: datetime.date
    allocated_hours: float = Field(..., ge=0)
    # None means "not yet recorded", never zero
    actual_hours: Optional[float] = Field(None, ge=0)

    @field_validator("date", mode="before")
    @classmethod
    def _normalize_date(cls, value: Any) -> datetime.date:
        return to_calendar_day(value)
