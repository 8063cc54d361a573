"""Directory records referenced by workload entries: users, projects and tasks"""
from datetime import date
from typing import Any, List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from workboard import config
from workboard.services.calendar_day import to_calendar_day


class User(BaseModel):
    """Team member with a nominal weekly hour budget"""

    id: str
    name: str
    weekly_capacity_hours: float = Field(default_factory=lambda: config.STANDARD_WEEKLY_CAPACITY, ge=0)


class Project(BaseModel):
    """Project and the members eligible for its tasks"""

    id: str
    name: str
    member_ids: List[str] = Field(default_factory=list)


class Task(BaseModel):
    """Task with the scheduling fields used for workload planning"""

    id: str
    project_id: str
    name: str = ""
    assignee_id: Optional[str] = None
    estimated_hours: Optional[float] = Field(None, ge=0)
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def _normalize_dates(cls, value: Any) -> Optional[date]:
        if value is None:
            return None
        return to_calendar_day(value)

    @model_validator(mode="after")
    def _check_range(self) -> "Task":
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self

    def is_scheduled(self) -> bool:
        """True when the task has an estimate and a full date range"""
        return bool(self.estimated_hours) and self.start_date is not None and self.end_date is not None
