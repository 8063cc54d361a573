"""Workload summary models aggregated per user and per project"""
from typing import List

from pydantic import BaseModel


class ProjectWorkload(BaseModel):
    project_id: str
    project_name: str
    allocated_hours: float
    actual_hours: float


class WorkloadSummary(BaseModel):
    """Allocated and logged hours of one user, broken down by project"""

    user_id: str
    user_name: str
    total_allocated_hours: float
    total_actual_hours: float
    projects: List[ProjectWorkload]


class ProjectShare(BaseModel):
    project_id: str
    name: str
    percentage: float
    hours: float


class WorkloadDistribution(BaseModel):
    """Share of a user's capacity taken by each project"""

    user_id: str
    total_capacity: float
    allocated: float
    available: float
    projects: List[ProjectShare]
