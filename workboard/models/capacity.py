"""Derived capacity models - recomputed on demand, never stored"""
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel


class CapacityStatus(str, Enum):
    """Utilization bracket used for colour-coding"""

    AVAILABLE = "available"
    BUSY = "busy"
    OVER_ALLOCATED = "over_allocated"


class DistributionStrategy(str, Enum):
    """Policy for spreading a total hour budget across a date range"""

    EVEN = "even"
    FRONT_LOADED = "front_loaded"
    BACK_LOADED = "back_loaded"
    CUSTOM = "custom"


class CapacityInfo(BaseModel):
    """Allocated hours of one user against their capacity over a window"""

    user_id: str
    user_name: str
    total_capacity: float
    allocated_hours: float
    # May be negative when over-allocated
    available_hours: float
    utilization_rate: float
    is_over_allocated: bool
    status: CapacityStatus


class WorkloadImpact(BaseModel):
    """Preview of assigning a task to a user"""

    current_workload: float
    new_workload: float
    capacity_utilization: float
    is_over_allocated: bool
    affected_dates: List[str]


class AssignmentSuggestion(BaseModel):
    """Ranked candidate assignee"""

    user_id: str
    user_name: str
    current_capacity: float
    available_capacity: float
    utilization_rate: Optional[float] = None  # None when capacity is unknown
    recommendation_score: float
    reason: str
