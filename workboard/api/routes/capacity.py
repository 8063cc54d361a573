"""
Capacity API Endpoints

GET  /api/v1/capacity/{user_id} - Capacity of a user over a window
POST /api/v1/capacity/plan-distribution - Plan per-day hours for a date range
POST /api/v1/capacity/bucket-by-day - Fold workload entries into a calendar map
"""
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Path, Query
from pydantic import BaseModel, Field

from workboard.models import CapacityInfo, DistributionStrategy, WorkloadEntry
from workboard.services.capacity_calculator import bucket_by_day
from workboard.services.calendar_day import format_day, iter_days
from workboard.services.distribution_planner import plan_distribution
from workboard.services.task_workload_service import TaskWorkloadService
from workboard.store import AllocationStore, get_store

router = APIRouter(prefix="/api/v1/capacity", tags=["capacity"])


class CapacityResponse(BaseModel):
    """Response for GET /capacity/{user_id}"""
    data: CapacityInfo
    metadata: Dict[str, Any]


class DistributionRequest(BaseModel):
    """Request for POST /capacity/plan-distribution"""
    total_hours: float = Field(..., ge=0)
    start_date: date
    end_date: date
    strategy: DistributionStrategy = DistributionStrategy.EVEN
    custom_values: Optional[List[float]] = None
    granularity: Optional[float] = Field(None, gt=0)


class DailyHours(BaseModel):
    date: str
    hours: float


class DistributionResponse(BaseModel):
    data: List[DailyHours]
    metadata: Dict[str, Any]


class BucketRequest(BaseModel):
    entries: List[WorkloadEntry]


class BucketResponse(BaseModel):
    data: Dict[str, Dict[str, float]]
    metadata: Dict[str, Any]


@router.get("/{user_id}", response_model=CapacityResponse)
async def get_user_capacity(
    user_id: str = Path(..., description="User identifier"),
    window_start: Optional[date] = Query(None, description="First day of the window (yyyy-MM-dd)"),
    window_end: Optional[date] = Query(None, description="Last day of the window (yyyy-MM-dd)"),
    store: AllocationStore = Depends(get_store),
):
    """
    Get allocated hours, available hours and utilization of a user.

    Defaults to the current Monday-Sunday week. Unknown users are reported
    with zero capacity rather than a 404.
    """
    info = await TaskWorkloadService(store).get_capacity(user_id, window_start, window_end)

    return CapacityResponse(
        data=info,
        metadata={"timestamp": datetime.utcnow().isoformat()},
    )


@router.post("/plan-distribution", response_model=DistributionResponse)
async def plan_hours_distribution(request: DistributionRequest):
    """
    Spread total_hours over start_date..end_date with the chosen strategy.

    Raises:
        422: If custom values do not match the range length or total
    """
    hours = plan_distribution(
        request.total_hours,
        request.start_date,
        request.end_date,
        request.strategy,
        request.custom_values,
        request.granularity,
    )
    days = iter_days(request.start_date, request.end_date)

    return DistributionResponse(
        data=[DailyHours(date=format_day(day), hours=value) for day, value in zip(days, hours)],
        metadata={
            "strategy": request.strategy.value,
            "total_hours": sum(hours),
            "days": len(hours),
        },
    )


@router.post("/bucket-by-day", response_model=BucketResponse)
async def bucket_entries_by_day(request: BucketRequest):
    """Sum allocated hours per user and calendar day"""
    return BucketResponse(
        data=bucket_by_day(request.entries),
        metadata={"entries": len(request.entries)},
    )
