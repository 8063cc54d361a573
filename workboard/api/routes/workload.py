"""
Workload API Endpoints

GET    /api/v1/workload/summary - Per-project workload of a user
GET    /api/v1/workload/team - Per-user workload of a project
GET    /api/v1/workload/team/all - Per-user workload across all projects
GET    /api/v1/workload/team/daily - Daily hours per user for a project
GET    /api/v1/workload/daily - Daily hours per user across all projects
GET    /api/v1/workload/distribution - Share of capacity per project (last 30 days)
GET    /api/v1/workload/entries - Entries of a user in a date range
GET    /api/v1/workload/task/{task_id} - Entries of a task in a date range
POST   /api/v1/workload/allocate - Create a workload entry
PATCH  /api/v1/workload/{entry_id} - Update an entry (or just its actual hours)
DELETE /api/v1/workload/{entry_id} - Delete an entry
"""
from datetime import date
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, Path, Query
from pydantic import BaseModel, Field

from workboard.models import WorkloadDistribution, WorkloadEntry, WorkloadSummary
from workboard.services.workload_service import WorkloadService
from workboard.store import AllocationStore, get_store

router = APIRouter(prefix="/api/v1/workload", tags=["workload"])


def get_workload_service(store: AllocationStore = Depends(get_store)) -> WorkloadService:
    return WorkloadService(store)


class AllocationRequest(BaseModel):
    """Request for POST /workload/allocate"""
    user_id: str
    project_id: str
    task_id: str
    # yyyy-MM-dd or an ISO timestamp (truncated to the local calendar day)
    date: Optional[str] = None
    allocated_hours: Optional[float] = Field(None, ge=0)
    actual_hours: Optional[float] = Field(None, ge=0)


class SummaryResponse(BaseModel):
    summary: WorkloadSummary


class TeamWorkloadResponse(BaseModel):
    workload: List[WorkloadSummary]


class DailyWorkloadResponse(BaseModel):
    daily_workload: Dict[str, Dict[str, float]]


class DistributionResponse(BaseModel):
    distribution: WorkloadDistribution


class EntriesResponse(BaseModel):
    entries: List[WorkloadEntry]


class AllocationResponse(BaseModel):
    allocation: WorkloadEntry


class EntryResponse(BaseModel):
    workload: WorkloadEntry


@router.get("/summary", response_model=SummaryResponse)
async def get_workload_summary(
    user_id: str = Query(..., description="User identifier"),
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    service: WorkloadService = Depends(get_workload_service),
):
    summary = await service.get_user_workload_summary(user_id, start_date, end_date)
    return SummaryResponse(summary=summary)


@router.get("/team", response_model=TeamWorkloadResponse)
async def get_team_workload(
    project_id: str = Query(..., description="Project identifier"),
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    service: WorkloadService = Depends(get_workload_service),
):
    workload = await service.get_team_workload(project_id, start_date, end_date)
    return TeamWorkloadResponse(workload=workload)


@router.get("/team/all", response_model=TeamWorkloadResponse)
async def get_all_projects_team_workload(
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    service: WorkloadService = Depends(get_workload_service),
):
    workload = await service.get_all_projects_team_workload(start_date, end_date)
    return TeamWorkloadResponse(workload=workload)


@router.get("/team/daily", response_model=DailyWorkloadResponse)
async def get_team_daily_workload(
    project_id: str = Query(..., description="Project identifier"),
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    service: WorkloadService = Depends(get_workload_service),
):
    daily = await service.get_team_daily_workload(project_id, start_date, end_date)
    return DailyWorkloadResponse(daily_workload=daily)


@router.get("/daily", response_model=DailyWorkloadResponse)
async def get_all_projects_daily_workload(
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    service: WorkloadService = Depends(get_workload_service),
):
    daily = await service.get_all_projects_daily_workload(start_date, end_date)
    return DailyWorkloadResponse(daily_workload=daily)


@router.get("/distribution", response_model=DistributionResponse)
async def get_workload_distribution(
    user_id: str = Query(..., description="User identifier"),
    service: WorkloadService = Depends(get_workload_service),
):
    distribution = await service.get_workload_distribution(user_id)
    return DistributionResponse(distribution=distribution)


@router.get("/entries", response_model=EntriesResponse)
async def get_workload_entries(
    user_id: str = Query(..., description="User identifier"),
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    service: WorkloadService = Depends(get_workload_service),
):
    entries = await service.get_workload_entries(user_id, start_date, end_date)
    return EntriesResponse(entries=entries)


@router.get("/task/{task_id}", response_model=EntriesResponse)
async def get_task_workload_entries(
    task_id: str = Path(..., description="Task identifier"),
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    service: WorkloadService = Depends(get_workload_service),
):
    entries = await service.get_task_workload_entries(task_id, start_date, end_date)
    return EntriesResponse(entries=entries)


@router.post("/allocate", response_model=AllocationResponse)
async def allocate_workload(
    request: AllocationRequest,
    service: WorkloadService = Depends(get_workload_service),
):
    """
    Create a workload entry.

    Raises:
        422: If the date cannot be read or hours are negative
    """
    entry = await service.allocate_workload(request.model_dump())
    return AllocationResponse(allocation=entry)


@router.patch("/{entry_id}", response_model=EntryResponse)
async def update_workload_entry(
    entry_id: str = Path(..., description="Workload entry identifier"),
    changes: Dict[str, Any] = Body(...),
    service: WorkloadService = Depends(get_workload_service),
):
    """
    Update an entry. A body holding only actual_hours records logged hours.

    Raises:
        404: If the entry does not exist
        422: If a field is not editable or a value is invalid
    """
    if set(changes) == {"actual_hours"}:
        entry = await service.update_actual_hours(entry_id, changes["actual_hours"])
    else:
        entry = await service.update_workload_entry(entry_id, changes)
    return EntryResponse(workload=entry)


@router.delete("/{entry_id}")
async def delete_workload_entry(
    entry_id: str = Path(..., description="Workload entry identifier"),
    service: WorkloadService = Depends(get_workload_service),
):
    """
    Raises:
        404: If the entry does not exist
    """
    await service.delete_workload_entry(entry_id)
    return {"success": True}
