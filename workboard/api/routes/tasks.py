"""
Task Assignment API Endpoints

GET  /api/v1/tasks/{task_id}/impact - Workload impact of assigning a task
GET  /api/v1/tasks/{task_id}/suggestions - Ranked assignee suggestions
POST /api/v1/tasks/{task_id}/assign - Assign with automatic workload allocation
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Path, Query
from pydantic import BaseModel

from workboard.models import AssignmentSuggestion, DistributionStrategy, Task, WorkloadEntry, WorkloadImpact
from workboard.services.task_workload_service import TaskWorkloadService
from workboard.store import AllocationStore, get_store

router = APIRouter(prefix="/api/v1/tasks", tags=["tasks"])


class ImpactResponse(BaseModel):
    data: WorkloadImpact
    metadata: Dict[str, Any]


class SuggestionsResponse(BaseModel):
    data: List[AssignmentSuggestion]
    metadata: Dict[str, Any]


class AssignRequest(BaseModel):
    """Request for POST /tasks/{task_id}/assign"""
    assignee_id: str
    distribution_strategy: DistributionStrategy = DistributionStrategy.EVEN
    custom_distribution: Optional[List[float]] = None
    auto_allocate: bool = True


class AssignmentResult(BaseModel):
    task: Task
    workload_entries: List[WorkloadEntry]


class AssignResponse(BaseModel):
    data: AssignmentResult
    metadata: Dict[str, Any]


@router.get("/{task_id}/impact", response_model=ImpactResponse)
async def get_workload_impact(
    task_id: str = Path(..., description="Task identifier"),
    assignee_id: str = Query(..., description="Candidate assignee"),
    store: AllocationStore = Depends(get_store),
):
    """
    Preview current and post-assignment workload of a candidate.

    Raises:
        404: If the task does not exist
    """
    impact = await TaskWorkloadService(store).get_workload_impact(task_id, assignee_id)

    return ImpactResponse(
        data=impact,
        metadata={
            "task_id": task_id,
            "assignee_id": assignee_id,
            "timestamp": datetime.utcnow().isoformat(),
        },
    )


@router.get("/{task_id}/suggestions", response_model=SuggestionsResponse)
async def get_assignment_suggestions(
    task_id: str = Path(..., description="Task identifier"),
    candidate_id: Optional[List[str]] = Query(None, description="Candidate pool (defaults to project members)"),
    store: AllocationStore = Depends(get_store),
):
    """
    Rank candidates by current utilization, least loaded first.

    Raises:
        404: If the task does not exist
    """
    suggestions = await TaskWorkloadService(store).get_assignment_suggestions(task_id, candidate_id)

    return SuggestionsResponse(
        data=suggestions,
        metadata={
            "task_id": task_id,
            "candidates": len(suggestions),
            "timestamp": datetime.utcnow().isoformat(),
        },
    )


@router.post("/{task_id}/assign", response_model=AssignResponse)
async def assign_task(
    request: AssignRequest,
    task_id: str = Path(..., description="Task identifier"),
    store: AllocationStore = Depends(get_store),
):
    """
    Assign a task and allocate its estimated hours across its date range.

    Raises:
        404: If the task does not exist
        422: If the custom distribution is invalid
    """
    task, entries = await TaskWorkloadService(store).assign_task_with_workload(
        task_id,
        request.assignee_id,
        request.distribution_strategy,
        request.custom_distribution,
        request.auto_allocate,
    )

    return AssignResponse(
        data=AssignmentResult(task=task, workload_entries=entries),
        metadata={
            "strategy": request.distribution_strategy.value,
            "allocated_hours": sum(e.allocated_hours for e in entries),
        },
    )
