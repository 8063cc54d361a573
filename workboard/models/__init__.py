"""Pydantic models for workload records and derived capacity data"""
from workboard.models.workload_entry import WorkloadEntry
from workboard.models.directory import User, Project, Task
from workboard.models.capacity import (
    AssignmentSuggestion,
    CapacityInfo,
    CapacityStatus,
    DistributionStrategy,
    WorkloadImpact,
)
from workboard.models.summary import ProjectShare, ProjectWorkload, WorkloadDistribution, WorkloadSummary

__all__ = [
    "WorkloadEntry",
    "User",
    "Project",
    "Task",
    "AssignmentSuggestion",
    "CapacityInfo",
    "CapacityStatus",
    "DistributionStrategy",
    "WorkloadImpact",
    "ProjectShare",
    "ProjectWorkload",
    "WorkloadDistribution",
    "WorkloadSummary",
]
