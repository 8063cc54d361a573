"""
Workload Capacity Calculator

Pure functions over already-fetched WorkloadEntry lists:
- calculate_capacity: allocated hours vs. capacity, utilization and status
- bucket_by_day: user -> yyyy-MM-dd -> hours map for calendar grids
- summarize_user_workload / summarize_users_workload: per-project totals

Callers filter entries to the user and window before aggregating; nothing here
filters by identity or performs I/O.
"""
import logging
from collections import defaultdict
from datetime import date
from typing import Dict, Iterable, List, Mapping, Optional

from workboard import config
from workboard.models import CapacityInfo, CapacityStatus, ProjectWorkload, WorkloadEntry, WorkloadSummary
from workboard.services.calendar_day import days_between, format_day

logger = logging.getLogger(__name__)

UNKNOWN_USER = "Unknown User"
UNKNOWN_PROJECT = "Unknown Project"

DailyWorkload = Dict[str, Dict[str, float]]


def determine_status(utilization_rate: float) -> CapacityStatus:
    """
    Map a utilization rate to its colour-coding bracket.

    Args:
        utilization_rate: allocated / capacity, 0 or more

    Returns:
        AVAILABLE below BUSY_THRESHOLD, BUSY below OVER_ALLOCATION_THRESHOLD,
        OVER_ALLOCATED otherwise
    """
    if utilization_rate < config.BUSY_THRESHOLD:
        return CapacityStatus.AVAILABLE
    elif utilization_rate < config.OVER_ALLOCATION_THRESHOLD:
        return CapacityStatus.BUSY
    else:
        return CapacityStatus.OVER_ALLOCATED


def utilization(allocated_hours: float, total_capacity: float) -> float:
    """allocated / capacity, 0 when there is no capacity"""
    return (allocated_hours / total_capacity) if total_capacity > 0 else 0.0


def window_capacity(weekly_capacity_hours: float, start: date, end: date) -> float:
    """Capacity over an inclusive window, prorated from the weekly budget"""
    return weekly_capacity_hours * days_between(start, end) / 7


def calculate_capacity(
    entries: Iterable[WorkloadEntry],
    total_capacity: float,
    user_id: str,
    user_name: str = UNKNOWN_USER,
) -> CapacityInfo:
    """
    Aggregate one user's entries into CapacityInfo.

    Args:
        entries: Entries already filtered to the user and window
        total_capacity: Capacity of the user over the same window
        user_id: User the entries belong to
        user_name: Display name

    Returns:
        CapacityInfo. total_capacity below the allocated hours is a valid
        over-allocated state; zero capacity gives utilization 0.
    """
    total_capacity = max(0.0, float(total_capacity or 0))
    allocated_hours = sum(entry.allocated_hours for entry in entries)
    utilization_rate = utilization(allocated_hours, total_capacity)

    return CapacityInfo(
        user_id=user_id,
        user_name=user_name,
        total_capacity=total_capacity,
        allocated_hours=allocated_hours,
        available_hours=total_capacity - allocated_hours,
        utilization_rate=utilization_rate,
        is_over_allocated=utilization_rate >= config.OVER_ALLOCATION_THRESHOLD,
        status=determine_status(utilization_rate),
    )


def bucket_by_day(entries: Iterable[WorkloadEntry]) -> DailyWorkload:
    """
    Fold entries into {user_id: {"yyyy-MM-dd": total_hours}}.

    Entries for the same user and day are summed. Dates are read through
    format_day so a plain "yyyy-MM-dd" is kept as authored.
    """
    daily: Dict[str, Dict[str, float]] = defaultdict(lambda: defaultdict(float))

    for entry in entries:
        daily[entry.user_id][format_day(entry.date)] += entry.allocated_hours

    return {user_id: dict(days) for user_id, days in daily.items()}


def summarize_user_workload(
    user_id: str,
    entries: Iterable[WorkloadEntry],
    user_name: str = UNKNOWN_USER,
    project_names: Optional[Mapping[str, str]] = None,
) -> WorkloadSummary:
    """
    Aggregate one user's entries per project.

    Unrecorded actual hours are left out of the actual totals.
    """
    project_names = project_names or {}
    allocated: Dict[str, float] = defaultdict(float)
    actual: Dict[str, float] = defaultdict(float)

    for entry in entries:
        allocated[entry.project_id] += entry.allocated_hours
        if entry.actual_hours is not None:
            actual[entry.project_id] += entry.actual_hours

    projects = [
        ProjectWorkload(
            project_id=project_id,
            project_name=project_names.get(project_id, UNKNOWN_PROJECT),
            allocated_hours=hours,
            actual_hours=actual[project_id],
        )
        for project_id, hours in allocated.items()
    ]

    return WorkloadSummary(
        user_id=user_id,
        user_name=user_name,
        total_allocated_hours=sum(p.allocated_hours for p in projects),
        total_actual_hours=sum(p.actual_hours for p in projects),
        projects=projects,
    )


def summarize_users_workload(
    entries: Iterable[WorkloadEntry],
    user_names: Optional[Mapping[str, str]] = None,
    project_names: Optional[Mapping[str, str]] = None,
) -> List[WorkloadSummary]:
    """Group entries by user and summarize each, in first-seen user order"""
    user_names = user_names or {}
    by_user: Dict[str, List[WorkloadEntry]] = defaultdict(list)
    for entry in entries:
        by_user[entry.user_id].append(entry)

    summaries = [
        summarize_user_workload(
            user_id,
            user_entries,
            user_name=user_names.get(user_id, UNKNOWN_USER),
            project_names=project_names,
        )
        for user_id, user_entries in by_user.items()
    ]
    logger.debug(f"Summarized workload for {len(summaries)} users")
    return summaries
