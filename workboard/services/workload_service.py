"""
Workload Service

Workload entry CRUD and per-user / per-project summaries on top of the
allocation store. Aggregation itself is delegated to capacity_calculator.
"""
import logging
import time
import uuid
from datetime import date, timedelta
from typing import Any, Dict, List, Mapping, Optional

from pydantic import ValidationError as ModelValidationError

from workboard import config
from workboard.errors import NotFoundError, ValidationError
from workboard.models import ProjectShare, WorkloadDistribution, WorkloadEntry, WorkloadSummary
from workboard.services import capacity_calculator
from workboard.services.calendar_day import DayLike, to_calendar_day
from workboard.store import AllocationStore

logger = logging.getLogger(__name__)

DISTRIBUTION_LOOKBACK_DAYS = 30

EDITABLE_FIELDS = {"user_id", "project_id", "task_id", "date", "allocated_hours", "actual_hours"}


def _bound(value: Optional[DayLike]) -> Optional[date]:
    return to_calendar_day(value) if value is not None else None


class WorkloadService:
    """Workload entries and summaries for users and projects"""

    def __init__(self, store: AllocationStore):
        self.store = store

    async def get_user_workload_summary(
        self,
        user_id: str,
        start_date: Optional[DayLike] = None,
        end_date: Optional[DayLike] = None,
    ) -> WorkloadSummary:
        """
        Allocated and actual hours of a user per project in a window.

        An unknown user yields an empty summary rather than an error.
        """
        try:
            user = await self.store.get_user(user_id)
        except NotFoundError:
            logger.info(f"Workload summary requested for unknown user {user_id}")
            return WorkloadSummary(
                user_id=user_id,
                user_name=capacity_calculator.UNKNOWN_USER,
                total_allocated_hours=0,
                total_actual_hours=0,
                projects=[],
            )

        entries = await self.store.query_entries(
            user_id=user_id, start_date=_bound(start_date), end_date=_bound(end_date)
        )
        return capacity_calculator.summarize_user_workload(
            user_id,
            entries,
            user_name=user.name,
            project_names=await self.store.project_names(),
        )

    async def get_team_workload(
        self,
        project_id: str,
        start_date: Optional[DayLike] = None,
        end_date: Optional[DayLike] = None,
    ) -> List[WorkloadSummary]:
        """One summary per user with hours on the project"""
        entries = await self.store.query_entries(
            project_id=project_id, start_date=_bound(start_date), end_date=_bound(end_date)
        )
        summaries = capacity_calculator.summarize_users_workload(
            entries,
            user_names=await self.store.user_names(),
            project_names=await self.store.project_names(),
        )
        logger.info(f"Team workload for project {project_id}: {len(summaries)} users, {len(entries)} entries")
        return summaries

    async def get_all_projects_team_workload(
        self,
        start_date: Optional[DayLike] = None,
        end_date: Optional[DayLike] = None,
    ) -> List[WorkloadSummary]:
        """Summaries for every user across all projects"""
        entries = await self.store.query_entries(start_date=_bound(start_date), end_date=_bound(end_date))
        return capacity_calculator.summarize_users_workload(
            entries,
            user_names=await self.store.user_names(),
            project_names=await self.store.project_names(),
        )

    async def get_team_daily_workload(
        self,
        project_id: str,
        start_date: Optional[DayLike] = None,
        end_date: Optional[DayLike] = None,
    ) -> capacity_calculator.DailyWorkload:
        """user -> day -> hours for one project"""
        entries = await self.store.query_entries(
            project_id=project_id, start_date=_bound(start_date), end_date=_bound(end_date)
        )
        return capacity_calculator.bucket_by_day(entries)

    async def get_all_projects_daily_workload(
        self,
        start_date: Optional[DayLike] = None,
        end_date: Optional[DayLike] = None,
    ) -> capacity_calculator.DailyWorkload:
        """user -> day -> hours across all projects"""
        entries = await self.store.query_entries(start_date=_bound(start_date), end_date=_bound(end_date))
        return capacity_calculator.bucket_by_day(entries)

    async def allocate_workload(self, allocation: Mapping[str, Any]) -> WorkloadEntry:
        """
        Create a workload entry.

        Args:
            allocation: user_id, project_id, task_id, and optionally date
                (defaults to today), allocated_hours (defaults to
                DEFAULT_ALLOCATED_HOURS) and actual_hours

        Returns:
            The created entry

        Raises:
            ValidationError: If required fields are missing or out of range
        """
        data = {key: value for key, value in allocation.items() if value is not None}
        data.setdefault("date", date.today())
        data.setdefault("allocated_hours", config.DEFAULT_ALLOCATED_HOURS)
        data["id"] = str(uuid.uuid4())

        entry = self._build_entry(data)
        await self.store.put_entry(entry)

        logger.info(
            f"Allocated {entry.allocated_hours}h to user {entry.user_id} "
            f"on task {entry.task_id} for {entry.date.isoformat()}"
        )
        return entry

    async def get_workload_entries(
        self,
        user_id: str,
        start_date: Optional[DayLike] = None,
        end_date: Optional[DayLike] = None,
    ) -> List[WorkloadEntry]:
        return await self.store.query_entries(
            user_id=user_id, start_date=_bound(start_date), end_date=_bound(end_date)
        )

    async def get_task_workload_entries(
        self,
        task_id: str,
        start_date: Optional[DayLike] = None,
        end_date: Optional[DayLike] = None,
    ) -> List[WorkloadEntry]:
        return await self.store.query_entries(
            task_id=task_id, start_date=_bound(start_date), end_date=_bound(end_date)
        )

    async def update_actual_hours(self, entry_id: str, actual_hours: Optional[float]) -> WorkloadEntry:
        """Record logged hours on an entry; None clears them back to "not recorded" """
        entry = await self.store.get_entry(entry_id)
        updated = self._build_entry({**entry.model_dump(), "actual_hours": actual_hours})
        return await self.store.put_entry(updated)

    async def update_workload_entry(self, entry_id: str, changes: Mapping[str, Any]) -> WorkloadEntry:
        """
        Apply a partial update to an entry and return the updated record.

        Raises:
            NotFoundError: If the entry does not exist
            ValidationError: If a field is not editable or a value is invalid
        """
        unknown = set(changes) - EDITABLE_FIELDS
        if unknown:
            raise ValidationError(f"Fields cannot be updated: {sorted(unknown)}")

        entry = await self.store.get_entry(entry_id)
        updated = self._build_entry({**entry.model_dump(), **changes})
        await self.store.put_entry(updated)

        logger.info(f"Updated workload entry {entry_id}: {sorted(changes)}")
        return updated

    async def delete_workload_entry(self, entry_id: str) -> None:
        await self.store.delete_entry(entry_id)
        logger.info(f"Deleted workload entry {entry_id}")

    async def get_workload_distribution(self, user_id: str, today: Optional[date] = None) -> WorkloadDistribution:
        """
        Share of a user's weekly capacity taken by each project over the last 30 days.
        """
        start_time = time.time()

        today = today or date.today()
        start = today - timedelta(days=DISTRIBUTION_LOOKBACK_DAYS)
        summary = await self.get_user_workload_summary(user_id, start, today)

        try:
            total_capacity = (await self.store.get_user(user_id)).weekly_capacity_hours
        except NotFoundError:
            total_capacity = config.STANDARD_WEEKLY_CAPACITY

        allocated = summary.total_allocated_hours
        projects = [
            ProjectShare(
                project_id=project.project_id,
                name=project.project_name,
                percentage=(project.allocated_hours / total_capacity * 100) if total_capacity > 0 else 0,
                hours=project.allocated_hours,
            )
            for project in summary.projects
        ]

        duration_ms = (time.time() - start_time) * 1000
        logger.debug(f"Workload distribution for {user_id}: {duration_ms:.2f}ms, allocated={allocated}")

        return WorkloadDistribution(
            user_id=user_id,
            total_capacity=total_capacity,
            allocated=allocated,
            available=max(0.0, total_capacity - allocated),
            projects=projects,
        )

    @staticmethod
    def _build_entry(data: Mapping[str, Any]) -> WorkloadEntry:
        try:
            return WorkloadEntry.model_validate(dict(data))
        except ModelValidationError as e:
            raise ValidationError("Invalid workload entry", details=e.errors(include_url=False, include_context=False))
