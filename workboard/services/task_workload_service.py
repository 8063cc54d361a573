"""
Task/Workload Integration Service

Capacity lookups, assignment impact previews, assignee suggestions and task
assignment with automatic workload allocation.

Capacity over a window is the user's weekly capacity prorated to the number
of days in the window. Utilization at or above OVER_ALLOCATION_THRESHOLD is
flagged, never blocked.
"""
import logging
import time
import uuid
from datetime import date
from typing import List, Optional, Sequence, Tuple

from workboard import config
from workboard.errors import NotFoundError, ValidationError
from workboard.models import (
    AssignmentSuggestion,
    CapacityInfo,
    DistributionStrategy,
    Task,
    WorkloadEntry,
    WorkloadImpact,
)
from workboard.services import capacity_calculator
from workboard.services.assignment_ranker import REASON_INCOMPLETE_TASK, Candidate, rank_candidates
from workboard.services.calendar_day import DayLike, current_week_bounds, format_day, iter_days, to_calendar_day
from workboard.services.distribution_planner import plan_allocations
from workboard.store import AllocationStore

logger = logging.getLogger(__name__)


class TaskWorkloadService:
    """Workload-aware operations on tasks and their candidate assignees"""

    def __init__(self, store: AllocationStore):
        self.store = store

    @staticmethod
    def _window(window_start: Optional[DayLike], window_end: Optional[DayLike]) -> Tuple[date, date]:
        week_start, week_end = current_week_bounds()
        start = to_calendar_day(window_start) if window_start is not None else week_start
        end = to_calendar_day(window_end) if window_end is not None else week_end
        if end < start:
            raise ValidationError(f"Window end {end.isoformat()} is before window start {start.isoformat()}")
        return start, end

    async def _weekly_capacity(self, user_id: str) -> float:
        try:
            return (await self.store.get_user(user_id)).weekly_capacity_hours
        except NotFoundError:
            return config.STANDARD_WEEKLY_CAPACITY

    async def get_capacity(
        self,
        user_id: str,
        window_start: Optional[DayLike] = None,
        window_end: Optional[DayLike] = None,
        exclude_task_id: Optional[str] = None,
    ) -> CapacityInfo:
        """
        Capacity of a user over a window (default: current Monday-Sunday week).

        Args:
            user_id: User to look up
            window_start: First day of the window
            window_end: Last day of the window
            exclude_task_id: Leave out entries of this task, so a task being
                re-planned is not counted twice

        Returns:
            CapacityInfo. Unknown users get zero capacity and utilization.
        """
        start_time = time.time()
        start, end = self._window(window_start, window_end)

        try:
            user = await self.store.get_user(user_id)
        except NotFoundError:
            logger.warning(f"No capacity data for user {user_id}, reporting zero capacity")
            return capacity_calculator.calculate_capacity([], 0, user_id)

        entries = await self.store.query_entries(user_id=user_id, start_date=start, end_date=end)
        if exclude_task_id is not None:
            entries = [e for e in entries if e.task_id != exclude_task_id]

        total_capacity = capacity_calculator.window_capacity(user.weekly_capacity_hours, start, end)
        info = capacity_calculator.calculate_capacity(entries, total_capacity, user_id, user.name)

        duration_ms = (time.time() - start_time) * 1000
        logger.debug(
            f"Capacity for {user_id} {start.isoformat()}..{end.isoformat()}: "
            f"{duration_ms:.2f}ms, utilization={info.utilization_rate:.2%}, status={info.status.value}"
        )
        return info

    async def get_workload_impact(self, task_id: str, assignee_id: str) -> WorkloadImpact:
        """
        Preview the load on assignee_id if the task were assigned to them.

        Raises:
            NotFoundError: If the task does not exist
        """
        task = await self.store.get_task(task_id)

        if not task.is_scheduled():
            return WorkloadImpact(
                current_workload=0,
                new_workload=0,
                capacity_utilization=0,
                is_over_allocated=False,
                affected_dates=[],
            )

        entries = await self.store.query_entries(
            user_id=assignee_id, start_date=task.start_date, end_date=task.end_date
        )
        # Hours already planned for this task are replaced, not added to
        current_workload = sum(e.allocated_hours for e in entries if e.task_id != task.id)
        new_workload = current_workload + task.estimated_hours

        period_capacity = capacity_calculator.window_capacity(
            await self._weekly_capacity(assignee_id), task.start_date, task.end_date
        )
        capacity_utilization = capacity_calculator.utilization(new_workload, period_capacity)
        is_over_allocated = capacity_utilization >= config.OVER_ALLOCATION_THRESHOLD

        if is_over_allocated:
            logger.warning(
                f"Assigning task {task_id} to {assignee_id} would reach "
                f"{capacity_utilization:.1%} of capacity"
            )

        return WorkloadImpact(
            current_workload=current_workload,
            new_workload=new_workload,
            capacity_utilization=capacity_utilization,
            is_over_allocated=is_over_allocated,
            affected_dates=[format_day(day) for day in iter_days(task.start_date, task.end_date)],
        )

    async def get_assignment_suggestions(
        self, task_id: str, candidate_ids: Optional[Sequence[str]] = None
    ) -> List[AssignmentSuggestion]:
        """
        Rank candidate assignees for a task, least loaded first.

        Args:
            task_id: Task to staff
            candidate_ids: Candidate pool; defaults to the task's project members

        Returns:
            One suggestion per candidate, sorted by recommendation_score

        Raises:
            NotFoundError: If the task does not exist
        """
        task = await self.store.get_task(task_id)

        if candidate_ids is None:
            try:
                candidate_ids = (await self.store.get_project(task.project_id)).member_ids
            except NotFoundError:
                logger.warning(f"Project {task.project_id} of task {task_id} not found, no candidates")
                candidate_ids = []

        user_names = await self.store.user_names()

        if not task.is_scheduled():
            candidates = [
                Candidate(user_id, user_names.get(user_id, capacity_calculator.UNKNOWN_USER))
                for user_id in candidate_ids
            ]
            return rank_candidates(
                candidates,
                fallback_capacity=config.STANDARD_WEEKLY_CAPACITY,
                fallback_reason=REASON_INCOMPLETE_TASK,
            )

        candidates = []
        for user_id in candidate_ids:
            if user_id not in user_names:
                # Kept with unknown capacity so the pool stays complete
                candidates.append(Candidate(user_id, capacity_calculator.UNKNOWN_USER))
                continue
            capacity = await self.get_capacity(user_id, task.start_date, task.end_date, exclude_task_id=task.id)
            candidates.append(Candidate(user_id, capacity.user_name, capacity))

        suggestions = rank_candidates(candidates)
        logger.info(f"Ranked {len(suggestions)} candidates for task {task_id}")
        return suggestions

    async def assign_task_with_workload(
        self,
        task_id: str,
        assignee_id: str,
        strategy: DistributionStrategy = DistributionStrategy.EVEN,
        custom_distribution: Optional[Sequence[float]] = None,
        auto_allocate: bool = True,
    ) -> Tuple[Task, List[WorkloadEntry]]:
        """
        Assign a task and allocate its estimated hours to the assignee.

        Entries are only created when the task has an estimate and a date
        range; days planned at zero hours get no entry. Existing entries of
        the task are replaced.

        Raises:
            NotFoundError: If the task does not exist
            ValidationError: If the distribution cannot be planned
        """
        task = await self.store.get_task(task_id)

        plan = []
        if auto_allocate and task.is_scheduled():
            # Plan before mutating anything so a bad distribution changes nothing
            plan = plan_allocations(
                task.estimated_hours, task.start_date, task.end_date, strategy, custom_distribution
            )

        task = await self.store.save_task(task.model_copy(update={"assignee_id": assignee_id}))

        entries: List[WorkloadEntry] = []
        if plan:
            for existing in await self.store.query_entries(task_id=task.id):
                await self.store.delete_entry(existing.id)

            for day, hours in plan:
                if hours <= 0:
                    continue
                entry = WorkloadEntry(
                    id=str(uuid.uuid4()),
                    user_id=assignee_id,
                    project_id=task.project_id,
                    task_id=task.id,
                    date=day,
                    allocated_hours=hours,
                )
                entries.append(await self.store.put_entry(entry))

        logger.info(
            f"Assigned task {task_id} to {assignee_id} with {len(entries)} workload entries "
            f"({DistributionStrategy(strategy).value})"
        )
        return task, entries

