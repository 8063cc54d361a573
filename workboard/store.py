"""
Allocation store

In-memory stand-in for the backend that owns workload entries and the
user/project/task directory. Methods are async to match a remote store;
records live for the lifetime of the process only.
"""
import logging
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from workboard import config
from workboard.errors import NotFoundError, ValidationError
from workboard.models import Project, Task, User, WorkloadEntry

logger = logging.getLogger(__name__)

DEMO_SCENARIO = Path(__file__).parent / "data" / "demo_scenario.yaml"


class AllocationStore:
    """Workload entries plus the directory records they reference"""

    def __init__(self):
        self.users: Dict[str, User] = {}
        self.projects: Dict[str, Project] = {}
        self.tasks: Dict[str, Task] = {}
        self.entries: Dict[str, WorkloadEntry] = {}

    # Directory

    async def get_user(self, user_id: str) -> User:
        user = self.users.get(user_id)
        if user is None:
            raise NotFoundError("User", user_id)
        return user

    async def get_project(self, project_id: str) -> Project:
        project = self.projects.get(project_id)
        if project is None:
            raise NotFoundError("Project", project_id)
        return project

    async def get_task(self, task_id: str) -> Task:
        task = self.tasks.get(task_id)
        if task is None:
            raise NotFoundError("Task", task_id)
        return task

    async def save_task(self, task: Task) -> Task:
        self.tasks[task.id] = task
        return task

    async def user_names(self) -> Dict[str, str]:
        return {user_id: user.name for user_id, user in self.users.items()}

    async def project_names(self) -> Dict[str, str]:
        return {project_id: project.name for project_id, project in self.projects.items()}

    # Workload entries

    async def query_entries(
        self,
        user_id: Optional[str] = None,
        project_id: Optional[str] = None,
        task_id: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> List[WorkloadEntry]:
        """Entries matching every given filter; dates are inclusive bounds"""
        results = []
        for entry in self.entries.values():
            if user_id is not None and entry.user_id != user_id:
                continue
            if project_id is not None and entry.project_id != project_id:
                continue
            if task_id is not None and entry.task_id != task_id:
                continue
            if start_date is not None and entry.date < start_date:
                continue
            if end_date is not None and entry.date > end_date:
                continue
            results.append(entry)
        results.sort(key=lambda e: (e.date, e.user_id))
        return results

    async def get_entry(self, entry_id: str) -> WorkloadEntry:
        entry = self.entries.get(entry_id)
        if entry is None:
            raise NotFoundError("Workload entry", entry_id)
        return entry

    async def put_entry(self, entry: WorkloadEntry) -> WorkloadEntry:
        self.entries[entry.id] = entry
        return entry

    async def delete_entry(self, entry_id: str) -> None:
        if self.entries.pop(entry_id, None) is None:
            raise NotFoundError("Workload entry", entry_id)

    # Seeding

    def load_scenario(self, data: Dict[str, Any]) -> Dict[str, int]:
        """
        Load users, projects, tasks and entries from a scenario mapping.

        Returns:
            Count of records loaded per kind

        Raises:
            ValidationError: If a record does not match its model
        """
        loaders = [
            ("users", User, self.users),
            ("projects", Project, self.projects),
            ("tasks", Task, self.tasks),
            ("entries", WorkloadEntry, self.entries),
        ]
        counts = {}
        for key, model, target in loaders:
            records = data.get(key) or []
            for record in records:
                try:
                    item = model.model_validate(record)
                except ValueError as e:
                    raise ValidationError(f"Invalid {key} record in scenario: {e}")
                target[item.id] = item
            counts[key] = len(records)
        return counts

    def load_scenario_file(self, path: Union[str, Path]) -> Dict[str, int]:
        """Load a YAML scenario file"""
        path = Path(path)
        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except FileNotFoundError:
            raise NotFoundError("Scenario file", str(path))
        except yaml.YAMLError as e:
            raise ValidationError(f"Error parsing scenario file {path}: {e}")

        counts = self.load_scenario(data)
        logger.info(f"Loaded scenario {path.name}: {counts}")
        return counts

    def clear(self) -> None:
        self.users.clear()
        self.projects.clear()
        self.tasks.clear()
        self.entries.clear()


# Process-wide store (initialized on app startup)
_store: Optional[AllocationStore] = None


def init_store() -> AllocationStore:
    """Create the store and load WORKBOARD_SEED_FILE when configured"""
    global _store
    _store = AllocationStore()
    if config.WORKBOARD_SEED_FILE:
        _store.load_scenario_file(config.WORKBOARD_SEED_FILE)
    return _store


def get_store() -> AllocationStore:
    """
    Dependency for FastAPI endpoints to get the allocation store.

    Usage in FastAPI:
        @router.get("/entries")
        async def list_entries(store: AllocationStore = Depends(get_store)):
            return await store.query_entries()
    """
    global _store
    if _store is None:
        _store = AllocationStore()
    return _store
