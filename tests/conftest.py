"""
Shared fixtures

The scenario covers the week of Monday 2024-03-04 to Sunday 2024-03-10:
- u1 (40h/week): 8h on t1 -> 20% utilization
- u2 (40h/week): 32h on a billing task -> 80% utilization
- u3 (20h/week): 7h on t1, two entries on the same day -> 35% utilization
"""
from datetime import date

import pytest
from fastapi.testclient import TestClient

from workboard.store import AllocationStore, get_store

WEEK_START = date(2024, 3, 4)
WEEK_END = date(2024, 3, 10)

SCENARIO = {
    "users": [
        {"id": "u1", "name": "Ana Souza", "weekly_capacity_hours": 40},
        {"id": "u2", "name": "Ben Okafor", "weekly_capacity_hours": 40},
        {"id": "u3", "name": "Cleo Park", "weekly_capacity_hours": 20},
    ],
    "projects": [
        {"id": "p1", "name": "Portal", "member_ids": ["u1", "u2", "u3"]},
        {"id": "p2", "name": "Billing", "member_ids": ["u2"]},
    ],
    "tasks": [
        {
            "id": "t1",
            "project_id": "p1",
            "name": "Login page",
            "assignee_id": "u1",
            "estimated_hours": 20,
            "start_date": "2024-03-04",
            "end_date": "2024-03-08",
        },
        {
            "id": "t2",
            "project_id": "p1",
            "name": "Usage reports",
            "estimated_hours": 10,
            "start_date": "2024-03-04",
            "end_date": "2024-03-10",
        },
        {"id": "t3", "project_id": "p1", "name": "Backlog grooming"},
        {
            "id": "t4",
            "project_id": "p-missing",
            "name": "Orphan",
            "estimated_hours": 8,
            "start_date": "2024-03-04",
            "end_date": "2024-03-05",
        },
    ],
    "entries": [
        {"id": "e1", "user_id": "u1", "project_id": "p1", "task_id": "t1", "date": "2024-03-04", "allocated_hours": 4, "actual_hours": 5},
        {"id": "e2", "user_id": "u1", "project_id": "p1", "task_id": "t1", "date": "2024-03-05", "allocated_hours": 4},
        {"id": "e3", "user_id": "u2", "project_id": "p2", "task_id": "tx", "date": "2024-03-04", "allocated_hours": 8},
        {"id": "e4", "user_id": "u2", "project_id": "p2", "task_id": "tx", "date": "2024-03-05", "allocated_hours": 8},
        {"id": "e5", "user_id": "u2", "project_id": "p2", "task_id": "tx", "date": "2024-03-06", "allocated_hours": 8},
        {"id": "e6", "user_id": "u2", "project_id": "p2", "task_id": "tx", "date": "2024-03-07", "allocated_hours": 8},
        {"id": "e7", "user_id": "u3", "project_id": "p1", "task_id": "t1", "date": "2024-03-04", "allocated_hours": 3},
        {"id": "e8", "user_id": "u3", "project_id": "p1", "task_id": "t1", "date": "2024-03-04", "allocated_hours": 4},
    ],
}


@pytest.fixture
def store():
    """Allocation store loaded with the test scenario"""
    store = AllocationStore()
    store.load_scenario(SCENARIO)
    return store


@pytest.fixture
def client(store):
    """API client bound to the scenario store"""
    from main import app

    app.dependency_overrides[get_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()
