"""
Unit tests for the capacity calculator

Tests utilization formula, zero-capacity guard, status brackets and daily
bucketing of workload entries.
"""
import copy
from datetime import date

import pytest

from workboard.models import CapacityStatus, WorkloadEntry
from workboard.services.capacity_calculator import (
    UNKNOWN_PROJECT,
    bucket_by_day,
    calculate_capacity,
    determine_status,
    summarize_user_workload,
    summarize_users_workload,
    window_capacity,
)


def make_entry(entry_id, user_id, day, hours, project_id="p1", task_id="t1", actual=None):
    return WorkloadEntry(
        id=entry_id,
        user_id=user_id,
        project_id=project_id,
        task_id=task_id,
        date=day,
        allocated_hours=hours,
        actual_hours=actual,
    )


class TestCapacityCalculation:
    """Test CapacityInfo aggregation"""

    def test_utilization_rate(self):
        entries = [make_entry("e1", "u1", "2024-03-04", 6), make_entry("e2", "u1", "2024-03-05", 2)]

        info = calculate_capacity(entries, 40, "u1", "Ana")

        assert info.allocated_hours == 8
        assert info.available_hours == 32
        assert info.utilization_rate == pytest.approx(0.2)
        assert info.is_over_allocated is False
        assert info.status == CapacityStatus.AVAILABLE
        assert info.user_name == "Ana"

    def test_zero_capacity_guard(self):
        """Test utilization = 0 (not NaN/inf) when capacity is zero"""
        info = calculate_capacity([make_entry("e1", "u1", "2024-03-04", 5)], 0, "u1")

        assert info.utilization_rate == 0
        assert info.is_over_allocated is False
        assert info.available_hours == -5

    def test_exactly_full_is_over_allocated(self):
        info = calculate_capacity([make_entry("e1", "u1", "2024-03-04", 8)], 8, "u1")

        assert info.utilization_rate == 1.0
        assert info.is_over_allocated is True
        assert info.status == CapacityStatus.OVER_ALLOCATED

    def test_capacity_below_allocation_is_valid(self):
        """Test negative availability is reported, not rejected"""
        info = calculate_capacity([make_entry("e1", "u1", "2024-03-04", 12)], 10, "u1")

        assert info.available_hours == -2
        assert info.utilization_rate == pytest.approx(1.2)

    def test_no_entries(self):
        info = calculate_capacity([], 40, "u1")

        assert info.allocated_hours == 0
        assert info.utilization_rate == 0
        assert info.status == CapacityStatus.AVAILABLE

    def test_window_capacity_prorated(self):
        assert window_capacity(40, date(2024, 3, 4), date(2024, 3, 10)) == 40
        assert window_capacity(40, date(2024, 3, 4), date(2024, 3, 17)) == 80
        assert window_capacity(35, date(2024, 3, 4), date(2024, 3, 4)) == 5


class TestStatusDetermination:
    """Test utilization brackets used for colour-coding"""

    def test_status_available(self):
        assert determine_status(0.0) == CapacityStatus.AVAILABLE
        assert determine_status(0.79) == CapacityStatus.AVAILABLE

    def test_status_busy(self):
        assert determine_status(0.8) == CapacityStatus.BUSY
        assert determine_status(0.99) == CapacityStatus.BUSY

    def test_status_over_allocated(self):
        assert determine_status(1.0) == CapacityStatus.OVER_ALLOCATED
        assert determine_status(1.5) == CapacityStatus.OVER_ALLOCATED


class TestBucketByDay:
    """Test folding entries into user -> day -> hours"""

    def test_same_day_entries_are_summed(self):
        entries = [make_entry("e1", "u1", "2024-01-01", 4), make_entry("e2", "u1", "2024-01-01", 3)]

        assert bucket_by_day(entries) == {"u1": {"2024-01-01": 7}}

    def test_multiple_users_and_days(self):
        entries = [
            make_entry("e1", "u1", "2024-01-01", 4),
            make_entry("e2", "u1", "2024-01-02", 2.5),
            make_entry("e3", "u2", "2024-01-01", 8, project_id="p2"),
        ]

        assert bucket_by_day(entries) == {
            "u1": {"2024-01-01": 4, "2024-01-02": 2.5},
            "u2": {"2024-01-01": 8},
        }

    def test_idempotent_and_does_not_mutate_input(self):
        entries = [make_entry("e1", "u1", "2024-01-01", 4), make_entry("e2", "u1", "2024-01-01", 3)]
        before = copy.deepcopy(entries)

        first = bucket_by_day(entries)
        second = bucket_by_day(entries)

        assert first == second
        assert entries == before

    def test_plain_date_kept_as_authored(self):
        assert bucket_by_day([make_entry("e1", "u1", "2024-03-10", 5)]) == {"u1": {"2024-03-10": 5}}

    def test_empty_input(self):
        assert bucket_by_day([]) == {}


class TestSummaries:
    """Test per-project workload summaries"""

    def test_user_summary_by_project(self):
        entries = [
            make_entry("e1", "u1", "2024-03-04", 4, project_id="p1", actual=5),
            make_entry("e2", "u1", "2024-03-05", 4, project_id="p1"),
            make_entry("e3", "u1", "2024-03-05", 2, project_id="p2", actual=1.5),
        ]

        summary = summarize_user_workload("u1", entries, "Ana", {"p1": "Portal"})

        assert summary.total_allocated_hours == 10
        assert summary.total_actual_hours == 6.5
        by_project = {p.project_id: p for p in summary.projects}
        assert by_project["p1"].project_name == "Portal"
        assert by_project["p1"].actual_hours == 5, "Unrecorded actual hours are not counted"
        assert by_project["p2"].project_name == UNKNOWN_PROJECT

    def test_users_summary_groups_by_user(self):
        entries = [
            make_entry("e1", "u1", "2024-03-04", 4),
            make_entry("e2", "u2", "2024-03-04", 6),
            make_entry("e3", "u1", "2024-03-05", 1),
        ]

        summaries = summarize_users_workload(entries, {"u1": "Ana"})

        assert [s.user_id for s in summaries] == ["u1", "u2"]
        assert summaries[0].total_allocated_hours == 5
        assert summaries[1].user_name == "Unknown User"
