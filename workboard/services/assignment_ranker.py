"""
Assignment Suggestion Ranker

Ranks candidate assignees by current utilization: the less loaded a
candidate, the higher the score. Scores are only meaningful relative to the
other candidates of the same call.
"""
from dataclasses import dataclass
from typing import Iterable, List, Optional

from workboard import config
from workboard.models import AssignmentSuggestion, CapacityInfo

NEUTRAL_SCORE = 50.0

REASON_UNKNOWN_CAPACITY = "Capacity information unavailable"
REASON_INCOMPLETE_TASK = "Task scheduling information incomplete"


@dataclass(frozen=True)
class Candidate:
    """Candidate assignee; capacity is None when it could not be determined"""

    user_id: str
    user_name: str
    capacity: Optional[CapacityInfo] = None


def recommendation_score(utilization_rate: float) -> float:
    """Strictly decreasing in utilization: 100 when idle, 50 at full capacity"""
    return round(100.0 / (1.0 + max(0.0, utilization_rate)), 2)


def recommendation_reason(utilization_rate: float) -> str:
    if utilization_rate < 0.5:
        return "Low current workload, good availability"
    elif utilization_rate < config.BUSY_THRESHOLD:
        return "Moderate workload, good fit"
    elif utilization_rate < config.OVER_ALLOCATION_THRESHOLD:
        return "High workload but still available"
    else:
        return "Over-allocated, may cause delays"


def suggest(candidate: Candidate, fallback_capacity: float = 0.0, fallback_reason: str = REASON_UNKNOWN_CAPACITY) -> AssignmentSuggestion:
    """Build the suggestion for a single candidate"""
    capacity = candidate.capacity
    if capacity is None:
        return AssignmentSuggestion(
            user_id=candidate.user_id,
            user_name=candidate.user_name,
            current_capacity=0.0,
            available_capacity=fallback_capacity,
            utilization_rate=None,
            recommendation_score=NEUTRAL_SCORE,
            reason=fallback_reason,
        )

    return AssignmentSuggestion(
        user_id=candidate.user_id,
        user_name=candidate.user_name,
        current_capacity=capacity.allocated_hours,
        available_capacity=capacity.available_hours,
        utilization_rate=capacity.utilization_rate,
        recommendation_score=recommendation_score(capacity.utilization_rate),
        reason=recommendation_reason(capacity.utilization_rate),
    )


def rank_candidates(
    candidates: Iterable[Candidate],
    fallback_capacity: float = 0.0,
    fallback_reason: str = REASON_UNKNOWN_CAPACITY,
) -> List[AssignmentSuggestion]:
    """
    Score every candidate and sort by recommendation_score, highest first.

    Candidates without capacity data are kept with NEUTRAL_SCORE, so the
    result has one suggestion per candidate. Ties keep input order.
    """
    suggestions = [suggest(c, fallback_capacity, fallback_reason) for c in candidates]
    return sorted(suggestions, key=lambda s: s.recommendation_score, reverse=True)
