"""
Workload Distribution Planner

Spreads a task's estimated hours over an inclusive date range:

- EVEN: equal split, remainder units on the first day(s)
- FRONT_LOADED: linearly decreasing weights, remainder on the first day
- BACK_LOADED: mirror of FRONT_LOADED, remainder on the last day
- CUSTOM: caller-supplied per-day hours, validated against the range

Planning is done in integer units of the granularity (1 hour, or half an hour
when the total is fractional). What does not fill a whole unit goes to the
designated day (first for EVEN and FRONT_LOADED, last for BACK_LOADED), so the
result always sums to the total.
"""
import math
from datetime import date
from typing import List, Optional, Sequence, Tuple

from workboard.errors import ValidationError
from workboard.models import DistributionStrategy
from workboard.services.calendar_day import DayLike, days_between, iter_days, to_calendar_day

HOUR = 1.0
HALF_HOUR = 0.5

_TOLERANCE = 1e-9


def resolve_granularity(total_hours: float, granularity: Optional[float] = None) -> float:
    """Whole hours for whole totals, half hours otherwise, unless given explicitly"""
    if granularity is not None:
        if granularity <= 0:
            raise ValidationError(f"Granularity must be positive, got {granularity}")
        return float(granularity)
    return HOUR if float(total_hours).is_integer() else HALF_HOUR


def _to_units(total_hours: float, granularity: float) -> int:
    """Whole granularity units that fit in total_hours"""
    return int(math.floor(total_hours / granularity + _TOLERANCE))


def _even_units(units: int, days: int) -> List[int]:
    quotient, remainder = divmod(units, days)
    return [quotient + 1 if i < remainder else quotient for i in range(days)]


def _front_loaded_units(units: int, days: int) -> List[int]:
    weights = [days - i for i in range(days)]
    weight_total = sum(weights)
    # Floors of non-increasing weights stay non-increasing
    planned = [units * weight // weight_total for weight in weights]
    planned[0] += units - sum(planned)
    return planned


def _validate_custom(total_hours: float, days: int, custom_values: Optional[Sequence[float]]) -> List[float]:
    if custom_values is None:
        raise ValidationError("Custom distribution requires custom_values")
    values = [float(v) for v in custom_values]
    if len(values) != days:
        raise ValidationError(
            f"Custom distribution has {len(values)} values but the range spans {days} days",
            details={"expected_days": days, "received": len(values)},
        )
    if any(v < 0 for v in values):
        raise ValidationError("Custom distribution values must be non-negative")
    if not math.isclose(math.fsum(values), total_hours, rel_tol=0, abs_tol=_TOLERANCE):
        raise ValidationError(
            f"Custom distribution sums to {math.fsum(values)} but total hours is {total_hours}",
            details={"expected_total": total_hours, "received_total": math.fsum(values)},
        )
    return values


def plan_distribution(
    total_hours: float,
    start_date: DayLike,
    end_date: DayLike,
    strategy: DistributionStrategy = DistributionStrategy.EVEN,
    custom_values: Optional[Sequence[float]] = None,
    granularity: Optional[float] = None,
) -> List[float]:
    """
    Plan per-day hours for an inclusive date range.

    Args:
        total_hours: Hours to allocate, non-negative
        start_date: First day of the range
        end_date: Last day of the range
        strategy: DistributionStrategy (or its string value)
        custom_values: Per-day hours for CUSTOM
        granularity: Unit of allocation; inferred from total_hours when omitted

    Returns:
        One value per day; sum equals total_hours

    Raises:
        ValidationError: Bad range, negative total, or CUSTOM values with
            the wrong length or sum
    """
    start = to_calendar_day(start_date)
    end = to_calendar_day(end_date)
    if end < start:
        raise ValidationError(f"End date {end.isoformat()} is before start date {start.isoformat()}")
    if total_hours < 0:
        raise ValidationError(f"Total hours must be non-negative, got {total_hours}")

    try:
        strategy = DistributionStrategy(strategy)
    except ValueError:
        raise ValidationError(f"Unknown distribution strategy: {strategy}")

    days = days_between(start, end)

    if strategy == DistributionStrategy.CUSTOM:
        return _validate_custom(total_hours, days, custom_values)

    step = resolve_granularity(total_hours, granularity)
    units = _to_units(total_hours, step)

    if strategy == DistributionStrategy.EVEN:
        planned = _even_units(units, days)
        designated = 0
    elif strategy == DistributionStrategy.FRONT_LOADED:
        planned = _front_loaded_units(units, days)
        designated = 0
    else:
        planned = list(reversed(_front_loaded_units(units, days)))
        designated = days - 1

    hours = [unit * step for unit in planned]
    # The designated day is the largest one; it takes whatever is left of the total
    others = hours[:designated] + hours[designated + 1:]
    hours[designated] = total_hours - math.fsum(others)
    return hours


def plan_allocations(
    total_hours: float,
    start_date: DayLike,
    end_date: DayLike,
    strategy: DistributionStrategy = DistributionStrategy.EVEN,
    custom_values: Optional[Sequence[float]] = None,
    granularity: Optional[float] = None,
) -> List[Tuple[date, float]]:
    """plan_distribution paired with the calendar day each value belongs to"""
    hours = plan_distribution(total_hours, start_date, end_date, strategy, custom_values, granularity)
    days = iter_days(to_calendar_day(start_date), to_calendar_day(end_date))
    return list(zip(days, hours))
