# tracker_backend/goals.py
"""
Productivity goals and missions.

Goals are measured against report history: the mean productivity of every
report dated inside the goal's inclusive range. Missions are not derived from
reports at all; their progress is whatever the user last set, clamped to 0-100.
"""
import calendar
from dataclasses import dataclass, replace
from datetime import date, datetime, timedelta
from typing import Any, List, Optional, Sequence, Tuple

from .models import (
    DailyReport, GoalType, Mission, MissionCategory, ProductivityGoal, new_id, utc_timestamp,
)
from .security_utils import (
    ValidationError, validate_date, validate_mission_title, validate_percentage,
)

DEFAULT_TARGET_PERCENTAGE = 75.0


@dataclass(frozen=True)
class GoalProgress:
    goal_id: str
    avg_progress: float
    days_left: int
    is_active: bool
    is_achieved: bool
    report_count: int


def reports_in_range(
    reports: Sequence[DailyReport],
    start_date: date,
    end_date: date
) -> List[DailyReport]:
    """Reports dated within [start_date, end_date], both ends included."""
    # ISO YYYY-MM-DD strings sort the same as the dates they encode
    start, end = start_date.isoformat(), end_date.isoformat()
    return [r for r in reports if start <= r.date_str <= end]


def goal_progress(
    goal: ProductivityGoal,
    reports: Sequence[DailyReport],
    today: date
) -> GoalProgress:
    """Measure one goal against the report history.

    avg_progress is 0.0 when no report falls in range. A goal ending today is
    still active (days_left == 0); the day after it is not.
    """
    relevant = reports_in_range(reports, goal.start_date, goal.end_date)
    if relevant:
        avg_progress = sum(r.productivity_percent for r in relevant) / len(relevant)
    else:
        avg_progress = 0.0

    days_left = (goal.end_date - today).days
    return GoalProgress(
        goal_id=goal.id,
        avg_progress=avg_progress,
        days_left=days_left,
        is_active=days_left >= 0,
        is_achieved=avg_progress >= goal.target_percentage,
        report_count=len(relevant),
    )


def _add_one_month(day: date) -> date:
    year = day.year + (1 if day.month == 12 else 0)
    month = 1 if day.month == 12 else day.month + 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def goal_date_range(goal_type: Any, today: date) -> Tuple[date, date]:
    """Start and end dates for a goal created today.

    daily: today only; weekly: today through today + 7 days;
    monthly: today through the same day next month (clamped to month end).
    """
    goal_type = GoalType.parse(goal_type)
    if goal_type is GoalType.DAILY:
        return today, today
    if goal_type is GoalType.WEEKLY:
        return today, today + timedelta(days=7)
    return today, _add_one_month(today)


def create_goal(
    goal_type: Any,
    target_percentage: Any = DEFAULT_TARGET_PERCENTAGE,
    today: Optional[date] = None,
    now: Optional[datetime] = None
) -> ProductivityGoal:
    """Build a new goal starting today.

    Raises:
        ValidationError: unknown goal type or target outside 0-100
    """
    parsed_type = GoalType.parse(goal_type)
    target = validate_percentage(target_percentage, 'Target percentage')
    start_date, end_date = goal_date_range(parsed_type, today or date.today())
    return ProductivityGoal(
        id=new_id(),
        goal_type=parsed_type,
        target_percentage=target,
        start_date=start_date,
        end_date=end_date,
        created_at=utc_timestamp(now),
    )


# ----------------------------------------------------------------------
# Missions
# ----------------------------------------------------------------------
def clamp_progress(progress: float) -> float:
    return min(100.0, max(0.0, progress))


def create_mission(
    title: Optional[str],
    description: Optional[str] = None,
    category: Any = None,
    target_date: Any = None,
    now: Optional[datetime] = None
) -> Mission:
    """New mission at 0% progress.

    Raises:
        ValidationError: missing/over-long title, unknown category or bad target date
    """
    timestamp = utc_timestamp(now)
    return Mission(
        id=new_id(),
        title=validate_mission_title(title),
        description=(description or '').strip() or None,
        progress_percent=0.0,
        category=MissionCategory.parse(category),
        target_date=validate_date(target_date) if target_date else None,
        is_completed=False,
        created_at=timestamp,
        updated_at=timestamp,
    )


def update_mission_progress(
    mission: Mission,
    progress: Any,
    now: Optional[datetime] = None
) -> Mission:
    """Set a mission's progress.

    Progress is clamped to [0, 100]; the mission is completed exactly when the
    requested progress is 100 or more.
    """
    if isinstance(progress, bool):
        raise ValidationError("Progress must be a number")
    try:
        requested = float(progress)
    except (TypeError, ValueError):
        raise ValidationError("Progress must be a number")
    if requested != requested:  # NaN
        raise ValidationError("Progress must be a number")

    return replace(
        mission,
        progress_percent=clamp_progress(requested),
        is_completed=requested >= 100,
        updated_at=utc_timestamp(now),
    )


def split_missions(missions: Sequence[Mission]) -> Tuple[List[Mission], List[Mission]]:
    """(active, completed), each keeping the input order."""
    active = [m for m in missions if not m.is_completed]
    completed = [m for m in missions if m.is_completed]
    return active, completed
