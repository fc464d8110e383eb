from datetime import date, datetime

import pytest

from tracker_backend.goals import (
    create_goal,
    create_mission,
    goal_date_range,
    goal_progress,
    reports_in_range,
    split_missions,
    update_mission_progress,
)
from tracker_backend.models import DailyReport, GoalType, MissionCategory, ProductivityGoal
from tracker_backend.security_utils import ValidationError


def _report(day, percent):
    return DailyReport(id=day.isoformat(), date=day, productivity_percent=percent)


def _goal(start, end, target=75.0):
    return ProductivityGoal(
        id='g1', goal_type=GoalType.WEEKLY, target_percentage=target, start_date=start, end_date=end,
    )


REPORTS = [
    _report(date(2024, 2, 29), 100),
    _report(date(2024, 3, 1), 70),
    _report(date(2024, 3, 8), 90),
    _report(date(2024, 3, 9), 10),
]


def test_range_includes_both_ends():
    selected = reports_in_range(REPORTS, date(2024, 3, 1), date(2024, 3, 8))
    assert [r.date for r in selected] == [date(2024, 3, 1), date(2024, 3, 8)]


def test_goal_progress_averages_reports_in_range():
    progress = goal_progress(_goal(date(2024, 3, 1), date(2024, 3, 8)), REPORTS, date(2024, 3, 5))
    assert progress.avg_progress == 80
    assert progress.report_count == 2
    assert progress.days_left == 3
    assert progress.is_active
    assert progress.is_achieved


def test_goal_is_achieved_at_exact_target():
    progress = goal_progress(_goal(date(2024, 3, 1), date(2024, 3, 8), target=80), REPORTS, date(2024, 3, 5))
    assert progress.is_achieved


def test_goal_ending_today_is_still_active():
    goal = _goal(date(2024, 3, 1), date(2024, 3, 8))
    assert goal_progress(goal, REPORTS, date(2024, 3, 8)).is_active
    expired = goal_progress(goal, REPORTS, date(2024, 3, 9))
    assert not expired.is_active
    assert expired.days_left == -1


def test_goal_without_reports_has_zero_progress():
    progress = goal_progress(_goal(date(2025, 1, 1), date(2025, 1, 7)), REPORTS, date(2025, 1, 2))
    assert progress.avg_progress == 0.0
    assert progress.report_count == 0
    assert not progress.is_achieved


def test_goal_date_ranges():
    today = date(2024, 1, 31)
    assert goal_date_range('daily', today) == (today, today)
    assert goal_date_range(GoalType.WEEKLY, today) == (today, date(2024, 2, 7))
    # clamped to the last day of February
    assert goal_date_range('monthly', today) == (today, date(2024, 2, 29))
    assert goal_date_range('monthly', date(2024, 12, 15)) == (date(2024, 12, 15), date(2025, 1, 15))


def test_create_goal():
    goal = create_goal('Weekly', today=date(2024, 3, 1), now=datetime(2024, 3, 1, 9, 0))
    assert goal.goal_type is GoalType.WEEKLY
    assert goal.target_percentage == 75.0
    assert goal.end_date == date(2024, 3, 8)
    assert goal.created_at == '2024-03-01T09:00:00'


def test_create_goal_rejects_bad_input():
    with pytest.raises(ValidationError):
        create_goal('yearly', today=date(2024, 3, 1))
    with pytest.raises(ValidationError):
        create_goal('daily', target_percentage=150, today=date(2024, 3, 1))


def test_create_mission_defaults():
    mission = create_mission('  Run a marathon  ', target_date='2024-10-01')
    assert mission.title == 'Run a marathon'
    assert mission.category is MissionCategory.PERSONAL
    assert mission.progress_percent == 0.0
    assert mission.target_date == date(2024, 10, 1)
    assert not mission.is_completed


def test_create_mission_validation():
    with pytest.raises(ValidationError, match='Mission title is required'):
        create_mission('   ')
    with pytest.raises(ValidationError):
        create_mission('Learn Rust', category='hobby')
    with pytest.raises(ValidationError):
        create_mission('Learn Rust', target_date='next week')


def test_mission_progress_is_clamped():
    mission = create_mission('Write a book', category='creative')
    done = update_mission_progress(mission, 150, now=datetime(2024, 3, 2))
    assert done.progress_percent == 100.0
    assert done.is_completed
    assert done.updated_at == '2024-03-02T00:00:00'

    reset = update_mission_progress(done, -10)
    assert reset.progress_percent == 0.0
    assert not reset.is_completed


def test_mission_completion_starts_at_100():
    mission = create_mission('Save money', category='financial')
    assert not update_mission_progress(mission, 99.9).is_completed
    assert update_mission_progress(mission, 100).is_completed
    assert update_mission_progress(mission, '45').progress_percent == 45.0


def test_mission_progress_must_be_numeric():
    mission = create_mission('Save money')
    for bad in ('abc', None, True, float('nan')):
        with pytest.raises(ValidationError):
            update_mission_progress(mission, bad)


def test_split_missions_keeps_order():
    a = create_mission('A')
    b = update_mission_progress(create_mission('B'), 100)
    c = create_mission('C')
    active, completed = split_missions([a, b, c])
    assert [m.title for m in active] == ['A', 'C']
    assert [m.title for m in completed] == ['B']
