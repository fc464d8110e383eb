from datetime import date, timedelta

import pytest

from tracker_backend.models import DailyReport, Task
from tracker_backend.temporal import (
    best_day_of_week,
    best_performing_days,
    best_report,
    best_week,
    consistency_score,
    day_of_week_averages,
    monthly_summary,
    productivity_band,
    reports_to_frame,
    rolling_week_averages,
    top_tasks,
    weekly_summary,
)

TODAY = date(2024, 3, 15)


def _report(day, percent, tasks=()):
    return DailyReport(id=day.isoformat(), date=day, tasks=tuple(tasks), productivity_percent=percent)


def _recent_first(values):
    return [_report(TODAY - timedelta(days=i), v) for i, v in enumerate(values)]


def _task(title, completion, category=None):
    return Task(id=title, title=title, weight=50, completion_percent=completion, category=category)


# Day of week ----------------------------------------------------------------

def test_day_of_week_buckets_start_on_sunday():
    reports = [
        _report(date(2024, 1, 7), 80),   # Sunday
        _report(date(2024, 1, 14), 60),  # Sunday
        _report(date(2024, 1, 8), 50),   # Monday
    ]
    stats = day_of_week_averages(reports)
    assert len(stats) == 7
    assert stats[0].name == 'Sunday' and stats[0].short_name == 'Sun'
    assert stats[0].average == 70 and stats[0].count == 2
    assert stats[1].average == 50 and stats[1].count == 1
    assert sum(s.count for s in stats) == len(reports)
    assert all(s.average == 0.0 and not s.has_data for s in stats[2:])


def test_empty_history_still_has_seven_weekdays():
    stats = day_of_week_averages([])
    assert [s.day_index for s in stats] == list(range(7))
    assert all(s.count == 0 for s in stats)
    assert best_day_of_week([]) is None


def test_best_day_of_week_prefers_earlier_weekday_on_ties():
    reports = [_report(date(2024, 1, 9), 50), _report(date(2024, 1, 8), 50)]  # Tuesday, Monday
    assert best_day_of_week(reports).name == 'Monday'


def test_best_day_of_week_skips_empty_buckets():
    reports = [_report(date(2024, 1, 10), 0)]  # Wednesday at 0%
    assert best_day_of_week(reports).name == 'Wednesday'


def test_best_performing_days_sorted_by_average():
    reports = [
        _report(date(2024, 1, 10), 90),  # Wednesday
        _report(date(2024, 1, 8), 40),   # Monday
    ]
    ranked = best_performing_days(reports)
    assert [s.name for s in ranked[:2]] == ['Wednesday', 'Monday']
    assert len(ranked) == 7


# Weeks ----------------------------------------------------------------------

def test_rolling_week_averages_uses_partial_last_chunk():
    reports = _recent_first([70] * 7 + [40] * 3)
    assert rolling_week_averages(reports) == [70.0, 40.0]
    assert rolling_week_averages(reports, max_weeks=1) == [70.0]
    assert rolling_week_averages([]) == []


def test_best_week_finds_highest_window():
    oldest_first = list(reversed(_recent_first([90] * 7 + [10] * 3)))
    result = best_week(oldest_first)
    assert result.average == 90
    assert result.start_date == oldest_first[3].date
    assert result.end_date == oldest_first[9].date


def test_best_week_ties_keep_earliest_window():
    oldest_first = list(reversed(_recent_first([50] * 8)))
    result = best_week(oldest_first)
    assert result.start_date == oldest_first[0].date


def test_best_week_ties_on_fractional_values_keep_earliest_window():
    values = [2.15, 83.76, 55.65, 64.23, 18.59, 99.25, 85.99, 2.15]
    oldest_first = [_report(date(2024, 1, 1) + timedelta(days=i), v) for i, v in enumerate(values)]
    result = best_week(oldest_first)
    assert result.start_date == date(2024, 1, 1)
    assert result.end_date == date(2024, 1, 7)
    assert result.average == pytest.approx(sum(values[:7]) / 7)


def test_best_week_needs_seven_reports():
    assert best_week(list(reversed(_recent_first([90] * 6)))) is None


# Consistency ----------------------------------------------------------------

def test_consistency_is_share_of_days_tracked():
    reports = [_report(TODAY, 10), _report(TODAY - timedelta(days=1), 10), _report(TODAY - timedelta(days=3), 10)]
    assert consistency_score(reports, TODAY) == 75


def test_consistency_rounds_half_up():
    assert consistency_score([_report(TODAY - timedelta(days=7), 50)], TODAY) == 13


def test_consistency_is_capped_and_guarded():
    assert consistency_score([], TODAY) == 0
    assert consistency_score([_report(TODAY, 50), _report(TODAY, 60)], TODAY) == 100
    assert consistency_score([_report(TODAY + timedelta(days=5), 50)], TODAY) == 0


def test_consistency_never_drops_when_a_missing_day_is_filled():
    reports = [_report(TODAY, 50), _report(TODAY - timedelta(days=4), 50)]
    before = consistency_score(reports, TODAY)
    after = consistency_score(reports + [_report(TODAY - timedelta(days=2), 50)], TODAY)
    assert after >= before


# Summaries ------------------------------------------------------------------

def test_weekly_summary_counts_tasks():
    reports = [
        _report(TODAY, 90, [_task('Deep Work', 100), _task('Email', 50)]),
        _report(TODAY - timedelta(days=1), 60, [_task('Deep Work', 80)]),
    ]
    summary = weekly_summary(reports)
    assert summary.avg_productivity == 75
    assert summary.best_report is reports[0]
    assert summary.total_tasks == 3
    assert summary.completed_tasks == 2
    assert summary.days_tracked == 2


def test_weekly_summary_only_uses_last_seven_reports():
    summary = weekly_summary(_recent_first([80] * 7 + [0] * 5))
    assert summary.avg_productivity == 80
    assert summary.days_tracked == 7


def test_monthly_summary_weeks():
    summary = monthly_summary(_recent_first([70] * 7 + [40] * 3))
    assert summary.weeks == (70.0, 40.0)
    assert summary.days_tracked == 10

    full = monthly_summary(_recent_first([50] * 35))
    assert full.days_tracked == 30
    assert len(full.weeks) == 4


def test_summaries_empty_history():
    assert weekly_summary([]) is None
    assert monthly_summary([]) is None


def test_best_report_keeps_first_on_ties():
    reports = _recent_first([80, 80, 20])
    assert best_report(reports) is reports[0]
    assert best_report([]) is None


def test_top_tasks_ranked_by_average_completion():
    reports = [
        _report(TODAY, 70, [_task('Deep Work', 100, 'Work'), _task('Email', 90)]),
        _report(TODAY - timedelta(days=1), 50, [_task('Deep Work', 50, 'Work'), _task('Gym', 10)]),
    ]
    stats = top_tasks(reports)
    assert [s.title for s in stats] == ['Email', 'Deep Work', 'Gym']
    assert stats[1].average_completion == 75
    assert stats[1].count == 2
    assert stats[1].category == 'Work'
    assert stats[0].category is None
    assert len(top_tasks(reports, limit=1)) == 1
    assert top_tasks([]) == []


def test_top_tasks_category_comes_from_first_occurrence():
    reports = [
        _report(TODAY, 70, [_task('Reading', 60)]),
        _report(TODAY - timedelta(days=1), 50, [_task('Reading', 80, 'Learning')]),
    ]
    stats = top_tasks(reports)
    assert stats[0].title == 'Reading'
    assert stats[0].category is None


def test_frame_is_sorted_oldest_first():
    df = reports_to_frame(_recent_first([10, 20, 30]))
    assert df['productivity_percent'].tolist() == [30.0, 20.0, 10.0]


def test_productivity_band_boundaries():
    assert productivity_band(80) == 'Excellent'
    assert productivity_band(79.99) == 'Good'
    assert productivity_band(60) == 'Good'
    assert productivity_band(40) == 'Fair'
    assert productivity_band(39.9) == 'Needs Work'
