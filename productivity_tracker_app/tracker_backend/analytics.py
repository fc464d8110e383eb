# tracker_backend/analytics.py
from __future__ import annotations

from datetime import date
from typing import Any, Callable, Dict, List, Optional, Sequence

from .analytics_logger import get_logger, log_event
from .goals import GoalProgress, goal_progress
from .models import DailyReport, ProductivityGoal, as_reports
from .security_utils import handle_error
from .settings import load_settings
from .streaks import StreakSummary, current_streak, longest_streak
from .temporal import (
    BestWeek,
    DayOfWeekStat,
    PeriodSummary,
    TaskStat,
    WEEK_LENGTH,
    average_productivity,
    best_day_of_week,
    best_performing_days,
    best_report,
    best_week,
    consistency_score,
    day_of_week_averages,
    monthly_summary,
    rolling_week_averages,
    top_tasks,
    weekly_summary,
)
from .trends import Trend, trend


class Analytics:
    """Insights over one snapshot of a user's report history.

    The snapshot is taken once at construction; every method is a pure read of
    it, so repeated calls always agree.
    """

    def __init__(
        self,
        reports: Sequence[Any],
        today: Optional[date] = None,
        threshold: Optional[float] = None,
        trend_min_reports: Optional[int] = None,
    ):
        settings = load_settings()
        self.today = today or date.today()
        self.threshold = settings.streak_threshold if threshold is None else threshold
        self.trend_min_reports = settings.trend_min_reports if trend_min_reports is None else trend_min_reports
        self.logger = get_logger()

        loaded = as_reports(list(reports))
        self.reports_asc: List[DailyReport] = sorted(loaded, key=lambda r: r.date)
        self.reports_desc: List[DailyReport] = list(reversed(self.reports_asc))

    # ------------------------------------------------------------------
    # Headline numbers
    # ------------------------------------------------------------------
    def get_dashboard_metrics(self) -> Dict[str, Any]:
        """Summary cards: totals, averages, current streak and best day."""
        last_week = self.reports_desc[:WEEK_LENGTH]
        return {
            'total_days': len(self.reports_desc),
            'avg_productivity': average_productivity(self.reports_desc),
            'avg_7_days': average_productivity(last_week),
            'current_streak': current_streak(self.reports_desc, self.today, self.threshold),
            'best_day': best_report(self.reports_desc),
        }

    def get_streaks(self) -> StreakSummary:
        return StreakSummary(
            current=current_streak(self.reports_desc, self.today, self.threshold),
            longest=longest_streak(self.reports_asc, self.threshold),
            threshold=self.threshold,
        )

    def get_consistency_score(self) -> int:
        return consistency_score(self.reports_desc, self.today)

    # ------------------------------------------------------------------
    # Time views
    # ------------------------------------------------------------------
    def get_weekly_summary(self) -> Optional[PeriodSummary]:
        return weekly_summary(self.reports_desc)

    def get_monthly_summary(self) -> Optional[PeriodSummary]:
        return monthly_summary(self.reports_desc)

    def get_week_averages(self, max_weeks: Optional[int] = None) -> List[float]:
        return rolling_week_averages(self.reports_desc, max_weeks)

    def get_day_of_week_stats(self) -> List[DayOfWeekStat]:
        return day_of_week_averages(self.reports_desc)

    def get_best_performing_days(self) -> List[DayOfWeekStat]:
        return best_performing_days(self.reports_desc)

    def get_best_day_of_week(self) -> Optional[DayOfWeekStat]:
        return best_day_of_week(self.reports_desc)

    def get_best_week(self) -> Optional[BestWeek]:
        return best_week(self.reports_asc)

    def get_trend(self) -> Optional[Trend]:
        return trend(self.reports_desc, self.trend_min_reports)

    def get_top_tasks(self, limit: int = 5) -> List[TaskStat]:
        return top_tasks(self.reports_desc, limit)

    # ------------------------------------------------------------------
    # Goals
    # ------------------------------------------------------------------
    def get_goal_progress(self, goals: Sequence[Any]) -> List[GoalProgress]:
        parsed = [g if isinstance(g, ProductivityGoal) else ProductivityGoal.from_dict(g) for g in goals]
        return [goal_progress(g, self.reports_asc, self.today) for g in parsed]

    # ------------------------------------------------------------------
    # Everything at once
    # ------------------------------------------------------------------
    def get_insights(self, goals: Optional[Sequence[Any]] = None) -> Dict[str, Any]:
        """All insight sections for one snapshot.

        Insufficient data gives each section its own empty value (0, None or []).
        An unexpected failure in one section is logged with an error id and
        that section alone becomes None.
        """
        sections: Dict[str, Callable[[], Any]] = {
            'dashboard': self.get_dashboard_metrics,
            'streaks': self.get_streaks,
            'consistency_score': self.get_consistency_score,
            'weekly_summary': self.get_weekly_summary,
            'monthly_summary': self.get_monthly_summary,
            'day_of_week': self.get_day_of_week_stats,
            'best_performing_days': self.get_best_performing_days,
            'best_week': self.get_best_week,
            'trend': self.get_trend,
            'top_tasks': self.get_top_tasks,
            'goals': lambda: self.get_goal_progress(goals or []),
        }
        insights: Dict[str, Any] = {}
        failed: List[str] = []
        for name, compute in sections.items():
            try:
                insights[name] = compute()
            except Exception as e:
                error_id = handle_error(
                    f'insights.{name}', e,
                    context={'report_count': len(self.reports_desc), 'today': self.today.isoformat()},
                )
                self.logger.warning(f"Insight section {name} unavailable (error {error_id})")
                insights[name] = None
                failed.append(name)

        log_event(
            'insights_computed',
            report_count=len(self.reports_desc),
            today=self.today.isoformat(),
            failed_sections=failed,
        )
        return insights
