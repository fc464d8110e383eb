# tracker_backend/temporal.py
"""
Time-based views over report history: day-of-week performance, weekly chunks,
best 7-report window, tracking consistency and period summaries.

Every function is a pure pass over an already-loaded history. Histories are
small (hundreds of days), so each view rebuilds its own DataFrame.
"""
import math
from dataclasses import dataclass
from datetime import date
from typing import List, Optional, Sequence, Tuple

import pandas as pd

from .models import DailyReport

DAY_NAMES = ['Sunday', 'Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday', 'Saturday']

WEEK_LENGTH = 7
MONTH_LENGTH = 30
MAX_MONTH_WEEKS = 4
COMPLETED_TASK_THRESHOLD = 80.0

FRAME_COLUMNS = ['date', 'productivity_percent', 'task_count', 'completed_task_count']


@dataclass(frozen=True)
class DayOfWeekStat:
    day_index: int  # 0 = Sunday .. 6 = Saturday
    name: str
    average: float
    count: int

    @property
    def short_name(self) -> str:
        return self.name[:3]

    @property
    def has_data(self) -> bool:
        return self.count > 0


@dataclass(frozen=True)
class BestWeek:
    average: float
    start_date: date
    end_date: date


@dataclass(frozen=True)
class PeriodSummary:
    avg_productivity: float
    best_report: DailyReport
    total_tasks: int
    completed_tasks: int
    days_tracked: int
    weeks: Tuple[float, ...] = ()


@dataclass(frozen=True)
class TaskStat:
    title: str
    average_completion: float
    count: int
    category: Optional[str] = None


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def reports_to_frame(reports: Sequence[DailyReport]) -> pd.DataFrame:
    """One row per report, sorted by date ascending."""
    if not reports:
        return pd.DataFrame(columns=FRAME_COLUMNS)

    df = pd.DataFrame([
        {
            'date': pd.Timestamp(r.date),
            'productivity_percent': float(r.productivity_percent),
            'task_count': len(r.tasks),
            'completed_task_count': sum(
                1 for t in r.tasks if t.completion_percent >= COMPLETED_TASK_THRESHOLD
            ),
        }
        for r in reports
    ], columns=FRAME_COLUMNS)
    return df.sort_values('date', kind='mergesort').reset_index(drop=True)


# ----------------------------------------------------------------------
# Day of week
# ----------------------------------------------------------------------
def day_of_week_averages(reports: Sequence[DailyReport]) -> List[DayOfWeekStat]:
    """Mean productivity per weekday, indexed 0=Sunday..6=Saturday.

    Always returns 7 entries. A weekday with no reports has count 0 and
    average 0.0; check count (or has_data) to tell it apart from a weekday
    that is genuinely at 0%.
    """
    df = reports_to_frame(reports)
    if df.empty:
        return [DayOfWeekStat(i, DAY_NAMES[i], 0.0, 0) for i in range(7)]

    # pandas counts Monday as 0; shift so Sunday is 0
    df['day_index'] = (df['date'].dt.dayofweek + 1) % 7
    grouped = df.groupby('day_index')['productivity_percent'].agg(['mean', 'count'])
    grouped = grouped.reindex(range(7))

    stats = []
    for day_index, row in grouped.iterrows():
        count = 0 if pd.isna(row['count']) else int(row['count'])
        average = float(row['mean']) if count > 0 else 0.0
        stats.append(DayOfWeekStat(int(day_index), DAY_NAMES[int(day_index)], average, count))
    return stats


def best_performing_days(reports: Sequence[DailyReport]) -> List[DayOfWeekStat]:
    """All seven weekdays, highest average first (ties keep weekday order)."""
    return sorted(day_of_week_averages(reports), key=lambda s: s.average, reverse=True)


def best_day_of_week(reports: Sequence[DailyReport]) -> Optional[DayOfWeekStat]:
    best = None
    for stat in day_of_week_averages(reports):
        if stat.has_data and (best is None or stat.average > best.average):
            best = stat
    return best


# ----------------------------------------------------------------------
# Weekly chunks and windows
# ----------------------------------------------------------------------
def rolling_week_averages(
    reports_desc: Sequence[DailyReport],
    max_weeks: Optional[int] = None
) -> List[float]:
    """Average of each consecutive chunk of 7 reports, most recent chunk first.

    Chunks are by position, not calendar week. A trailing chunk with fewer
    than 7 reports is averaged over the reports it actually holds.
    """
    if not reports_desc:
        return []

    series = pd.Series([float(r.productivity_percent) for r in reports_desc])
    weeks = series.groupby(series.index // WEEK_LENGTH).mean().tolist()
    if max_weeks is not None:
        weeks = weeks[:max_weeks]
    return [float(w) for w in weeks]


def best_week(reports_asc: Sequence[DailyReport]) -> Optional[BestWeek]:
    """Highest mean over any 7 consecutive reports (by position, oldest first).

    Returns None with fewer than 7 reports. Ties keep the earliest window.
    """
    if len(reports_asc) < WEEK_LENGTH:
        return None

    values = pd.Series([float(r.productivity_percent) for r in reports_asc])
    # fsum per window is exact, so windows holding the same values tie exactly
    window_means = values.rolling(WEEK_LENGTH).apply(math.fsum, raw=True) / WEEK_LENGTH
    end_position = int(window_means.idxmax())
    start_position = end_position - WEEK_LENGTH + 1

    return BestWeek(
        average=float(window_means.iloc[end_position]),
        start_date=reports_asc[start_position].date,
        end_date=reports_asc[end_position].date,
    )


# ----------------------------------------------------------------------
# Consistency
# ----------------------------------------------------------------------
def consistency_score(reports: Sequence[DailyReport], today: date) -> int:
    """Share of days since the first report that have a report, 0-100.

    Measures how often the user tracks, not how productive they were.
    """
    if not reports:
        return 0

    oldest = min(r.date for r in reports)
    days_since_first = (today - oldest).days + 1
    if days_since_first <= 0:
        return 0

    return min(100, round_half_up(len(reports) / days_since_first * 100))


# ----------------------------------------------------------------------
# Period summaries
# ----------------------------------------------------------------------
def average_productivity(reports: Sequence[DailyReport]) -> float:
    if not reports:
        return 0.0
    return sum(r.productivity_percent for r in reports) / len(reports)


def best_report(reports: Sequence[DailyReport]) -> Optional[DailyReport]:
    """Report with the highest productivity; the first one wins ties."""
    best = None
    for report in reports:
        if best is None or report.productivity_percent > best.productivity_percent:
            best = report
    return best


def period_summary(reports_desc: Sequence[DailyReport], days: int = WEEK_LENGTH) -> Optional[PeriodSummary]:
    """Summary of the most recent `days` reports (by position)."""
    recent = list(reports_desc[:days])
    if not recent:
        return None

    df = reports_to_frame(recent)
    return PeriodSummary(
        avg_productivity=float(df['productivity_percent'].mean()),
        best_report=best_report(recent),
        total_tasks=int(df['task_count'].sum()),
        completed_tasks=int(df['completed_task_count'].sum()),
        days_tracked=len(recent),
    )


def weekly_summary(reports_desc: Sequence[DailyReport]) -> Optional[PeriodSummary]:
    return period_summary(reports_desc, WEEK_LENGTH)


def monthly_summary(reports_desc: Sequence[DailyReport]) -> Optional[PeriodSummary]:
    """Last 30 reports plus the averages of up to 4 seven-report chunks."""
    summary = period_summary(reports_desc, MONTH_LENGTH)
    if summary is None:
        return None

    last_month = list(reports_desc[:MONTH_LENGTH])
    week_count = min(MAX_MONTH_WEEKS, math.ceil(len(last_month) / WEEK_LENGTH))
    weeks = rolling_week_averages(last_month, max_weeks=week_count)
    return PeriodSummary(
        avg_productivity=summary.avg_productivity,
        best_report=summary.best_report,
        total_tasks=summary.total_tasks,
        completed_tasks=summary.completed_tasks,
        days_tracked=summary.days_tracked,
        weeks=tuple(weeks),
    )


def top_tasks(reports: Sequence[DailyReport], limit: int = 5) -> List[TaskStat]:
    """Tasks grouped by title, ranked by mean completion across every report."""
    rows = [
        {'title': t.title, 'completion': float(t.completion_percent), 'category': t.category}
        for r in reports
        for t in r.tasks
    ]
    if not rows:
        return []

    df = pd.DataFrame(rows)
    grouped = df.groupby('title', sort=False).agg(
        average=('completion', 'mean'),
        count=('completion', 'size'),
        category=('category', lambda s: s.iloc[0]),
    )
    grouped = grouped.sort_values('average', ascending=False, kind='mergesort').head(limit)

    return [
        TaskStat(
            title=str(title),
            average_completion=float(row['average']),
            count=int(row['count']),
            category=None if pd.isna(row['category']) else row['category'],
        )
        for title, row in grouped.iterrows()
    ]


def productivity_band(percent: float) -> str:
    """Calendar label for a day's score."""
    if percent >= 80:
        return 'Excellent'
    if percent >= 60:
        return 'Good'
    if percent >= 40:
        return 'Fair'
    return 'Needs Work'
