# tracker_backend/trends.py
"""Recent-versus-earlier productivity comparison."""
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence

from .models import DailyReport

TREND_WINDOW = 7
DEFAULT_MIN_REPORTS = 14


class TrendBucket(str, Enum):
    STRONG = 'strong'
    GOOD = 'good'
    SLIGHT = 'slight'
    MINOR_DIP = 'minor_dip'
    DECLINE = 'decline'
    SIGNIFICANT_DROP = 'significant_drop'

    @property
    def label(self) -> str:
        return self.value.replace('_', ' ')


@dataclass(frozen=True)
class Trend:
    first_week_avg: float
    last_week_avg: float
    change: float
    improving: bool

    @property
    def bucket(self) -> 'TrendBucket':
        return trend_bucket(self.change)


def _mean(reports: Sequence[DailyReport]) -> float:
    return sum(r.productivity_percent for r in reports) / len(reports)


def trend(
    reports_desc: Sequence[DailyReport],
    min_reports: int = DEFAULT_MIN_REPORTS
) -> Optional[Trend]:
    """Compare the 7 most recent reports against the 7 oldest loaded ones.

    Args:
        reports_desc: Reports sorted by date, most recent first
        min_reports: Below this many reports there is no trend (returns None)

    change = last_week_avg - first_week_avg; improving only when change > 0.
    """
    if len(reports_desc) < max(min_reports, TREND_WINDOW):
        return None

    first_week_avg = _mean(reports_desc[-TREND_WINDOW:])
    last_week_avg = _mean(reports_desc[:TREND_WINDOW])
    change = last_week_avg - first_week_avg
    return Trend(
        first_week_avg=first_week_avg,
        last_week_avg=last_week_avg,
        change=change,
        improving=change > 0,
    )


def trend_bucket(change: float) -> TrendBucket:
    """Qualitative bucket for a change in percentage points.

    > 10 strong, 5..10 good, 0..5 slight, -5..0 minor dip, -10..-5 decline,
    below -10 significant drop. Boundaries: 10 and 5 are good, 0 is slight,
    -5 is a minor dip, -10 is a decline.
    """
    if change > 10:
        return TrendBucket.STRONG
    if change >= 5:
        return TrendBucket.GOOD
    if change >= 0:
        return TrendBucket.SLIGHT
    if change >= -5:
        return TrendBucket.MINOR_DIP
    if change >= -10:
        return TrendBucket.DECLINE
    return TrendBucket.SIGNIFICANT_DROP
