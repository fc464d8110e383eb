# tracker_backend/streaks.py
"""
Consecutive-day streaks of productive days.

A day counts toward a streak when its productivity meets the threshold and it
directly follows the previous counted day on the calendar.
"""
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Sequence

from .models import DailyReport

DEFAULT_STREAK_THRESHOLD = 60.0


@dataclass(frozen=True)
class StreakSummary:
    current: int
    longest: int
    threshold: float


def current_streak(
    reports_desc: Sequence[DailyReport],
    today: date,
    threshold: float = DEFAULT_STREAK_THRESHOLD
) -> int:
    """Count the unbroken run of qualifying days ending today.

    Args:
        reports_desc: Reports sorted by date, most recent first
        today: Reference date (injected, never read from the clock here)
        threshold: Minimum productivity_percent for a day to count

    The report at position i counts only if it is dated exactly i days before
    today. A missing today therefore ends the streak at 0 even when yesterday
    was productive.
    """
    streak = 0
    for position, report in enumerate(reports_desc):
        if (today - report.date).days != position:
            break
        if report.productivity_percent < threshold:
            break
        streak += 1
    return streak


def longest_streak(
    reports_asc: Sequence[DailyReport],
    threshold: float = DEFAULT_STREAK_THRESHOLD
) -> int:
    """Longest run of consecutive calendar days meeting the threshold.

    Args:
        reports_asc: Reports sorted by date, oldest first

    A gap in dates restarts the run at 1; a day that does not clear the
    threshold zeroes it. Unlike current_streak, a day sitting exactly on the
    threshold does not extend the run, so [50, 60, 70, 80, 90] at 60 gives 3.
    """
    longest = 0
    running = 0
    previous_date = None

    for report in reports_asc:
        if previous_date is None or report.date != previous_date + timedelta(days=1):
            running = 1
        else:
            running += 1

        if report.productivity_percent <= threshold:
            running = 0

        longest = max(longest, running)
        previous_date = report.date

    return longest


def streak_summary(
    reports: Sequence[DailyReport],
    today: date,
    threshold: float = DEFAULT_STREAK_THRESHOLD
) -> StreakSummary:
    """Both streaks from a history in any order."""
    ordered = sorted(reports, key=lambda r: r.date)
    return StreakSummary(
        current=current_streak(list(reversed(ordered)), today, threshold),
        longest=longest_streak(ordered, threshold),
        threshold=threshold,
    )
