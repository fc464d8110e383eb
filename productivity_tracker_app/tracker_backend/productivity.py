# tracker_backend/productivity.py
"""Daily productivity score and task weight normalization.

The day's productivity is the completion of its tasks weighted by each task's
declared importance. Weights are meant to sum to 100, but the score is a
normalized weighted mean and stays correct for any positive total.
"""
import math
from dataclasses import replace
from typing import Iterable, List, Sequence

from .models import Task

# Productivity Score Formula Version
PRODUCTIVITY_SCORE_VERSION = '1.0'

WEIGHT_TOTAL = 100.0
BALANCED_TOLERANCE = 0.1


def round2(value: float) -> float:
    """Round to 2 decimals with halves rounded up (toward +infinity)."""
    return math.floor(value * 100 + 0.5) / 100


def total_weight(tasks: Iterable[Task]) -> float:
    return sum(task.weight for task in tasks)


def weights_are_balanced(tasks: Iterable[Task], tolerance: float = BALANCED_TOLERANCE) -> bool:
    return abs(total_weight(tasks) - WEIGHT_TOTAL) < tolerance


def normalize_weights(tasks: Sequence[Task]) -> List[Task]:
    """Rescale task weights so they sum to 100.

    - Already within 0.1 of 100: returned unchanged.
    - All zero: every task gets an equal share, rounded to 2 decimals.
    - Otherwise each weight is scaled by 100 / total and rounded to 2 decimals.

    In both rescaling cases the leftover rounding error is added to the first
    task so the rounded weights sum to exactly 100.00.

    Raises:
        ValueError: if tasks is empty (a day plan always has at least one task)
    """
    if not tasks:
        raise ValueError("normalize_weights requires at least one task")

    total = total_weight(tasks)

    if total == 0:
        equal_weight = round2(WEIGHT_TOTAL / len(tasks))
        normalized = [replace(task, weight=equal_weight) for task in tasks]
    elif abs(total - WEIGHT_TOTAL) < BALANCED_TOLERANCE:
        return list(tasks)
    else:
        normalized = [replace(task, weight=round2(task.weight * WEIGHT_TOTAL / total)) for task in tasks]

    # residual rounding error goes entirely onto the first task; equal shares
    # need it too (7 tasks at 14.29 sum to 100.03)
    new_total = round2(total_weight(normalized))
    if new_total != WEIGHT_TOTAL:
        first = normalized[0]
        normalized[0] = replace(first, weight=round2(first.weight + (WEIGHT_TOTAL - new_total)))

    return normalized


def calculate_productivity(tasks: Sequence[Task]) -> float:
    """Weighted completion of a day's tasks, 0-100, rounded to 2 decimals.

    Returns 0.0 for no tasks or a zero total weight. A task with weight 0
    contributes nothing whatever its completion.

    Example: weights 60/40 with completion 100/50 -> (60 + 20) / 100 * 100 = 80.0
    """
    if not tasks:
        return 0.0

    weight_sum = total_weight(tasks)
    if weight_sum <= 0:
        return 0.0

    weighted_completion = sum(task.weight * task.completion_percent / 100 for task in tasks)
    return round2(weighted_completion / weight_sum * 100)
