# tracker_backend/security_utils.py
"""
Input validation and error handling for the save path.
Validates task plans, reports, templates and goal inputs before they reach the store,
and provides the error ID system used when an insight section fails.
"""
import os
import re
import json
import uuid
import traceback
from datetime import date, datetime
from typing import Any, Dict, Iterable, Optional

from .analytics_logger import get_logger
from .settings import load_settings


# ============================================================================
# Input Length Limits
# ============================================================================

MAX_TASK_TITLE_LENGTH = 200
MAX_TEMPLATE_TITLE_LENGTH = 200
MAX_MISSION_TITLE_LENGTH = 200
MAX_NOTES_LENGTH = 5000
MAX_TEMPLATE_DESCRIPTION_LENGTH = 500
MAX_CATEGORY_LENGTH = 50

# Suggested task categories; any other label up to MAX_CATEGORY_LENGTH is accepted
TASK_CATEGORIES = (
    'Work',
    'Personal',
    'Health',
    'Learning',
    'Creative',
    'Social',
    'Finance',
    'Other',
)

DATE_PATTERN = re.compile(r'^\d{4}-\d{2}-\d{2}$')


# ============================================================================
# Input Validation
# ============================================================================

class ValidationError(ValueError):
    """Raised when input validation fails."""
    pass


def validate_task_title(title: Optional[str]) -> str:
    """
    Validate a task title.

    Returns:
        The stripped title

    Raises:
        ValidationError: If the title is empty or too long
    """
    if not title or not title.strip():
        raise ValidationError("Task title cannot be empty")

    title = title.strip()

    if len(title) > MAX_TASK_TITLE_LENGTH:
        raise ValidationError(
            f"Task title must be less than {MAX_TASK_TITLE_LENGTH} characters"
        )

    return title


def validate_percentage(value: Any, field: str) -> float:
    """Validate a 0-100 numeric field (weight, completion, progress, target)."""
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be a number")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be a number")

    if number != number:  # NaN
        raise ValidationError(f"{field} must be a number")
    if number < 0:
        raise ValidationError(f"{field} cannot be negative")
    if number > 100:
        raise ValidationError(f"{field} cannot exceed 100%")
    return number


def validate_weight(weight: Any) -> float:
    return validate_percentage(weight, 'Weight')


def validate_completion(completion: Any) -> float:
    return validate_percentage(completion, 'Completion')


def validate_category(category: Optional[str]) -> Optional[str]:
    """Categories are free-form labels; only the length is enforced.

    A label matching one of TASK_CATEGORIES in any case is returned with the
    suggested spelling, so 'work' and 'Work' group together.
    """
    if category is None:
        return None
    category = category.strip()
    if not category:
        return None
    for suggested in TASK_CATEGORIES:
        if category.lower() == suggested.lower():
            return suggested
    if len(category) > MAX_CATEGORY_LENGTH:
        raise ValidationError(
            f"Category must be less than {MAX_CATEGORY_LENGTH} characters"
        )
    return category


def validate_notes(notes: Optional[str]) -> str:
    """
    Validate report notes.

    Returns:
        Notes unchanged, or '' when missing
    """
    if not notes:
        return ''

    if len(notes) > MAX_NOTES_LENGTH:
        raise ValidationError(
            f"Notes must be less than {MAX_NOTES_LENGTH} characters"
        )

    return notes


def validate_template_title(title: Optional[str]) -> str:
    if not title or not title.strip():
        raise ValidationError("Template title cannot be empty")
    title = title.strip()
    if len(title) > MAX_TEMPLATE_TITLE_LENGTH:
        raise ValidationError(
            f"Template title must be less than {MAX_TEMPLATE_TITLE_LENGTH} characters"
        )
    return title


def validate_template_description(description: Optional[str]) -> str:
    if not description:
        return ''
    if len(description) > MAX_TEMPLATE_DESCRIPTION_LENGTH:
        raise ValidationError(
            f"Description must be less than {MAX_TEMPLATE_DESCRIPTION_LENGTH} characters"
        )
    return description


def validate_mission_title(title: Optional[str]) -> str:
    if not title or not title.strip():
        raise ValidationError("Mission title is required")
    title = title.strip()
    if len(title) > MAX_MISSION_TITLE_LENGTH:
        raise ValidationError(
            f"Mission title must be less than {MAX_MISSION_TITLE_LENGTH} characters"
        )
    return title


def validate_date(value: Any) -> date:
    """
    Validate a calendar date given as a date or an ISO 'YYYY-MM-DD' string.

    Raises:
        ValidationError: If the string does not match YYYY-MM-DD or is not a real date
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not DATE_PATTERN.match(value.strip()):
        raise ValidationError("Invalid date format")
    try:
        return date.fromisoformat(value.strip())
    except ValueError:
        raise ValidationError("Invalid date format")


def validate_weights_sum(weights: Iterable[float], tolerance: Optional[float] = None) -> float:
    """
    Check that task weights add up to 100 within the configured tolerance.

    Returns:
        The total weight

    Raises:
        ValidationError: If the total is off by the tolerance or more
    """
    if tolerance is None:
        tolerance = load_settings().weight_tolerance
    total = sum(weights)
    if abs(total - 100) >= tolerance:
        raise ValidationError(
            f"Weights must sum to 100% (currently {total:.1f}%). "
            "Use Auto-Normalize or adjust manually."
        )
    return total


# ============================================================================
# Error Handling with Error ID System
# ============================================================================

def error_log_file() -> str:
    return os.path.join(load_settings().log_dir, 'errors.jsonl')


def handle_error(
    operation: str,
    error: Exception,
    context: Optional[Dict[str, Any]] = None
) -> str:
    """
    Handle error: log full details, return a short error ID for the caller to show.

    Args:
        operation: Name of operation that failed (e.g., 'trend', 'finalize_report')
        error: Exception that occurred
        context: Optional additional context

    Returns:
        Error ID string (8 characters)
    """
    log = get_logger()
    error_id = str(uuid.uuid4())[:8]

    error_details = {
        'error_id': error_id,
        'timestamp': datetime.utcnow().isoformat(),
        'operation': operation,
        'error_type': type(error).__name__,
        'error_message': str(error),
        'traceback': ''.join(traceback.format_exception(type(error), error, error.__traceback__)),
        'environment': load_settings().environment,
        'context': context or {}
    }

    try:
        with open(error_log_file(), 'a', encoding='utf-8') as f:
            f.write(json.dumps(error_details, default=str) + '\n')
    except OSError as log_error:
        log.warning(f"Failed to write error log: {log_error}")

    log.error(f"[ERROR {error_id}] {operation}: {error}")
    return error_id
