# tracker_backend/day_planner.py
"""
Day planning and the report save path.

Drafts a day's task list (blank or from a template), validates plans before
they are stored, and finalizes a DailyReport whose cached productivity_percent
always matches its tasks.
"""
from dataclasses import replace
from datetime import datetime
from typing import Any, List, Optional, Sequence, Union

from .analytics_logger import get_logger, log_event
from .models import DailyReport, Task, Template, TemplateTask, new_id, utc_timestamp
from .productivity import PRODUCTIVITY_SCORE_VERSION, calculate_productivity, normalize_weights
from .security_utils import (
    ValidationError,
    validate_category,
    validate_completion,
    validate_date,
    validate_notes,
    validate_task_title,
    validate_template_description,
    validate_template_title,
    validate_weight,
    validate_weights_sum,
)
from .settings import load_settings

DEFAULT_TASK_TITLE = 'Deep Work'
DEFAULT_TASK_WEIGHT = 25.0


class DayPlanner:
    """Builds and validates day plans and finalized reports."""

    def __init__(self, weight_tolerance: Optional[float] = None):
        if weight_tolerance is None:
            weight_tolerance = load_settings().weight_tolerance
        self.weight_tolerance = weight_tolerance
        self.logger = get_logger()

    # -----------------------------
    # Drafting
    # -----------------------------
    @staticmethod
    def new_task(
        title: str = '',
        weight: float = DEFAULT_TASK_WEIGHT,
        category: Optional[str] = None,
        now: Optional[datetime] = None
    ) -> Task:
        return Task(
            id=new_id(),
            title=title,
            weight=weight,
            completion_percent=0.0,
            category=category,
            created_at=utc_timestamp(now),
        )

    def draft_from_template(
        self,
        template: Union[Template, Sequence[TemplateTask], None],
        now: Optional[datetime] = None
    ) -> List[Task]:
        """Fresh tasks (completion 0) from a template or default template.

        Template weights are kept as stored; if they are all zero every task
        gets an equal share. With no template the day starts with one
        'Deep Work' task.
        """
        template_tasks = template.tasks if isinstance(template, Template) else (template or ())
        if not template_tasks:
            return [self.new_task(DEFAULT_TASK_TITLE, now=now)]

        drafted = [
            Task(
                id=new_id(),
                title=t.title,
                weight=t.weight,
                completion_percent=0.0,
                category=t.category,
                description=t.description,
                created_at=utc_timestamp(now),
            )
            for t in template_tasks
        ]
        if sum(t.weight for t in drafted) == 0:
            drafted = normalize_weights(drafted)
        return drafted

    # -----------------------------
    # Validation
    # -----------------------------
    @staticmethod
    def validate_task(task: Task) -> Task:
        """Return the task with a stripped title and cleaned category.

        Raises:
            ValidationError: on an empty/over-long title or out-of-range numbers
        """
        return replace(
            task,
            title=validate_task_title(task.title),
            weight=validate_weight(task.weight),
            completion_percent=validate_completion(task.completion_percent),
            category=validate_category(task.category),
        )

    def validate_plan(self, tasks: Sequence[Task]) -> List[Task]:
        """Validate a day's task list before saving it.

        Raises:
            ValidationError: no tasks, an invalid task, or weights not summing to 100
        """
        if not tasks:
            raise ValidationError("At least one task is required")
        validated = [self.validate_task(t) for t in tasks]
        validate_weights_sum((t.weight for t in validated), self.weight_tolerance)
        return validated

    def validate_template(self, template: Template) -> Template:
        if not template.tasks:
            raise ValidationError("At least one task is required")
        tasks = tuple(
            replace(
                t,
                title=validate_task_title(t.title),
                weight=validate_weight(t.weight),
                category=validate_category(t.category),
            )
            for t in template.tasks
        )
        return replace(
            template,
            title=validate_template_title(template.title),
            description=validate_template_description(template.description) or None,
            tasks=tasks,
        )

    # -----------------------------
    # Save path
    # -----------------------------
    def finalize_report(
        self,
        day: Any,
        tasks: Sequence[Task],
        notes: Optional[str] = None,
        existing: Optional[DailyReport] = None,
        now: Optional[datetime] = None
    ) -> DailyReport:
        """Build the report to store for `day`.

        productivity_percent is always recomputed from the tasks. Re-saving a
        day keeps the existing report id and bumps its version; nothing of the
        previous revision is retained.

        Raises:
            ValidationError: invalid date, tasks, weights or notes
        """
        try:
            report_date = validate_date(day)
            validated = self.validate_plan(tasks)
            clean_notes = validate_notes(notes)
        except ValidationError as e:
            self.logger.warning(f"Rejected report for {day}: {e}")
            raise

        if existing is not None and existing.date != report_date:
            raise ValidationError(
                f"Existing report is dated {existing.date_str}, not {report_date.isoformat()}"
            )

        report = DailyReport(
            id=existing.id if existing else new_id(),
            date=report_date,
            tasks=tuple(validated),
            productivity_percent=calculate_productivity(validated),
            notes=clean_notes or None,
            version=existing.version + 1 if existing else 1,
            created_at=existing.created_at if existing else utc_timestamp(now),
        )
        log_event(
            'report_finalized',
            date=report.date_str,
            task_count=len(report.tasks),
            productivity_percent=report.productivity_percent,
            score_version=PRODUCTIVITY_SCORE_VERSION,
            version=report.version,
        )
        return report
