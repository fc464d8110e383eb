# tracker_backend/models.py
"""
Record types for daily plans, reports, templates, goals and missions.

Records are immutable; use dataclasses.replace() to derive updated copies.
Every record reads both the snake_case column names used by the report store
and the camelCase keys sent by the client.
"""
from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from .security_utils import ValidationError, validate_date


def new_id() -> str:
    return str(uuid.uuid4())


def _pick(data: Dict[str, Any], *keys: str, default: Any = None) -> Any:
    """Return the first present key; lets one parser accept snake_case and camelCase rows."""
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


def _optional_date(value: Any) -> Optional[date]:
    if value in (None, ''):
        return None
    return validate_date(value)


class GoalType(str, Enum):
    DAILY = 'daily'
    WEEKLY = 'weekly'
    MONTHLY = 'monthly'

    @classmethod
    def parse(cls, value: Any) -> 'GoalType':
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValidationError(
                f"Invalid goal type: {value}. Must be one of {', '.join(m.value for m in cls)}"
            )


class MissionCategory(str, Enum):
    PERSONAL = 'personal'
    CAREER = 'career'
    HEALTH = 'health'
    LEARNING = 'learning'
    FINANCIAL = 'financial'
    CREATIVE = 'creative'
    SOCIAL = 'social'
    OTHER = 'other'

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @classmethod
    def parse(cls, value: Any) -> 'MissionCategory':
        if value in (None, ''):
            return cls.PERSONAL
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValidationError(
                f"Invalid mission category: {value}. Must be one of {', '.join(m.value for m in cls)}"
            )


@dataclass(frozen=True)
class Task:
    id: str
    title: str
    weight: float
    completion_percent: float = 0.0
    category: Optional[str] = None
    description: Optional[str] = None
    created_at: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Task':
        return cls(
            id=str(_pick(data, 'id', default='') or new_id()),
            title=str(_pick(data, 'title', default='')),
            weight=float(_pick(data, 'weight', default=0)),
            completion_percent=float(_pick(data, 'completion_percent', 'completionPercent', default=0)),
            category=_pick(data, 'category'),
            description=_pick(data, 'description'),
            created_at=_pick(data, 'created_at', 'createdAt'),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'title': self.title,
            'weight': self.weight,
            'completion_percent': self.completion_percent,
            'category': self.category,
            'description': self.description,
            'created_at': self.created_at,
        }


@dataclass(frozen=True)
class DailyReport:
    id: str
    date: date
    tasks: Tuple[Task, ...] = ()
    productivity_percent: float = 0.0
    notes: Optional[str] = None
    version: int = 1
    created_at: Optional[str] = None

    @property
    def date_str(self) -> str:
        return self.date.isoformat()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'DailyReport':
        raw_tasks = _pick(data, 'tasks', default=[]) or []
        tasks = tuple(t if isinstance(t, Task) else Task.from_dict(t) for t in raw_tasks)
        return cls(
            id=str(_pick(data, 'id', default='') or new_id()),
            date=validate_date(_pick(data, 'date')),
            tasks=tasks,
            productivity_percent=float(_pick(data, 'productivity_percent', 'productivityPercent', default=0)),
            notes=_pick(data, 'notes'),
            version=int(_pick(data, 'version', default=1)),
            created_at=_pick(data, 'created_at', 'createdAt'),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'date': self.date.isoformat(),
            'tasks': [t.to_dict() for t in self.tasks],
            'productivity_percent': self.productivity_percent,
            'notes': self.notes,
            'version': self.version,
            'created_at': self.created_at,
        }


@dataclass(frozen=True)
class TemplateTask:
    """Task definition stored in a template: no id, no completion."""
    title: str
    weight: float
    category: Optional[str] = None
    description: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'TemplateTask':
        return cls(
            title=str(_pick(data, 'title', default='')),
            weight=float(_pick(data, 'weight', default=0)),
            category=_pick(data, 'category'),
            description=_pick(data, 'description'),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'title': self.title,
            'weight': self.weight,
            'category': self.category,
            'description': self.description,
        }


@dataclass(frozen=True)
class Template:
    id: str
    title: str
    tasks: Tuple[TemplateTask, ...] = ()
    description: Optional[str] = None
    created_at: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Template':
        raw_tasks = _pick(data, 'tasks', default=[]) or []
        return cls(
            id=str(_pick(data, 'id', default='') or new_id()),
            title=str(_pick(data, 'title', default='')),
            tasks=tuple(t if isinstance(t, TemplateTask) else TemplateTask.from_dict(t) for t in raw_tasks),
            description=_pick(data, 'description'),
            created_at=_pick(data, 'created_at', 'createdAt'),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'title': self.title,
            'description': self.description,
            'tasks': [t.to_dict() for t in self.tasks],
            'created_at': self.created_at,
        }


@dataclass(frozen=True)
class ProductivityGoal:
    id: str
    goal_type: GoalType
    target_percentage: float
    start_date: date
    end_date: date
    created_at: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ProductivityGoal':
        return cls(
            id=str(_pick(data, 'id', default='') or new_id()),
            goal_type=GoalType.parse(_pick(data, 'goal_type', 'goalType')),
            target_percentage=float(_pick(data, 'target_percentage', 'targetPercentage', default=0)),
            start_date=validate_date(_pick(data, 'start_date', 'startDate')),
            end_date=validate_date(_pick(data, 'end_date', 'endDate')),
            created_at=_pick(data, 'created_at', 'createdAt'),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'goal_type': self.goal_type.value,
            'target_percentage': self.target_percentage,
            'start_date': self.start_date.isoformat(),
            'end_date': self.end_date.isoformat(),
            'created_at': self.created_at,
        }


@dataclass(frozen=True)
class Mission:
    id: str
    title: str
    progress_percent: float = 0.0
    category: MissionCategory = MissionCategory.PERSONAL
    description: Optional[str] = None
    target_date: Optional[date] = None
    is_completed: bool = False
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Mission':
        return cls(
            id=str(_pick(data, 'id', default='') or new_id()),
            title=str(_pick(data, 'title', default='')),
            progress_percent=float(_pick(data, 'progress_percent', 'progressPercent', default=0)),
            category=MissionCategory.parse(_pick(data, 'category')),
            description=_pick(data, 'description'),
            target_date=_optional_date(_pick(data, 'target_date', 'targetDate')),
            is_completed=bool(_pick(data, 'is_completed', 'isCompleted', default=False)),
            created_at=_pick(data, 'created_at', 'createdAt'),
            updated_at=_pick(data, 'updated_at', 'updatedAt'),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'title': self.title,
            'description': self.description,
            'progress_percent': self.progress_percent,
            'category': self.category.value,
            'target_date': self.target_date.isoformat() if self.target_date else None,
            'is_completed': self.is_completed,
            'created_at': self.created_at,
            'updated_at': self.updated_at,
        }


def as_reports(rows: List[Any]) -> List[DailyReport]:
    """Accept DailyReport objects or raw store rows and return DailyReport objects."""
    return [r if isinstance(r, DailyReport) else DailyReport.from_dict(r) for r in rows]


def utc_timestamp(now: Optional[datetime] = None) -> str:
    return (now or datetime.utcnow()).isoformat()
