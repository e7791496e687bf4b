"""Task model."""
from datetime import datetime
from typing import Optional

from app import db
from app.models.base import RecordMixin


class TaskStatus:
    """Enumeration of valid task status values."""
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    ON_PRIORITY = "on_priority"
    BLOCKED = "blocked"
    CANCELLED = "cancelled"

    ALL = [NOT_STARTED, IN_PROGRESS, COMPLETED, ON_PRIORITY, BLOCKED, CANCELLED]


class Task(RecordMixin, db.Model):
    """A unit of work on a project, assigned to one team member.

    ``completed_date`` is set when the task moves to completed and cleared
    when it leaves that status.
    """
    __tablename__ = 'tasks'

    task_code: Optional[str] = db.Column(db.String(50), nullable=True)
    project_id: Optional[str] = db.Column(
        db.String(36), db.ForeignKey('projects.id'), nullable=True
    )
    parent_task_id: Optional[str] = db.Column(db.String(36), nullable=True)

    title: str = db.Column(db.String(300), nullable=False)
    description: Optional[str] = db.Column(db.Text, nullable=True)
    task_type: Optional[str] = db.Column(db.String(50), nullable=True)
    category: Optional[str] = db.Column(db.String(120), nullable=True)

    assigned_to: Optional[str] = db.Column(db.String(36), nullable=True)
    assigned_by: Optional[str] = db.Column(db.String(36), nullable=True)
    department: Optional[str] = db.Column(db.String(120), nullable=True)

    due_date: Optional[datetime] = db.Column(db.Date, nullable=True)
    start_date: Optional[datetime] = db.Column(db.Date, nullable=True)
    completed_date: Optional[datetime] = db.Column(db.Date, nullable=True)

    status: str = db.Column(db.String(20), nullable=False, default=TaskStatus.NOT_STARTED)
    priority: Optional[str] = db.Column(db.String(20), nullable=True)
    completion_percentage: float = db.Column(db.Float, nullable=False, default=0)
    actual_hours: Optional[float] = db.Column(db.Float, nullable=True)

    notes: Optional[str] = db.Column(db.Text, nullable=True)
