"""Daily report model."""
from datetime import datetime
from typing import Optional

from app import db
from app.models.base import RecordMixin


class DailyReport(RecordMixin, db.Model):
    """A field team member's end-of-day summary for one project.

    A report is pending approval while both ``approved_by`` and
    ``approved_at`` are empty.
    """
    __tablename__ = 'daily_reports'

    report_code: Optional[str] = db.Column(db.String(50), nullable=True)
    project_id: Optional[str] = db.Column(
        db.String(36), db.ForeignKey('projects.id'), nullable=True
    )
    user_id: Optional[str] = db.Column(db.String(36), nullable=True)

    date: Optional[datetime] = db.Column(db.Date, nullable=True)
    day_of_week: Optional[str] = db.Column(db.String(10), nullable=True)
    work_summary: Optional[str] = db.Column(db.Text, nullable=True)

    tasks_completed: int = db.Column(db.Integer, nullable=False, default=0)
    tasks_pending: int = db.Column(db.Integer, nullable=False, default=0)
    tasks_started: int = db.Column(db.Integer, nullable=False, default=0)

    notes: Optional[str] = db.Column(db.Text, nullable=True)
    submitted_at: Optional[datetime] = db.Column(db.DateTime, nullable=True)
    approved_by: Optional[str] = db.Column(db.String(36), nullable=True)
    approved_at: Optional[datetime] = db.Column(db.DateTime, nullable=True)
