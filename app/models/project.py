"""Project model for the CSR Project Tracker.

This module defines the Project model which represents a CSR project
funded by a partner organization and executed by the project team.
"""
from datetime import datetime
from typing import Optional

from app import db
from app.models.base import RecordMixin


class ProjectStatus:
    """Enumeration of valid project status values.

    Status values are stored as strings in the database to keep
    the schema simple and allow easy inspection via SQL.
    """
    PLANNING = "planning"
    ACTIVE = "active"
    COMPLETED = "completed"
    ON_HOLD = "on_hold"
    UPCOMING = "upcoming"
    ARCHIVED = "archived"

    ALL = [PLANNING, ACTIVE, COMPLETED, ON_HOLD, UPCOMING, ARCHIVED]


class Project(RecordMixin, db.Model):
    """SQLAlchemy model for CSR projects.

    Attributes:
        project_code: Short human-readable code (e.g. PRJ-001).
        name: Project name (required).
        description: Free-text description.
        csr_partner_id: Funding CSR partner.
        project_manager_id: User managing the project.
        status: Current project status (defaults to planning).
        start_date: Planned or actual start.
        expected_end_date: Planned completion.
        total_budget: Budget sanctioned for the project.
        approved_budget: Portion of the budget approved for release.
        utilized_budget: Amount spent so far.
        pending_budget: Spending awaiting approval.
        completion_percentage: 0-100 progress indicator.
        is_active: Cleared when the project is archived.
        meta: Free-form impact figures (beneficiaries_current, ...),
            stored in the ``metadata`` column.
    """
    __tablename__ = 'projects'

    project_code: Optional[str] = db.Column(db.String(50), nullable=True)
    name: str = db.Column(db.String(300), nullable=False)
    description: Optional[str] = db.Column(db.Text, nullable=True)

    csr_partner_id: Optional[str] = db.Column(
        db.String(36), db.ForeignKey('csr_partners.id'), nullable=True
    )
    project_manager_id: Optional[str] = db.Column(db.String(36), nullable=True)

    status: str = db.Column(
        db.String(20),
        nullable=False,
        default=ProjectStatus.PLANNING
    )

    start_date: Optional[datetime] = db.Column(db.Date, nullable=True)
    expected_end_date: Optional[datetime] = db.Column(db.Date, nullable=True)

    total_budget: float = db.Column(db.Float, nullable=False, default=0)
    approved_budget: float = db.Column(db.Float, nullable=False, default=0)
    utilized_budget: float = db.Column(db.Float, nullable=False, default=0)
    pending_budget: float = db.Column(db.Float, nullable=False, default=0)
    completion_percentage: float = db.Column(db.Float, nullable=False, default=0)
    is_active: bool = db.Column(db.Boolean, nullable=False, default=True)

    meta: Optional[dict] = db.Column('metadata', db.JSON, nullable=True)
