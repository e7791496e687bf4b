"""Budget models: allocations, utilizations and categories.

Amounts are stored as floats in rupees. Fiscal years use the "2024-25"
label form; quarters are "Q1".."Q4"; months are month names.
"""
from typing import Optional

from app import db
from app.models.base import RecordMixin


class BudgetAllocation(RecordMixin, db.Model):
    """Money earmarked for a project under one budget category."""
    __tablename__ = 'budget_allocation'

    project_id: Optional[str] = db.Column(
        db.String(36), db.ForeignKey('projects.id'), nullable=True
    )
    category_id: Optional[str] = db.Column(db.String(36), nullable=True)
    category_name: Optional[str] = db.Column(db.String(200), nullable=True)

    allocated_amount: float = db.Column(db.Float, nullable=False, default=0)
    utilized_amount: float = db.Column(db.Float, nullable=False, default=0)
    pending_amount: float = db.Column(db.Float, nullable=False, default=0)
    available_amount: float = db.Column(db.Float, nullable=False, default=0)

    fiscal_year: Optional[str] = db.Column(db.String(20), nullable=True)
    quarter: Optional[str] = db.Column(db.String(5), nullable=True)
    month: Optional[str] = db.Column(db.String(20), nullable=True)
    notes: Optional[str] = db.Column(db.Text, nullable=True)


class BudgetUtilization(RecordMixin, db.Model):
    """Partner-level record of how much of a project's funding was spent."""
    __tablename__ = 'budget_utilization'

    csr_partner_id: Optional[str] = db.Column(
        db.String(36), db.ForeignKey('csr_partners.id'), nullable=True
    )
    project_id: Optional[str] = db.Column(
        db.String(36), db.ForeignKey('projects.id'), nullable=True
    )

    fiscal_year: Optional[str] = db.Column(db.String(20), nullable=True)
    quarter: Optional[str] = db.Column(db.String(5), nullable=True)
    month: Optional[str] = db.Column(db.String(20), nullable=True)

    allocated_amount: float = db.Column(db.Float, nullable=False, default=0)
    utilized_amount: float = db.Column(db.Float, nullable=False, default=0)
    committed_amount: float = db.Column(db.Float, nullable=False, default=0)
    pending_amount: float = db.Column(db.Float, nullable=False, default=0)
    available_amount: float = db.Column(db.Float, nullable=False, default=0)
    utilization_percentage: float = db.Column(db.Float, nullable=False, default=0)

    date: Optional[str] = db.Column(db.Date, nullable=True)
    description: Optional[str] = db.Column(db.Text, nullable=True)
    notes: Optional[str] = db.Column(db.Text, nullable=True)


class BudgetCategory(RecordMixin, db.Model):
    """A node in a project's budget head hierarchy.

    Root categories have no ``parent_id``.
    """
    __tablename__ = 'budget_categories'

    project_id: Optional[str] = db.Column(
        db.String(36), db.ForeignKey('projects.id'), nullable=True
    )
    parent_id: Optional[str] = db.Column(db.String(36), nullable=True)
    name: str = db.Column(db.String(200), nullable=False)

    allocated_amount: float = db.Column(db.Float, nullable=False, default=0)
    utilized_amount: float = db.Column(db.Float, nullable=False, default=0)
    pending_amount: float = db.Column(db.Float, nullable=False, default=0)
    available_amount: float = db.Column(db.Float, nullable=False, default=0)

    created_by: Optional[str] = db.Column(db.String(36), nullable=True)
    updated_by: Optional[str] = db.Column(db.String(36), nullable=True)
