"""Bill model."""
from datetime import datetime
from typing import Optional

from app import db
from app.models.base import RecordMixin


class BillStatus:
    """Enumeration of valid bill status values."""
    PENDING = "pending"
    APPROVED = "approved"
    PAID = "paid"

    ALL = [PENDING, APPROVED, PAID]


class BillType:
    """Enumeration of bill document types."""
    INVOICE = "Invoice"
    RECEIPT = "Receipt"
    ESTIMATE = "Estimate"

    ALL = [INVOICE, RECEIPT, ESTIMATE]


class Bill(RecordMixin, db.Model):
    """A vendor invoice, receipt or estimate charged to a project.

    Marking a bill as paid copies ``total_amount`` into ``amount_paid``.
    """
    __tablename__ = 'bills'

    bill_code: Optional[str] = db.Column(db.String(50), nullable=True)
    project_id: Optional[str] = db.Column(
        db.String(36), db.ForeignKey('projects.id'), nullable=True
    )
    bill_type: Optional[str] = db.Column(db.String(20), nullable=True)
    bill_number: Optional[str] = db.Column(db.String(100), nullable=True)
    bill_overview: Optional[str] = db.Column(db.Text, nullable=True)

    vendor_name: Optional[str] = db.Column(db.String(300), nullable=True)
    vendor_gstin: Optional[str] = db.Column(db.String(20), nullable=True)

    date: Optional[datetime] = db.Column(db.Date, nullable=True)
    due_date: Optional[datetime] = db.Column(db.Date, nullable=True)

    subtotal: Optional[float] = db.Column(db.Float, nullable=True)
    tax_amount: Optional[float] = db.Column(db.Float, nullable=True)
    total_amount: float = db.Column(db.Float, nullable=False, default=0)
    amount_paid: float = db.Column(db.Float, nullable=False, default=0)

    status: str = db.Column(db.String(20), nullable=False, default=BillStatus.PENDING)
    payment_method: Optional[str] = db.Column(db.String(50), nullable=True)
    payment_reference: Optional[str] = db.Column(db.String(100), nullable=True)

    submitted_by: Optional[str] = db.Column(db.String(36), nullable=True)
    approved_by: Optional[str] = db.Column(db.String(36), nullable=True)
    paid_by: Optional[str] = db.Column(db.String(36), nullable=True)
    notes: Optional[str] = db.Column(db.Text, nullable=True)
