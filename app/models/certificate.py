"""Utilization certificate model."""
from datetime import datetime
from typing import Optional

from app import db
from app.models.base import RecordMixin


class CertificateStatus:
    """Enumeration of valid certificate status values.

    The UI walks draft -> pending -> approved/rejected, but any status may
    be set directly.
    """
    DRAFT = "draft"
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"

    ALL = [DRAFT, PENDING, APPROVED, REJECTED]


class CertificateType:
    """Enumeration of certificate reporting periods."""
    QUARTERLY = "Quarterly"
    HALF_YEARLY = "Half-Yearly"
    ANNUAL = "Annual"
    PROJECT_COMPLETION = "Project Completion"
    PROJECT_SPECIFIC = "Project-Specific"

    ALL = [QUARTERLY, HALF_YEARLY, ANNUAL, PROJECT_COMPLETION, PROJECT_SPECIFIC]


class UtilizationCertificate(RecordMixin, db.Model):
    """Compliance document attesting how much allocated budget was spent.

    After approval a certificate is sent to the partner, which later
    acknowledges receipt.
    """
    __tablename__ = 'utilization_certificates'

    certificate_code: Optional[str] = db.Column(db.String(50), nullable=True)
    project_id: Optional[str] = db.Column(
        db.String(36), db.ForeignKey('projects.id'), nullable=True
    )
    csr_partner_id: Optional[str] = db.Column(
        db.String(36), db.ForeignKey('csr_partners.id'), nullable=True
    )

    certificate_heading: Optional[str] = db.Column(db.String(300), nullable=True)
    certificate_type: Optional[str] = db.Column(db.String(30), nullable=True)
    period_from: Optional[datetime] = db.Column(db.Date, nullable=True)
    period_to: Optional[datetime] = db.Column(db.Date, nullable=True)
    fiscal_year: Optional[str] = db.Column(db.String(20), nullable=True)

    total_amount: float = db.Column(db.Float, nullable=False, default=0)
    utilized_amount: float = db.Column(db.Float, nullable=False, default=0)

    issue_date: Optional[datetime] = db.Column(db.Date, nullable=True)
    prepared_by: Optional[str] = db.Column(db.String(36), nullable=True)
    reviewed_by: Optional[str] = db.Column(db.String(36), nullable=True)
    approved_by: Optional[str] = db.Column(db.String(36), nullable=True)

    status: str = db.Column(db.String(20), nullable=False, default=CertificateStatus.DRAFT)
    sent_to_partner: bool = db.Column(db.Boolean, nullable=False, default=False)
    sent_date: Optional[datetime] = db.Column(db.Date, nullable=True)
    acknowledged: bool = db.Column(db.Boolean, nullable=False, default=False)
    acknowledgment_date: Optional[datetime] = db.Column(db.Date, nullable=True)
    notes: Optional[str] = db.Column(db.Text, nullable=True)
