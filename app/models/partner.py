"""CSR partner model."""
from typing import Optional

from app import db
from app.models.base import RecordMixin


class CSRPartner(RecordMixin, db.Model):
    """An external organization sponsoring one or more projects.

    Partners are never hard-deleted; deactivation clears ``is_active``.
    """
    __tablename__ = 'csr_partners'

    company_name: str = db.Column(db.String(300), nullable=False)
    city: Optional[str] = db.Column(db.String(120), nullable=True)
    address: Optional[str] = db.Column(db.Text, nullable=True)
    state: Optional[str] = db.Column(db.String(120), nullable=True)
    website: Optional[str] = db.Column(db.String(300), nullable=True)
    budget_allocated: float = db.Column(db.Float, nullable=False, default=0)
    budget_utilized: float = db.Column(db.Float, nullable=False, default=0)
    is_active: bool = db.Column(db.Boolean, nullable=False, default=True)
