"""Media article model."""
from datetime import datetime
from typing import Optional

from app import db
from app.models.base import RecordMixin


class MediaType:
    """Enumeration of media item types."""
    PHOTO = "photo"
    VIDEO = "video"
    DOCUMENT = "document"
    PDF = "pdf"
    NEWSPAPER_CUTTING = "newspaper_cutting"
    CERTIFICATE = "certificate"
    REPORT = "report"

    ALL = [PHOTO, VIDEO, DOCUMENT, PDF, NEWSPAPER_CUTTING, CERTIFICATE, REPORT]


class ArticleStatus:
    """Publication states, derived from ``is_public`` and ``approved_by``."""
    PUBLISHED = "published"
    DRAFT = "draft"
    PENDING = "pending"

    ALL = [PUBLISHED, DRAFT, PENDING]


class MediaArticle(RecordMixin, db.Model):
    """Press coverage, photos and documents about a project.

    ``sub_category`` holds the news channel for newspaper coverage.
    """
    __tablename__ = 'media_articles'

    media_code: Optional[str] = db.Column(db.String(50), nullable=True)
    project_id: Optional[str] = db.Column(
        db.String(36), db.ForeignKey('projects.id'), nullable=True
    )

    title: str = db.Column(db.String(300), nullable=False)
    description: Optional[str] = db.Column(db.Text, nullable=True)
    media_type: Optional[str] = db.Column(db.String(30), nullable=True)
    category: Optional[str] = db.Column(db.String(120), nullable=True)
    sub_category: Optional[str] = db.Column(db.String(120), nullable=True)
    drive_link: Optional[str] = db.Column(db.String(500), nullable=True)

    publication_date: Optional[datetime] = db.Column(db.Date, nullable=True)
    reporter_name: Optional[str] = db.Column(db.String(200), nullable=True)
    uploaded_by: Optional[str] = db.Column(db.String(36), nullable=True)
    approved_by: Optional[str] = db.Column(db.String(36), nullable=True)
    approval_date: Optional[datetime] = db.Column(db.Date, nullable=True)

    is_public: bool = db.Column(db.Boolean, nullable=False, default=False)
    views_count: int = db.Column(db.Integer, nullable=False, default=0)
    downloads_count: int = db.Column(db.Integer, nullable=False, default=0)
    notes: Optional[str] = db.Column(db.Text, nullable=True)
