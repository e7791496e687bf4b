"""Calendar event model."""
from datetime import datetime
from typing import Optional

from app import db
from app.models.base import RecordMixin


class EventStatus:
    """Enumeration of valid calendar event status values."""
    SCHEDULED = "scheduled"
    ONGOING = "ongoing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    ALL = [SCHEDULED, ONGOING, COMPLETED, CANCELLED]


class EventType:
    """Enumeration of calendar event types."""
    MEETING = "Meeting"
    TRAINING = "Training"
    WORKSHOP = "Workshop"
    REVIEW = "Review"
    FIELD_VISIT = "Field Visit"

    ALL = [MEETING, TRAINING, WORKSHOP, REVIEW, FIELD_VISIT]


class CalendarEvent(RecordMixin, db.Model):
    """A meeting, training, workshop, review or field visit."""
    __tablename__ = 'calendar_events'

    event_code: Optional[str] = db.Column(db.String(50), nullable=True)
    project_id: Optional[str] = db.Column(
        db.String(36), db.ForeignKey('projects.id'), nullable=True
    )
    task_id: Optional[str] = db.Column(db.String(36), nullable=True)

    title: str = db.Column(db.String(300), nullable=False)
    description: Optional[str] = db.Column(db.Text, nullable=True)
    event_type: Optional[str] = db.Column(db.String(30), nullable=True)

    event_date: Optional[datetime] = db.Column(db.Date, nullable=True)
    start_time: Optional[str] = db.Column(db.String(10), nullable=True)
    end_time: Optional[str] = db.Column(db.String(10), nullable=True)
    is_all_day: bool = db.Column(db.Boolean, nullable=False, default=False)

    location: Optional[str] = db.Column(db.String(300), nullable=True)
    meeting_link: Optional[str] = db.Column(db.String(500), nullable=True)
    organizer_id: Optional[str] = db.Column(db.String(36), nullable=True)
    expected_attendees: Optional[int] = db.Column(db.Integer, nullable=True)
    actual_attendees: Optional[int] = db.Column(db.Integer, nullable=True)

    status: str = db.Column(db.String(20), nullable=False, default=EventStatus.SCHEDULED)
    notes: Optional[str] = db.Column(db.Text, nullable=True)
