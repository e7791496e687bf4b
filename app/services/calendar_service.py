"""Calendar event service: meetings, trainings, workshops, reviews and field visits."""
from datetime import date, datetime, timedelta, timezone
from typing import Optional

from app.models import EventStatus, EventType
from app.services.aggregation import count_by
from app.services.repository import ErrorPolicy, Repository, check_choice, require_fields
from app.store import TableStore, between, eq


class CalendarEventService:
    """CRUD, scheduling queries and statistics for calendar events.

    Events are listed in ascending event date order.
    """

    REQUIRED_FIELDS = ['title']

    def __init__(self, store: TableStore, policy: str = ErrorPolicy.RAISE):
        self.repo = Repository(
            store, 'calendar_events', order_by='event_date', descending=False,
            policy=policy, label='calendar events',
        )

    def list_events(self, event_type: Optional[str] = None) -> list[dict]:
        filters = [eq('event_type', event_type)] if event_type else []
        return self.repo.find(filters)

    def get_event(self, id: str) -> Optional[dict]:
        return self.repo.get(id)

    def get_events_by_project(self, project_id: str) -> list[dict]:
        return self.repo.find([eq('project_id', project_id)])

    def get_events_by_date_range(self, start_date: str, end_date: str) -> list[dict]:
        return self.repo.find(between('event_date', start_date, end_date))

    def get_upcoming_events(self, days: int = 30, today: Optional[date] = None) -> list[dict]:
        """Scheduled events between today and ``days`` days from now."""
        today = today or datetime.now(timezone.utc).date()
        end = today + timedelta(days=days)
        return self.repo.find(
            between('event_date', today.isoformat(), end.isoformat())
            + [eq('status', EventStatus.SCHEDULED)]
        )

    def create_event(self, data: dict) -> Optional[dict]:
        """Create an event.

        Status defaults to scheduled.

        Raises:
            ValueError: If title is missing, or status or event_type is invalid.
        """
        require_fields(data, self.REQUIRED_FIELDS)
        payload = dict(data)
        payload.setdefault('status', EventStatus.SCHEDULED)
        check_choice(payload['status'], EventStatus.ALL)
        if 'event_type' in payload:
            check_choice(payload['event_type'], EventType.ALL, field='event_type')
        return self.repo.create(payload)

    def update_event(self, id: str, data: dict) -> Optional[dict]:
        if 'status' in data:
            check_choice(data['status'], EventStatus.ALL)
        if 'event_type' in data:
            check_choice(data['event_type'], EventType.ALL, field='event_type')
        return self.repo.update(id, data)

    def update_event_status(self, id: str, status: str) -> Optional[dict]:
        check_choice(status, EventStatus.ALL)
        return self.repo.update(id, {'status': status})

    def delete_event(self, id: str) -> bool:
        return self.repo.delete(id)

    def get_event_stats(self, events: list[dict] = None) -> dict:
        """Count events per type and per status.

        Returns:
            {'total': n, 'by_type': {...}, 'by_status': {...}}
        """
        if events is None:
            events = self.repo.find(columns=['event_type', 'status'])
        by_type = count_by(events, 'event_type', EventType.ALL)
        by_status = count_by(events, 'status', EventStatus.ALL)
        total = by_type.pop('total')
        by_status.pop('total')
        return {'total': total, 'by_type': by_type, 'by_status': by_status}
