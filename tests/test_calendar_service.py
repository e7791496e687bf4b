"""Tests for the calendar event service."""
from datetime import date

import pytest

from app.models import EventStatus, EventType
from app.services import CalendarEventService
from app.store import StoreError


@pytest.fixture
def events(services):
    rows = [
        {'title': 'Partner review', 'event_type': 'Review', 'event_date': '2026-06-20'},
        {'title': 'Volunteer training', 'event_type': 'Training', 'event_date': '2026-06-05'},
        {'title': 'Village visit', 'event_type': 'Field Visit', 'event_date': '2026-06-10',
         'status': 'cancelled', 'project_id': 'p1'},
        {'title': 'Kickoff', 'event_type': 'Meeting', 'event_date': '2026-09-01',
         'project_id': 'p1'},
    ]
    return [services.events.create_event(r) for r in rows]


class TestCreateEvent:

    def test_defaults_to_scheduled(self, services):
        assert services.events.create_event({'title': 'Sync'})['status'] == EventStatus.SCHEDULED

    def test_requires_title(self, services):
        with pytest.raises(ValueError):
            services.events.create_event({'event_type': 'Meeting'})

    def test_rejects_invalid_type(self, services):
        with pytest.raises(ValueError, match='Invalid event_type'):
            services.events.create_event({'title': 'x', 'event_type': 'Party'})


class TestQueries:

    def test_earliest_first(self, services, events):
        titles = [e['title'] for e in services.events.list_events()]
        assert titles == ['Volunteer training', 'Village visit', 'Partner review', 'Kickoff']

    def test_filters(self, services, events):
        assert len(services.events.list_events(event_type='Training')) == 1
        assert len(services.events.get_events_by_project('p1')) == 2
        assert len(services.events.get_events_by_date_range('2026-06-01', '2026-06-30')) == 3

    def test_upcoming_only_scheduled(self, services, events):
        upcoming = services.events.get_upcoming_events(days=30, today=date(2026, 6, 1))
        assert [e['title'] for e in upcoming] == ['Volunteer training', 'Partner review']

    def test_upcoming_window(self, services, events):
        upcoming = services.events.get_upcoming_events(days=7, today=date(2026, 6, 1))
        assert [e['title'] for e in upcoming] == ['Volunteer training']


class TestUpdates:

    def test_update_event_status(self, services, events):
        event = services.events.update_event_status(events[0]['id'], EventStatus.COMPLETED)
        assert event['status'] == EventStatus.COMPLETED

    def test_update_event_validates(self, services, events):
        with pytest.raises(ValueError):
            services.events.update_event(events[0]['id'], {'status': 'postponed'})

    def test_update_event_rejects_blank_choices(self, services, events):
        for blank in ('', None):
            with pytest.raises(ValueError, match='Invalid status'):
                services.events.update_event(events[0]['id'], {'status': blank})
            with pytest.raises(ValueError, match='Invalid event_type'):
                services.events.update_event(events[0]['id'], {'event_type': blank})
        assert services.events.get_event(events[0]['id'])['status'] == EventStatus.SCHEDULED

    def test_delete_event(self, services, events):
        assert services.events.delete_event(events[0]['id']) is True
        assert services.events.get_event(events[0]['id']) is None


class TestStats:

    def test_by_type_and_status(self, services, events):
        stats = services.events.get_event_stats()

        assert stats['total'] == 4
        assert stats['by_type'][EventType.TRAINING] == 1
        assert stats['by_type'][EventType.WORKSHOP] == 0
        assert stats['by_status'][EventStatus.SCHEDULED] == 3
        assert stats['by_status'][EventStatus.CANCELLED] == 1
        assert sum(stats['by_type'].values()) == stats['total']


def test_store_failure_raises(failing_store):
    with pytest.raises(StoreError):
        CalendarEventService(failing_store).get_upcoming_events()
