"""Calendar event routes."""
from flask import Blueprint, current_app, jsonify, request

from app.routes.helpers import (
    date_range_args,
    done_response,
    item_response,
    json_body,
    list_response,
    parse_int,
)
from app.services import get_services

calendar_bp = Blueprint('calendar', __name__)


@calendar_bp.route('/events', methods=['GET'])
def get_events():
    """Get events by ascending date.

    Query Parameters:
        event_type: Filter by type (Meeting, Training, ...)
        project_id: Events of one project
        start, end: Event date range (YYYY-MM-DD, both required together)
    """
    service = get_services().events
    args = request.args
    if args.get('project_id'):
        return list_response(service.get_events_by_project(args['project_id']))
    if args.get('start') or args.get('end'):
        start, end = date_range_args()
        return list_response(service.get_events_by_date_range(start, end))
    return list_response(service.list_events(args.get('event_type')))


@calendar_bp.route('/events/upcoming', methods=['GET'])
def get_upcoming_events():
    days = parse_int(request.args.get('days'), current_app.config['UPCOMING_EVENT_DAYS'])
    return list_response(get_services().events.get_upcoming_events(days))


@calendar_bp.route('/events/stats', methods=['GET'])
def event_stats():
    return jsonify({'data': get_services().events.get_event_stats()})


@calendar_bp.route('/events/<id>', methods=['GET'])
def get_event(id: str):
    return item_response(get_services().events.get_event(id), 'Event')


@calendar_bp.route('/events', methods=['POST'])
def create_event():
    return item_response(get_services().events.create_event(json_body()), 'Event', 201)


@calendar_bp.route('/events/<id>', methods=['PUT'])
def update_event(id: str):
    return item_response(get_services().events.update_event(id, json_body()), 'Event')


@calendar_bp.route('/events/<id>/status', methods=['PUT'])
def update_event_status(id: str):
    status = json_body().get('status')
    return item_response(get_services().events.update_event_status(id, status), 'Event')


@calendar_bp.route('/events/<id>', methods=['DELETE'])
def delete_event(id: str):
    deleted = get_services().events.delete_event(id)
    return done_response(deleted, 'Event', 'Event deleted successfully')
