"""Task routes.

Task service failures propagate as StoreError and become 502 responses.
"""
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

tasks_bp = Blueprint('tasks', __name__)


@tasks_bp.route('/tasks', methods=['GET'])
def get_tasks():
    """Get tasks, newest first.

    Query Parameters:
        status: Filter by status
        project_id: Filter by project
        assigned_to: Tasks assigned to one user (ignores other filters)
    """
    service = get_services().tasks
    if request.args.get('assigned_to'):
        return list_response(service.get_tasks_by_user(request.args['assigned_to']))
    return list_response(service.list_tasks(
        status=request.args.get('status'),
        project_id=request.args.get('project_id'),
    ))


@tasks_bp.route('/tasks/due', methods=['GET'])
def get_tasks_due():
    """Tasks due between the ``start`` and ``end`` dates (YYYY-MM-DD)."""
    start, end = date_range_args()
    return list_response(get_services().tasks.get_tasks_by_date_range(start, end))


@tasks_bp.route('/tasks/overdue', methods=['GET'])
def get_overdue_tasks():
    return list_response(get_services().tasks.get_overdue_tasks())


@tasks_bp.route('/tasks/upcoming', methods=['GET'])
def get_upcoming_tasks():
    """Incomplete tasks due within ``days`` days (default UPCOMING_TASK_DAYS)."""
    days = parse_int(request.args.get('days'), current_app.config['UPCOMING_TASK_DAYS'])
    return list_response(get_services().tasks.get_upcoming_tasks(days))


@tasks_bp.route('/tasks/stats', methods=['GET'])
def task_stats():
    return jsonify({'data': get_services().tasks.get_task_stats()})


@tasks_bp.route('/tasks/<id>', methods=['GET'])
def get_task(id: str):
    return item_response(get_services().tasks.get_task(id), 'Task')


@tasks_bp.route('/tasks', methods=['POST'])
def create_task():
    return item_response(get_services().tasks.create_task(json_body()), 'Task', 201)


@tasks_bp.route('/tasks/<id>', methods=['PUT'])
def update_task(id: str):
    return item_response(get_services().tasks.update_task(id, json_body()), 'Task')


@tasks_bp.route('/tasks/<id>/status', methods=['PUT'])
def update_task_status(id: str):
    """Request Body (JSON): status."""
    status = json_body().get('status')
    return item_response(get_services().tasks.update_task_status(id, status), 'Task')


@tasks_bp.route('/tasks/<id>/completion', methods=['PUT'])
def update_task_completion(id: str):
    completion = json_body().get('completion')
    if not isinstance(completion, (int, float)):
        raise ValueError('completion must be a number')
    return item_response(get_services().tasks.update_task_completion(id, completion), 'Task')


@tasks_bp.route('/tasks/<id>', methods=['DELETE'])
def delete_task(id: str):
    return done_response(get_services().tasks.delete_task(id), 'Task', 'Task deleted successfully')


@tasks_bp.route('/projects/<project_id>/tasks', methods=['GET'])
def get_project_tasks(project_id: str):
    return list_response(get_services().tasks.get_tasks_by_project(project_id))
