"""Daily report routes."""
from flask import Blueprint, jsonify, request

from app.routes.helpers import (
    date_range_args,
    done_response,
    item_response,
    json_body,
    list_response,
)
from app.services import get_services

daily_reports_bp = Blueprint('daily_reports', __name__)


@daily_reports_bp.route('/daily-reports', methods=['GET'])
def get_reports():
    """Get daily reports, newest first.

    Query Parameters:
        project_id: Reports for one project
        user_id: Reports written by one user
        start, end: Report date range (YYYY-MM-DD, both required together)
    """
    service = get_services().daily_reports
    args = request.args
    if args.get('project_id'):
        return list_response(service.get_reports_by_project(args['project_id']))
    if args.get('user_id'):
        return list_response(service.get_reports_by_user(args['user_id']))
    if args.get('start') or args.get('end'):
        start, end = date_range_args()
        return list_response(service.get_reports_by_date_range(start, end))
    return list_response(service.list_reports())


@daily_reports_bp.route('/daily-reports/pending', methods=['GET'])
def get_pending_reports():
    return list_response(get_services().daily_reports.get_pending_approval_reports())


@daily_reports_bp.route('/daily-reports/stats', methods=['GET'])
def report_stats():
    return jsonify({'data': get_services().daily_reports.get_daily_report_stats()})


@daily_reports_bp.route('/daily-reports/<id>', methods=['GET'])
def get_report(id: str):
    return item_response(get_services().daily_reports.get_report(id), 'Report')


@daily_reports_bp.route('/daily-reports', methods=['POST'])
def create_report():
    report = get_services().daily_reports.create_report(json_body())
    if report is None:
        return jsonify({'error': 'Report could not be created'}), 502
    return jsonify({'data': report}), 201


@daily_reports_bp.route('/daily-reports/<id>', methods=['PUT'])
def update_report(id: str):
    return item_response(get_services().daily_reports.update_report(id, json_body()), 'Report')


@daily_reports_bp.route('/daily-reports/<id>/submit', methods=['POST'])
def submit_report(id: str):
    return item_response(get_services().daily_reports.submit_report(id), 'Report')


@daily_reports_bp.route('/daily-reports/<id>/approve', methods=['POST'])
def approve_report(id: str):
    """Request Body (JSON): approved_by."""
    approved_by = json_body().get('approved_by')
    if not approved_by:
        raise ValueError('approved_by is required')
    return item_response(get_services().daily_reports.approve_report(id, approved_by), 'Report')


@daily_reports_bp.route('/daily-reports/<id>', methods=['DELETE'])
def delete_report(id: str):
    deleted = get_services().daily_reports.delete_report(id)
    return done_response(deleted, 'Report', 'Report deleted successfully')
