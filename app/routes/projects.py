"""Project routes for the CSR Project Tracker API.

This module provides RESTful API endpoints for project CRUD operations,
search, statistics and budget/completion updates. Routes call the service
layer; they handle HTTP concerns only.
"""
from flask import Blueprint, jsonify, request

from app.routes.helpers import (
    done_response,
    item_response,
    json_body,
    list_response,
)
from app.services import get_services

projects_bp = Blueprint('projects', __name__)


def _build_filters_from_request() -> dict:
    """Build a filters dict from request query parameters.

    Returns:
        Dictionary of filter parameters for the service layer.
    """
    filters = {}

    # Status filter - can be comma-separated
    status = request.args.get('status')
    if status:
        status_list = [s.strip() for s in status.split(',') if s.strip()]
        if status_list:
            filters['status'] = status_list

    if request.args.get('csr_partner_id'):
        filters['csr_partner_id'] = request.args.get('csr_partner_id')
    if request.args.get('search'):
        filters['search'] = request.args.get('search')

    # Sorting
    if request.args.get('sort_by'):
        filters['sort_by'] = request.args.get('sort_by')
    if request.args.get('sort_dir'):
        filters['sort_dir'] = request.args.get('sort_dir')

    return filters


# ============================================================================
# Project CRUD Routes
# ============================================================================

@projects_bp.route('/projects', methods=['GET'])
def get_projects():
    """Get all projects with optional filtering and sorting.

    Query Parameters:
        status: Filter by status (comma-separated for multiple)
        csr_partner_id: Filter by funding partner
        search: Case-insensitive search across name, description, code
        sort_by: Field to sort by (default: created_at)
        sort_dir: Sort direction, 'asc' or 'desc' (default: desc)

    Returns:
        JSON array of projects with count.
    """
    projects = get_services().projects.list_projects(_build_filters_from_request())
    return list_response(projects)


@projects_bp.route('/projects/<id>', methods=['GET'])
def get_project(id: str):
    return item_response(get_services().projects.get_project(id), 'Project')


@projects_bp.route('/projects', methods=['POST'])
def create_project():
    """Create a new project.

    Request Body (JSON):
        Required: name
        Optional: project_code, description, csr_partner_id, status
                  (defaults to planning), start_date, expected_end_date,
                  total_budget, metadata

    Returns:
        201 with created project data, or 400 on validation error.
    """
    project = get_services().projects.create_project(json_body())
    if project is None:
        return jsonify({'error': 'Project could not be created'}), 502
    return jsonify({'data': project}), 201


@projects_bp.route('/projects/<id>', methods=['PUT'])
def update_project(id: str):
    return item_response(get_services().projects.update_project(id, json_body()), 'Project')


@projects_bp.route('/projects/<id>', methods=['DELETE'])
def delete_project(id: str):
    """Hard delete a project.

    Returns:
        200 with success message, or 404 if not found.
    """
    deleted = get_services().projects.delete_project(id)
    return done_response(deleted, 'Project', 'Project deleted successfully')


# ============================================================================
# Search, Statistics and Progress Routes
# ============================================================================

@projects_bp.route('/projects/search', methods=['GET'])
def search_projects():
    """Search projects by the ``q`` query parameter."""
    return list_response(get_services().projects.search_projects(request.args.get('q', '')))


@projects_bp.route('/projects/stats', methods=['GET'])
def project_stats():
    """Project counts per status plus beneficiary and monthly roll-ups."""
    service = get_services().projects
    projects = service.list_projects()
    return jsonify({'data': {
        'status_counts': service.get_project_stats(projects),
        'beneficiary_metrics': service.get_beneficiary_metrics(projects),
        'monthly_performance': service.get_monthly_performance(projects),
    }})


@projects_bp.route('/projects/<id>/budget', methods=['POST'])
def add_project_spending(id: str):
    """Add spending to a project.

    Request Body (JSON):
        amount: Amount utilized.
    """
    data = json_body()
    if not isinstance(data.get('amount'), (int, float)):
        raise ValueError('amount must be a number')
    return item_response(
        get_services().projects.update_project_budget(id, data['amount']), 'Project',
    )


@projects_bp.route('/projects/<id>/completion', methods=['PUT'])
def set_project_completion(id: str):
    """Set completion percentage (clamped to 0..100).

    Request Body (JSON):
        completion: Percentage complete.
    """
    data = json_body()
    if not isinstance(data.get('completion'), (int, float)):
        raise ValueError('completion must be a number')
    return item_response(
        get_services().projects.update_project_completion(id, data['completion']), 'Project',
    )


@projects_bp.route('/projects/<id>/status', methods=['PUT'])
def set_project_status(id: str):
    """Set project status.

    Request Body (JSON):
        status: New status.
        completion: Optional completion percentage set alongside.
    """
    data = json_body()
    completion = data.get('completion')
    if completion is not None and not isinstance(completion, (int, float)):
        raise ValueError('completion must be a number')
    return item_response(
        get_services().projects.update_project_status(id, data.get('status'), completion),
        'Project',
    )


@projects_bp.route('/projects/<id>/archive', methods=['POST'])
def archive_project(id: str):
    """Soft delete: the project is archived, not removed."""
    return item_response(get_services().projects.archive_project(id), 'Project')


@projects_bp.route('/projects/<id>/budget-overview', methods=['GET'])
def project_budget_overview(id: str):
    return item_response(get_services().projects.get_project_budget_overview(id), 'Project')
