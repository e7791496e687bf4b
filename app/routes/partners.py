"""CSR partner routes."""
from flask import Blueprint, jsonify, request

from app.routes.helpers import done_response, item_response, json_body, list_response
from app.services import get_services

partners_bp = Blueprint('partners', __name__)


@partners_bp.route('/partners', methods=['GET'])
def get_partners():
    """Active partners sorted by company name."""
    return list_response(get_services().partners.list_partners())


@partners_bp.route('/partners/search', methods=['GET'])
def search_partners():
    """Search partners by the ``q`` query parameter."""
    return list_response(get_services().partners.search_partners(request.args.get('q', '')))


@partners_bp.route('/partners/stats', methods=['GET'])
def partner_stats():
    return jsonify({'data': get_services().partners.get_partner_stats()})


@partners_bp.route('/partners/high-utilization', methods=['GET'])
def high_utilization_partners():
    """Active partners that have used more than 80% of their allocation."""
    return list_response(get_services().partners.get_high_utilization_partners())


@partners_bp.route('/partners/state/<state>', methods=['GET'])
def get_partners_by_state(state: str):
    return list_response(get_services().partners.get_partners_by_state(state))


@partners_bp.route('/partners/<id>', methods=['GET'])
def get_partner(id: str):
    return item_response(get_services().partners.get_partner(id), 'Partner')


@partners_bp.route('/partners', methods=['POST'])
def create_partner():
    partner = get_services().partners.create_partner(json_body())
    if partner is None:
        return jsonify({'error': 'Partner could not be created'}), 502
    return jsonify({'data': partner}), 201


@partners_bp.route('/partners/<id>', methods=['PUT'])
def update_partner(id: str):
    return item_response(get_services().partners.update_partner(id, json_body()), 'Partner')


@partners_bp.route('/partners/<id>', methods=['DELETE'])
def deactivate_partner(id: str):
    """Soft delete: the partner is deactivated, not removed."""
    deactivated = get_services().partners.deactivate_partner(id)
    return done_response(deactivated, 'Partner', 'Partner deactivated successfully')


@partners_bp.route('/partners/<id>/projects', methods=['GET'])
def get_partner_projects(id: str):
    return list_response(get_services().projects.get_projects_by_partner(id))


@partners_bp.route('/partners/<id>/utilizations', methods=['GET'])
def get_partner_utilizations(id: str):
    return list_response(get_services().utilizations.get_utilizations_by_partner(id))


@partners_bp.route('/partners/<id>/activate', methods=['POST'])
def activate_partner(id: str):
    activated = get_services().partners.activate_partner(id)
    return done_response(activated, 'Partner', 'Partner activated successfully')
