"""Utilization certificate routes."""
from flask import Blueprint, jsonify, request

from app.routes.helpers import done_response, item_response, json_body, list_response
from app.services import get_services

certificates_bp = Blueprint('certificates', __name__)


@certificates_bp.route('/certificates', methods=['GET'])
def get_certificates():
    """Query Parameters: project_id or csr_partner_id."""
    service = get_services().certificates
    if request.args.get('project_id'):
        return list_response(service.get_certificates_by_project(request.args['project_id']))
    if request.args.get('csr_partner_id'):
        return list_response(service.get_certificates_by_partner(request.args['csr_partner_id']))
    return list_response(service.list_certificates())


@certificates_bp.route('/certificates/stats', methods=['GET'])
def certificate_stats():
    return jsonify({'data': get_services().certificates.get_certificate_stats()})


@certificates_bp.route('/certificates/code', methods=['GET'])
def new_certificate_code():
    return jsonify({'data': get_services().certificates.generate_certificate_code()})


@certificates_bp.route('/certificates/<id>', methods=['GET'])
def get_certificate(id: str):
    return item_response(get_services().certificates.get_certificate(id), 'Certificate')


@certificates_bp.route('/certificates', methods=['POST'])
def create_certificate():
    certificate = get_services().certificates.create_certificate(json_body())
    return item_response(certificate, 'Certificate', 201)


@certificates_bp.route('/certificates/<id>', methods=['PUT'])
def update_certificate(id: str):
    certificate = get_services().certificates.update_certificate(id, json_body())
    return item_response(certificate, 'Certificate')


@certificates_bp.route('/certificates/<id>/status', methods=['PUT'])
def update_certificate_status(id: str):
    """Request Body (JSON): status, user_id (recorded when approving)."""
    data = json_body()
    ok = get_services().certificates.update_status(id, data.get('status'), data.get('user_id'))
    return done_response(ok, 'Certificate', 'Status updated')


@certificates_bp.route('/certificates/<id>/sent', methods=['POST'])
def mark_sent(id: str):
    ok = get_services().certificates.mark_sent_to_partner(id)
    return done_response(ok, 'Certificate', 'Certificate marked as sent')


@certificates_bp.route('/certificates/<id>/acknowledged', methods=['POST'])
def mark_acknowledged(id: str):
    ok = get_services().certificates.mark_acknowledged(id)
    return done_response(ok, 'Certificate', 'Certificate marked as acknowledged')


@certificates_bp.route('/certificates/<id>', methods=['DELETE'])
def delete_certificate(id: str):
    deleted = get_services().certificates.delete_certificate(id)
    return done_response(deleted, 'Certificate', 'Certificate deleted successfully')
