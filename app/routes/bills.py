"""Bill routes."""
from flask import Blueprint, jsonify, request

from app.routes.helpers import (
    date_range_args,
    done_response,
    item_response,
    json_body,
    list_response,
)
from app.services import get_services

bills_bp = Blueprint('bills', __name__)


@bills_bp.route('/bills', methods=['GET'])
def get_bills():
    """Get bills, newest bill date first.

    Query Parameters:
        status: Filter by status
        project_id: Bills of one project
        vendor: Bills from one vendor (exact name)
    """
    service = get_services().bills
    if request.args.get('project_id'):
        return list_response(service.get_bills_by_project(request.args['project_id']))
    if request.args.get('vendor'):
        return list_response(service.get_bills_by_vendor(request.args['vendor']))
    return list_response(service.list_bills(request.args.get('status')))


@bills_bp.route('/bills/dated', methods=['GET'])
def get_bills_in_range():
    """Bills dated between ``start`` and ``end`` (YYYY-MM-DD)."""
    start, end = date_range_args()
    return list_response(get_services().bills.get_bills_by_date_range(start, end))


@bills_bp.route('/bills/stats', methods=['GET'])
def bill_stats():
    return jsonify({'data': get_services().bills.get_bill_stats()})


@bills_bp.route('/bills/<id>', methods=['GET'])
def get_bill(id: str):
    return item_response(get_services().bills.get_bill(id), 'Bill')


@bills_bp.route('/bills', methods=['POST'])
def create_bill():
    return item_response(get_services().bills.create_bill(json_body()), 'Bill', 201)


@bills_bp.route('/bills/<id>', methods=['PUT'])
def update_bill(id: str):
    return item_response(get_services().bills.update_bill(id, json_body()), 'Bill')


@bills_bp.route('/bills/<id>/status', methods=['PUT'])
def update_bill_status(id: str):
    """Request Body (JSON): status, user_id (approver or payer)."""
    data = json_body()
    bill = get_services().bills.update_bill_status(id, data.get('status'), data.get('user_id'))
    return item_response(bill, 'Bill')


@bills_bp.route('/bills/<id>', methods=['DELETE'])
def delete_bill(id: str):
    return done_response(get_services().bills.delete_bill(id), 'Bill', 'Bill deleted successfully')
