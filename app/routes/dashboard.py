"""Dashboard routes for the CSR Project Tracker.

Provides the admin dashboard summary as JSON.
"""
from flask import Blueprint, jsonify

from app.services import get_services

dashboard_bp = Blueprint('dashboard', __name__)


@dashboard_bp.route('/dashboard')
def dashboard_api():
    """API endpoint for dashboard data (JSON).

    Returns:
        JSON object with project, task and budget statistics, beneficiary
        metrics, monthly performance and upcoming events.
    """
    return jsonify({'data': get_services().dashboard.get_summary()})
