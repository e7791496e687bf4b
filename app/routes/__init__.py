"""Flask blueprints package.

This package contains all route blueprints for the application.
Each blueprint exposes one area of the service layer as JSON.
"""
import logging

from flask import Flask, jsonify

from app.store import StoreError

logger = logging.getLogger(__name__)


def register_error_handlers(app: Flask) -> None:
    """Translate service errors into JSON error responses.

    ValueError (validation) becomes 400 and StoreError (backend failure)
    becomes 502.
    """

    @app.errorhandler(ValueError)
    def handle_value_error(error):
        return jsonify({'error': str(error)}), 400

    @app.errorhandler(StoreError)
    def handle_store_error(error):
        logger.error('Data store failure: %s', error)
        return jsonify({'error': 'Data store unavailable'}), 502


def register_blueprints(app: Flask) -> None:
    """Register all application blueprints.

    Called by the app factory to set up all routes.

    Args:
        app: The Flask application instance.
    """
    from app.routes.bills import bills_bp
    from app.routes.budgets import budgets_bp
    from app.routes.calendar import calendar_bp
    from app.routes.certificates import certificates_bp
    from app.routes.daily_reports import daily_reports_bp
    from app.routes.dashboard import dashboard_bp
    from app.routes.media import media_bp
    from app.routes.partners import partners_bp
    from app.routes.projects import projects_bp
    from app.routes.tasks import tasks_bp

    for blueprint in (
        dashboard_bp, projects_bp, partners_bp, tasks_bp, budgets_bp,
        bills_bp, daily_reports_bp, calendar_bp, media_bp, certificates_bp,
    ):
        app.register_blueprint(blueprint, url_prefix='/api')

    register_error_handlers(app)
