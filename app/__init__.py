"""Flask application factory.

This module contains the create_app factory function that initializes
and configures the Flask application.
"""
import logging
from typing import Optional

from flask import Flask
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy

from app.config import Config

# Initialize extensions without app context
# These will be initialized with the app in create_app()
db = SQLAlchemy()
migrate = Migrate()

logger = logging.getLogger(__name__)


def create_app(config_class: type = Config, store=None) -> Flask:
    """Create and configure the Flask application.

    Uses the application factory pattern to allow creating multiple
    app instances with different configurations (e.g., for testing).

    Args:
        config_class: Configuration class to use. Defaults to Config.
        store: Table store to serve from. When omitted, one is built
            from the DATA_STORE setting.

    Returns:
        Configured Flask application instance.
    """
    app = Flask(__name__)
    app.config.from_object(config_class)

    from app.logging_config import configure_logging
    configure_logging(app)

    # Initialize extensions with app
    db.init_app(app)
    migrate.init_app(app, db)

    # Models must be imported so Flask-Migrate sees every table
    from app import models  # noqa: F401
    from app.services import ServiceRegistry
    from app.store import create_store

    if store is None:
        store = create_store(app.config['DATA_STORE'])
    app.extensions['csr_store'] = store
    app.extensions['csr_services'] = ServiceRegistry(store, app.config)

    from app.routes import register_blueprints
    register_blueprints(app)

    # Simple health check route
    @app.route('/health')
    def health_check():
        return {'status': 'healthy'}

    logger.info('Started %s with %s store', app.config.get('APP_NAME'), type(store).__name__)
    return app


def get_store(app: Optional[Flask] = None):
    """Return the table store of the given (or current) application."""
    from flask import current_app
    return (app or current_app).extensions['csr_store']
