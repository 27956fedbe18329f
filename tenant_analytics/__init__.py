"""
Flask application factory.

Creates and configures the Flask app, registers the analytics blueprint.
"""
import importlib

from flask import Flask


def create_app():
    """Create and configure the Flask application."""
    from tenant_analytics.logging_config import configure_logging

    app = Flask(__name__)

    configure_logging(app)

    from tenant_analytics.routes.analytics import bp as analytics_bp
    app.register_blueprint(analytics_bp)

    # Import models so Base.metadata knows about them (required for SQLAlchemy).
    # Schema is managed by Alembic; no init_db() call.
    importlib.import_module('tenant_analytics.models.tenant')
    importlib.import_module('tenant_analytics.models.activity')
    importlib.import_module('tenant_analytics.models.metric_snapshot')
    importlib.import_module('tenant_analytics.models.analytics_document')

    return app
