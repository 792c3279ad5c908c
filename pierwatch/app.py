"""
PierWatch Flask Application.

Main entry point for the web application. Initializes:
- Dashboard service (Schiphol client + shared response cache)
- API routes

Usage:
    python -m pierwatch.app

Or with gunicorn:
    gunicorn 'pierwatch.app:create_app()'
"""

import logging
import os
from typing import Optional

from flask import Flask
from flask_cors import CORS

from pierwatch.api import flights_bp, metrics_bp
from pierwatch.config import config
from pierwatch.services import DashboardService

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if config.debug else logging.INFO,
    format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S',
)
logger = logging.getLogger(__name__)


def create_app(service: Optional[DashboardService] = None) -> Flask:
    """
    Application factory for Flask.

    Args:
        service: Dashboard service to serve from. Tests pass one built
                 around a fake client; by default it is built from config.

    Returns:
        Configured Flask application instance.
    """
    app = Flask(__name__)

    # Configuration
    app.config['SECRET_KEY'] = config.secret_key

    # Enable CORS for API endpoints
    CORS(app, resources={r'/api/*': {'origins': '*'}})

    if not config.schiphol.is_configured and service is None:
        logger.warning('SCHIPHOL_APP_ID / SCHIPHOL_APP_KEY not set - statistics will be placeholders')

    app.config['DASHBOARD_SERVICE'] = service or DashboardService()

    # Register API blueprints
    app.register_blueprint(flights_bp)
    app.register_blueprint(metrics_bp)

    @app.route('/health')
    def health():
        """Simple health check endpoint."""
        return {'status': 'ok'}

    # -------------------------------------------------------------------------
    # Error handlers
    # -------------------------------------------------------------------------

    @app.errorhandler(404)
    def not_found(e):
        return {'error': 'Not found'}, 404

    @app.errorhandler(500)
    def server_error(e):
        logger.error(f'Server error: {e}')
        return {'error': 'Internal server error'}, 500

    return app


def run_development_server():
    """Run the development server."""
    app = create_app()

    # Get port from environment or default
    port = int(os.environ.get('PORT', 5000))

    logger.info(f'Starting PierWatch on http://localhost:{port}')

    app.run(
        host='0.0.0.0',
        port=port,
        debug=config.debug,
    )


if __name__ == '__main__':
    run_development_server()
