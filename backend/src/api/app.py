"""
Jersey Catalog API - Flask API Application
Main API application with Blueprints, CORS, session cookies and middleware.
"""

import time
from datetime import timedelta
from typing import Any, Mapping, Optional

from flask import Flask, g, request
from flask_cors import CORS

from utils.config import (
    FLASK_ENV, FLASK_DEBUG, SECRET_KEY, CORS_ORIGINS,
    SESSION_TIMEOUT_SECONDS, SESSION_COOKIE_SECURE,
)
from utils.logger import logger, log_api_request
from api.responses import envelope
from api.routes.auth import public_auth_bp, private_auth_bp
from api.routes.clients import clients_bp
from api.routes.docs import docs_bp
from api.routes.health import health_bp
from api.routes.products import products_bp
from api.routes.sizes import sizes_bp
from api.routes.users import users_bp
from api.middleware.error_handler import register_error_handlers

PUBLIC_PREFIX = '/public'
PRIVATE_PREFIX = '/private'


def create_app(test_config: Optional[Mapping[str, Any]] = None) -> Flask:
    """
    Create and configure Flask application.

    Args:
        test_config: Overrides applied after the defaults (tests)

    Returns:
        Configured Flask app instance
    """
    app = Flask(__name__)

    # Configuration
    app.config['ENV'] = FLASK_ENV
    app.config['DEBUG'] = FLASK_DEBUG
    app.config['SECRET_KEY'] = SECRET_KEY
    app.config['JSON_SORT_KEYS'] = False  # Preserve JSON key order

    # Signed-cookie session; lifetime matches the inactivity timeout
    app.config['SESSION_TIMEOUT_SECONDS'] = SESSION_TIMEOUT_SECONDS
    app.config['PERMANENT_SESSION_LIFETIME'] = timedelta(seconds=SESSION_TIMEOUT_SECONDS)
    app.config['SESSION_COOKIE_HTTPONLY'] = True
    app.config['SESSION_COOKIE_SAMESITE'] = 'Strict'
    app.config['SESSION_COOKIE_SECURE'] = SESSION_COOKIE_SECURE

    if test_config:
        app.config.update(test_config)

    # CORS configuration (credentials needed for the session cookie)
    CORS(app, supports_credentials=True, resources={
        r"/*": {
            "origins": CORS_ORIGINS,
            "methods": ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
            "allow_headers": ["Content-Type"]
        }
    })

    # Register blueprints
    app.register_blueprint(health_bp, url_prefix=PUBLIC_PREFIX)
    app.register_blueprint(public_auth_bp, url_prefix=PUBLIC_PREFIX)
    app.register_blueprint(private_auth_bp, url_prefix=PRIVATE_PREFIX)
    app.register_blueprint(users_bp, url_prefix=PRIVATE_PREFIX)
    app.register_blueprint(products_bp, url_prefix=PRIVATE_PREFIX)
    app.register_blueprint(clients_bp, url_prefix=PRIVATE_PREFIX)
    app.register_blueprint(sizes_bp, url_prefix=PRIVATE_PREFIX)
    app.register_blueprint(docs_bp)

    # Register error handlers
    register_error_handlers(app)

    @app.before_request
    def start_timer():
        g.request_started = time.perf_counter()

    @app.after_request
    def log_request(response):
        started = g.pop('request_started', None)
        if started is not None:
            duration_ms = (time.perf_counter() - started) * 1000
            log_api_request(request.method, request.path, response.status_code, duration_ms)
        return response

    # Log startup
    logger.info(f"Flask app created (env={FLASK_ENV}, debug={FLASK_DEBUG})")

    # Root endpoint
    @app.route('/')
    def index():
        """Root endpoint with API information."""
        return envelope({
            "name": "Jersey Catalog API",
            "version": "1.0.0",
            "status": "running",
            "endpoints": {
                "health": f"{PUBLIC_PREFIX}/health",
                "login": f"{PUBLIC_PREFIX}/login",
                "register": f"{PUBLIC_PREFIX}/register",
                "users": f"{PRIVATE_PREFIX}/users",
                "products": f"{PRIVATE_PREFIX}/products",
                "clients": f"{PRIVATE_PREFIX}/clients",
                "sizes": f"{PRIVATE_PREFIX}/sizes",
                "docs": "/api-docs.json"
            }
        })

    return app


if __name__ == '__main__':
    # Development server
    app = create_app()
    app.run(
        host='0.0.0.0',
        port=5000,
        debug=FLASK_DEBUG
    )
