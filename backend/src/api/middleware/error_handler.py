"""
Jersey Catalog API - Error Handler Middleware
Standardized error envelopes for all API endpoints.
"""

from flask import Flask
from werkzeug.exceptions import HTTPException

from api.responses import error_response
from api.validation import ValidationError
from database.exceptions import ConflictError, PersistenceError, SchemaError
from utils.logger import logger


def register_error_handlers(app: Flask):
    """
    Register error handlers for Flask app.

    Args:
        app: Flask application instance
    """

    @app.errorhandler(400)
    def bad_request(error):
        """Handle 400 Bad Request errors."""
        logger.warning(f"Bad request: {error}")
        return error_response(400, str(error.description) if hasattr(error, 'description') else "Invalid request")

    @app.errorhandler(401)
    def unauthorized(error):
        """Handle 401 Unauthorized errors."""
        logger.warning(f"Unauthorized access: {error}")
        return error_response(401, "You must log in")

    @app.errorhandler(403)
    def forbidden(error):
        logger.warning(f"Forbidden: {error}")
        return error_response(403, "You do not have permission to perform this action")

    @app.errorhandler(404)
    def not_found(error):
        """Handle 404 Not Found errors."""
        logger.info(f"Not found: {error}")
        return error_response(404, "Resource not found")

    @app.errorhandler(405)
    def method_not_allowed(error):
        logger.info(f"Method not allowed: {error}")
        return error_response(405, "Method not allowed")

    @app.errorhandler(ValidationError)
    def validation_failed(error):
        """Handle field validation failures (422 with a field -> message map)."""
        logger.info("Validation failed", extra={"fields": sorted(error.errors)})
        return error_response(422, error.errors, message=error.message)

    @app.errorhandler(ConflictError)
    def conflict(error):
        logger.warning(f"Conflict: {error}", extra={"table": error.table})
        return error_response(409, str(error))

    @app.errorhandler(SchemaError)
    def schema_error(error):
        logger.error(f"Schema error: {error}", extra={"table": error.table})
        return error_response(500, "Server misconfiguration")

    @app.errorhandler(PersistenceError)
    def persistence_error(error):
        logger.error(f"Persistence error: {error}", extra={"table": error.table}, exc_info=True)
        return error_response(500, "The operation could not be completed")

    @app.errorhandler(500)
    def internal_server_error(error):
        """Handle 500 Internal Server Error."""
        logger.error(f"Internal server error: {error}", exc_info=True)
        return error_response(500, "An unexpected error occurred. Please try again later.")

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        """Handle all unhandled exceptions."""
        # HTTP exceptions without a dedicated handler keep their own status
        if isinstance(error, HTTPException):
            return error_response(error.code or 500, error.description or error.name)

        logger.error(f"Unexpected error: {error}", exc_info=True)
        return error_response(500, "An unexpected error occurred. Please try again later.")

    logger.info("Error handlers registered")
