"""
Global Error Handlers for Flask Application

This module provides global error handlers that catch unhandled exceptions
and return standardized error responses.
"""

import logging
from werkzeug.exceptions import HTTPException
from sqlalchemy.exc import SQLAlchemyError

from src.services.sequence_graph import DiagramError
from .error_handling import (
    handle_diagram_error,
    handle_exception,
    handle_not_found_error,
    handle_validation_error,
    create_error_response
)

logger = logging.getLogger(__name__)

def register_error_handlers(app):
    """Register global error handlers for the Flask application."""

    @app.errorhandler(404)
    def not_found_error(error):
        """Handle 404 Not Found errors."""
        return handle_not_found_error("Resource")

    @app.errorhandler(405)
    def method_not_allowed_error(error):
        """Handle 405 Method Not Allowed errors."""
        return create_error_response(
            'BAD_REQUEST',
            "Method not allowed for this endpoint",
            status_code=405
        )

    @app.errorhandler(400)
    def bad_request_error(error):
        """Handle 400 Bad Request errors."""
        return handle_validation_error("Invalid request data")

    @app.errorhandler(401)
    def unauthorized_error(error):
        """Handle 401 Unauthorized errors."""
        return create_error_response('UNAUTHORIZED', "Authentication required", status_code=401)

    @app.errorhandler(403)
    def forbidden_error(error):
        """Handle 403 Forbidden errors."""
        return create_error_response('FORBIDDEN', "Access denied", status_code=403)

    @app.errorhandler(500)
    def internal_server_error(error):
        """Handle 500 Internal Server Error."""
        return handle_exception(error, "request processing")

    @app.errorhandler(DiagramError)
    def diagram_error(error):
        """Handle malformed diagram input that escaped a route."""
        return handle_diagram_error(error)

    @app.errorhandler(SQLAlchemyError)
    def database_error(error):
        """Handle SQLAlchemy database errors."""
        return handle_exception(error, "database operation")

    @app.errorhandler(HTTPException)
    def http_error(error):
        """Handle HTTP exceptions."""
        return create_error_response(
            'BAD_REQUEST',
            error.description or "HTTP error occurred",
            status_code=error.code
        )

    @app.errorhandler(Exception)
    def generic_error(error):
        """Handle all other unhandled exceptions."""
        log_request_error(error)
        return handle_exception(error, "request processing")

def log_request_error(error, request_info=None):
    """Log request errors with context information."""
    error_context = {
        'error_type': type(error).__name__,
        'error_message': str(error),
        'request_method': request_info.get('method') if request_info else 'Unknown',
        'request_path': request_info.get('path') if request_info else 'Unknown',
    }

    logger.error(f"Request error: {error_context}")
