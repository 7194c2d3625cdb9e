"""Error handlers for the application.

All responses are JSON: ``{"message": ..., "type": ..., "statusCode": ...}``.
"""
import logging

from flask import jsonify
from werkzeug.exceptions import HTTPException

from directory_api.core.exceptions import DirectoryError

logger = logging.getLogger(__name__)


def _error_response(status: int, error_type: str, message: str):
    return jsonify({"message": message, "type": error_type, "statusCode": status}), status


def register_error_handlers(app):
    """Register error handlers with the Flask app."""

    @app.errorhandler(DirectoryError)
    def handle_directory_error(error: DirectoryError):
        """Translate directory errors into their declared status."""
        if error.status >= 500:
            logger.error("Directory error: %s", error, exc_info=error)
        return jsonify(error.to_dict()), error.status

    @app.errorhandler(400)
    def bad_request(error):
        """Handle 400 Bad Request errors."""
        return _error_response(400, "BAD_REQUEST", error.description or "Bad Request")

    @app.errorhandler(404)
    def not_found(error):
        """Handle 404 Not Found errors."""
        return _error_response(404, "NOT_FOUND", "Resource not found")

    @app.errorhandler(405)
    def method_not_allowed(error):
        return _error_response(405, "METHOD_NOT_ALLOWED", "Method not allowed")

    @app.errorhandler(413)
    def request_too_large(error):
        """Handle payload too large errors."""
        max_size = app.config.get("MAX_CONTENT_LENGTH")
        return _error_response(413, "REQUEST_TOO_LARGE",
                               f"Request payload exceeds maximum allowed size ({max_size} bytes)")

    @app.errorhandler(500)
    def internal_error(error):
        """Handle 500 Internal Server Error."""
        logger.error("Internal error: %s", error, exc_info=True)
        return _error_response(500, "INTERNAL_ERROR", "An unexpected error occurred")

    @app.errorhandler(Exception)
    def handle_exception(error):
        """Handle uncaught exceptions."""
        # Pass through HTTP errors
        if isinstance(error, HTTPException):
            return error

        # Always log the full error; never expose it to the client
        logger.error("Unhandled exception: %s", error, exc_info=error)
        return _error_response(500, "INTERNAL_ERROR", "An unexpected error occurred")
