"""Error types and handlers with OpenTelemetry trace context."""

from typing import Any

from flask import Flask, jsonify
from opentelemetry import trace


class APIError(Exception):
    """Base error rendered as a JSON response.

    Subclasses set ``status_code`` and a default client-facing ``message``.
    """

    status_code = 500
    message = "Internal server error"

    def __init__(self, message: str | None = None, details: dict[str, Any] | None = None):
        super().__init__(message or self.message)
        if message is not None:
            self.message = message
        self.details = details


class MalformedRequestError(APIError):
    """Request body is not a JSON object."""

    status_code = 400
    message = "Malformed request body"


class TaskValidationError(APIError):
    """Payload or path parameter failed validation."""

    status_code = 400
    message = "Validation failed"


class TaskNotFoundError(APIError):
    """No task row matches the requested id."""

    status_code = 404
    message = "Task not found"


class PersistenceError(APIError):
    """Unexpected store failure. The cause is logged, never sent to clients."""

    status_code = 500
    message = "Server encountered an issue"


class StoreConnectionError(ConnectionError):
    """The store could not be reached or failed its liveness check."""


def error_response(message: str, status_code: int, details: dict[str, Any] | None = None) -> tuple:
    """Create error response with trace context.

    Args:
        message: Error message.
        status_code: HTTP status code.
        details: Optional field-level messages.

    Returns:
        Tuple of (response, status_code).
    """
    response: dict[str, Any] = {
        "error": message,
        "status": status_code,
    }
    if details:
        response["details"] = details

    # Add trace ID for debugging
    span = trace.get_current_span()
    span_context = span.get_span_context()
    if span_context.is_valid:
        response["trace_id"] = format(span_context.trace_id, "032x")

    return jsonify(response), status_code


def register_error_handlers(app: Flask) -> None:
    """Register error handlers on Flask app.

    Args:
        app: Flask application instance.
    """

    @app.errorhandler(APIError)
    def api_error(error: APIError):
        span = trace.get_current_span()
        if span.is_recording():
            span.set_attribute("error.type", type(error).__name__)
        return error_response(error.message, error.status_code, error.details)

    @app.errorhandler(400)
    def bad_request(error):
        return error_response("Bad request", 400)

    @app.errorhandler(404)
    def not_found(error):
        return error_response("Not found", 404)

    @app.errorhandler(405)
    def method_not_allowed(error):
        return error_response("Method not allowed", 405)

    @app.errorhandler(500)
    def internal_error(error):
        return error_response("Internal server error", 500)
