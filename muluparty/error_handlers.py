from flask import Blueprint, current_app, jsonify

from .errors import (
    AppError,
    InvariantViolationError,
    MalformedDocumentError,
    NotFoundError,
    TransportError,
    ValidationError,
)

error_handlers_bp = Blueprint("error_handlers", __name__)


def _error_response(message, status_code):
    return (
        jsonify({"success": False, "message": message, "data": None}),
        status_code,
    )


@error_handlers_bp.app_errorhandler(ValidationError)
def handle_validation_error(error):
    """Handles validation errors."""
    current_app.logger.warning(f"Validation Error: {error.message}")
    return _error_response(error.message, error.status_code)


@error_handlers_bp.app_errorhandler(NotFoundError)
def handle_not_found_error(error):
    """Handles not found errors."""
    current_app.logger.warning(f"Not Found Error: {error.message}")
    return _error_response(error.message, error.status_code)


@error_handlers_bp.app_errorhandler(InvariantViolationError)
def handle_invariant_violation(error):
    """Handles operations rejected to keep relationships consistent."""
    current_app.logger.warning(f"Invariant Violation: {error.message}")
    return _error_response(error.message, error.status_code)


@error_handlers_bp.app_errorhandler(MalformedDocumentError)
def handle_malformed_document(error):
    """Handles stored documents that could not be read."""
    current_app.logger.error(f"Malformed Document: {error.message}")
    return _error_response(error.message, error.status_code)


@error_handlers_bp.app_errorhandler(TransportError)
def handle_transport_error(error):
    """Handles failed calls to the document store."""
    current_app.logger.error(f"Transport Error: {error.message}")
    # Store messages can include backend details
    return _error_response(
        "A database error occurred. Please try again later.", error.status_code
    )


@error_handlers_bp.app_errorhandler(AppError)
def handle_app_error(error):
    """Handles generic application errors."""
    current_app.logger.error(f"Application Error: {error.message}")
    return _error_response(error.message, error.status_code)


@error_handlers_bp.app_errorhandler(404)
def handle_404(e):
    """Handles generic 404 errors for routes that don't exist."""
    return _error_response("The requested resource was not found.", 404)


@error_handlers_bp.app_errorhandler(405)
def handle_405(e):
    """Handles requests with a method the route does not accept."""
    return _error_response("Method not allowed.", 405)


@error_handlers_bp.app_errorhandler(500)
def handle_500(e):
    """Handles unexpected server errors."""
    current_app.logger.error(f"Internal Server Error: {e}")
    return _error_response("An unexpected error occurred.", 500)
