"""
MangaShelf - Custom Exceptions and Exception Handlers
"""
import structlog
from flask import jsonify
from werkzeug.exceptions import HTTPException

logger = structlog.get_logger('exceptions')


class MangaShelfException(Exception):
    """Base exception for MangaShelf"""
    status_code = 400

    def __init__(self, message: str, code: str = "MANGASHELF_ERROR", details=None):
        self.message = message
        self.code = code
        self.details = details
        super().__init__(message)

    def to_dict(self):
        data = {
            'success': False,
            'code': self.code,
            'message': self.message
        }
        if self.details:
            data['details'] = self.details
        return data


class ValidationException(MangaShelfException):
    """Invalid request parameters (missing query, bad page, bad payload)"""
    status_code = 400

    def __init__(self, message: str, details=None):
        super().__init__(message, code="VALIDATION_ERROR", details=details)
        logger.warning(f"Validation error: {message}")


# Name used by the search layer for rejected requests
InvalidRequest = ValidationException


class NotFoundException(MangaShelfException):
    status_code = 404

    def __init__(self, resource_type: str, resource_id=None):
        if resource_id is not None:
            message = f"{resource_type} with ID '{resource_id}' not found"
        else:
            message = f"{resource_type} not found"
        super().__init__(message, code="NOT_FOUND")


class ConflictException(MangaShelfException):
    status_code = 409

    def __init__(self, message: str):
        super().__init__(message, code="CONFLICT")
        logger.info(f"Conflict: {message}")


class StoreUnavailableException(MangaShelfException):
    """The document store could not answer; callers may retry"""
    status_code = 503

    def __init__(self, message: str = "Data store unavailable"):
        super().__init__(message, code="STORE_UNAVAILABLE")
        self.retryable = True
        logger.error(f"Store unavailable: {message}")


class SearchCancelledException(MangaShelfException):
    """The caller abandoned the search before it completed"""
    status_code = 499

    def __init__(self, message: str = "Search cancelled"):
        super().__init__(message, code="SEARCH_CANCELLED")
        logger.info(message)


class AuthenticationException(MangaShelfException):
    """Authentication-related exceptions"""
    status_code = 401

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message, code="UNAUTHORIZED")
        logger.warning(f"Authentication error: {message}")


class AuthorizationException(MangaShelfException):
    """Authorization-related exceptions"""
    status_code = 403

    def __init__(self, message: str = "Access denied"):
        super().__init__(message, code="FORBIDDEN")
        logger.warning(f"Authorization error: {message}")


def register_exception_handlers(app):
    """Register exception handlers with Flask app"""

    @app.errorhandler(HTTPException)
    def handle_http_exception(e):
        """Handle HTTP exceptions"""
        return jsonify({
            'success': False,
            'code': e.name.upper().replace(' ', '_'),
            'message': e.description
        }), e.code

    @app.errorhandler(MangaShelfException)
    def handle_mangashelf_exception(e):
        """Handle MangaShelf custom exceptions"""
        response = jsonify(e.to_dict())
        if isinstance(e, StoreUnavailableException):
            response.headers['Retry-After'] = '5'
        return response, e.status_code

    @app.errorhandler(Exception)
    def handle_generic_exception(e):
        """Handle all other exceptions"""
        logger.error(f"Unhandled exception: {e}", exc_info=True)
        return jsonify({
            'success': False,
            'code': 'INTERNAL_ERROR',
            'message': 'An unexpected error occurred'
        }), 500
