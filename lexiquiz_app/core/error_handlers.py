"""
Error handling for the LexiQuiz JSON API.

Every failure under /api/ is answered with the same envelope:

    {"success": false, "message": ..., "code": ..., "details": {...}}

Domain code raises LexiQuizError subclasses; werkzeug HTTP errors and
unexpected exceptions are folded into the same shape by the handlers below.
"""

from typing import Any, Dict, Optional

from flask import current_app, jsonify, request
from werkzeug.exceptions import HTTPException, InternalServerError

API_PREFIX = '/api/'


def _envelope(message: str, code: str, details: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    return {
        'success': False,
        'message': message,
        'code': code,
        'details': details or {},
    }


class LexiQuizError(Exception):
    """Base exception class for LexiQuiz; carries its HTTP status and error code."""

    status_code = 500
    code = 'SERVER_ERROR'

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        return _envelope(self.message, self.code, self.details)


class NotFoundError(LexiQuizError):
    status_code = 404
    code = 'NOT_FOUND'

    def __init__(self, message: str = 'Resource not found', resource: str = None):
        super().__init__(message, {'resource': resource} if resource else None)


class ValidationError(LexiQuizError):
    """Request payload or query string rejected; `errors` is the field-level list."""

    status_code = 400
    code = 'VALIDATION_ERROR'

    def __init__(self, message: str = 'Validation failed', errors: Any = None):
        super().__init__(message, {'errors': errors} if errors else None)


class ConflictError(LexiQuizError):
    """A progress write kept losing to concurrent writers."""

    status_code = 409
    code = 'CONFLICT'

    def __init__(self, message: str = 'Conflicting update'):
        super().__init__(message)


def success_response(data: Any = None, message: str = None) -> dict:
    """Success envelope: {"success": true, "data": ..., "message": ...}."""
    response = {'success': True}
    if data is not None:
        response['data'] = data
    if message:
        response['message'] = message
    return response


def _http_code(error: HTTPException) -> str:
    # "Method Not Allowed" -> "METHOD_NOT_ALLOWED"
    return error.name.upper().replace(' ', '_')


def register_error_handlers(app):
    """Register error handlers with Flask app."""

    @app.errorhandler(LexiQuizError)
    def handle_lexiquiz_error(error):
        current_app.logger.warning("%s: %s", error.code, error.message)
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        if not request.path.startswith(API_PREFIX):
            return error
        return jsonify(_envelope(error.description, _http_code(error))), error.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        current_app.logger.exception('Internal server error')
        if not request.path.startswith(API_PREFIX):
            return InternalServerError(original_exception=error)
        return jsonify(_envelope('Internal server error', 'SERVER_ERROR')), 500
