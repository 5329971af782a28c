"""
Errors raised by StudyVault and the JSON envelope they are rendered into.

Every response body has the shape::

    {"success": bool, "data"?: ..., "message"?: str, "code"?: str, "details"?: {...}}
"""

from typing import Any, Dict, Optional

from flask import current_app, jsonify
from werkzeug.exceptions import HTTPException


class StudyVaultError(Exception):
    """Base class; subclasses set ``code`` and ``status_code``."""

    code = 'UNKNOWN_ERROR'
    status_code = 500

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None,
                 code: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        if code:
            self.code = code
        if status_code:
            self.status_code = status_code

    def to_dict(self) -> dict:
        return {
            'success': False,
            'message': self.message,
            'code': self.code,
            'details': self.details,
        }


class NotFoundError(StudyVaultError):
    """A record is missing. ``details.redirect`` is the list view to go back to."""

    code = 'NOT_FOUND'
    status_code = 404

    def __init__(self, message: str = 'Resource not found', resource: Optional[str] = None,
                 redirect: Optional[str] = None):
        details = {key: value for key, value in (('resource', resource), ('redirect', redirect)) if value}
        super().__init__(message, details)


class ValidationError(StudyVaultError):
    """Submitted data was rejected before reaching the store."""

    code = 'VALIDATION_ERROR'
    status_code = 400

    def __init__(self, message: str = 'Validation failed', errors: Optional[Dict] = None):
        super().__init__(message, {'errors': errors} if errors else None)


class StoreError(StudyVaultError):
    code = 'STORE_ERROR'
    status_code = 503

    def __init__(self, message: str = 'Content store unavailable', operation: Optional[str] = None):
        super().__init__(message, {'operation': operation} if operation else None)


def success_response(data: Any = None, message: Optional[str] = None) -> dict:
    body = {'success': True}
    if data is not None:
        body['data'] = data
    if message:
        body['message'] = message
    return body


def error_response(message: str, code: str = 'ERROR', status_code: int = 400,
                   details: Optional[Dict] = None) -> tuple:
    body = {'success': False, 'message': message, 'code': code}
    if details:
        body['details'] = details
    return jsonify(body), status_code


def register_error_handlers(app):
    """Render StudyVault and HTTP errors as JSON envelopes."""

    @app.errorhandler(StudyVaultError)
    def handle_studyvault_error(error):
        log = current_app.logger.error if error.status_code >= 500 else current_app.logger.warning
        log("%s: %s", error.code, error.message)
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        code = (error.name or 'Error').upper().replace(' ', '_')
        return error_response(error.description or error.name, code, error.code or 500)

    @app.errorhandler(500)
    def handle_internal_error(error):
        current_app.logger.exception('Unhandled error')
        return error_response('Internal server error', 'SERVER_ERROR', 500)
