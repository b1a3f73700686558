from flask import jsonify
from pydantic import ValidationError


class ServiceError(Exception):
    """Base service error carrying the HTTP status the route should answer with."""
    status_code = 500

    def __init__(self, message, details=None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_response(self):
        body = {'error': self.message}
        if self.details:
            body['details'] = self.details
        return jsonify(body), self.status_code


class BadRequestError(ServiceError):
    """Raised for malformed input, unknown types or actions."""
    status_code = 400


class UnauthorizedError(ServiceError):
    """Raised when a credential is missing, invalid or expired."""
    status_code = 401


class ForbiddenError(ServiceError):
    """Raised when the caller lacks the role for an operation."""
    status_code = 403


class NotFoundError(ServiceError):
    """Raised when the requested row does not exist or is not visible to the caller."""
    status_code = 404


class ConflictError(ServiceError):
    """Raised when an operation violates review state transition rules."""
    status_code = 409


class UpstreamError(ServiceError):
    """Raised when the LLM, geocoder or a download fails."""
    status_code = 500


def validation_details(exc: ValidationError):
    """Flatten pydantic errors into [{field, message}]"""
    details = []
    for err in exc.errors():
        field = '.'.join(str(part) for part in err.get('loc', ())) or 'body'
        details.append({'field': field, 'message': err.get('msg', 'Invalid value')})
    return details


def validation_error_response(exc: ValidationError):
    return jsonify({'error': 'Validation failed', 'details': validation_details(exc)}), 400
