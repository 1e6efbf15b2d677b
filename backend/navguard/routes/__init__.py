# Overview: Blueprint package; shared error translation for service exceptions.

from flask import jsonify

from ..errors import ConflictError, NotFoundError, ValidationError

_STATUS = (
    (ValidationError, 400),
    (NotFoundError, 404),
    (ConflictError, 409),
)


def error_response(exc: Exception):
    """JSON error body with the status mapped from a service exception."""
    for exc_type, status in _STATUS:
        if isinstance(exc, exc_type):
            return jsonify({"error": str(exc)}), status
    raise exc
