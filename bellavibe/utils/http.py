"""JSON envelope and request helpers shared by the blueprints."""
from flask import jsonify, request

from bellavibe.exceptions import ValidationError
from bellavibe.utils.validation import is_strict_int


def envelope(message, body=None, status='success'):
    """Build ``{status, message, body?}``; ``body`` is left out when None."""
    rv = {'status': status, 'message': message}
    if body is not None:
        rv['body'] = body
    return rv


def success_response(message, body=None, status_code=200):
    return jsonify(envelope(message, body)), status_code


def get_json_payload():
    """Return the request JSON object or raise ValidationError."""
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise ValidationError('Request body must be a JSON object')
    return payload


def require_int(payload, key):
    """Read a strict 64-bit integer field (booleans and strings are rejected)."""
    value = payload.get(key)
    if not is_strict_int(value):
        raise ValidationError(f'{key} must be an integer')
    return value
