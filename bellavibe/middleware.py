"""Middleware for bearer-token authentication."""
from collections import namedtuple
from functools import wraps

from flask import g, request

from bellavibe.exceptions import UnauthorizedError
from bellavibe.services.auth_service import decode_token

AuthenticatedUser = namedtuple('AuthenticatedUser', ['user_id', 'user_name', 'user_email'])


def load_authenticated_user():
    """
    Resolve the ``Authorization: Bearer <token>`` header into g.user.

    Raises UnauthorizedError when the header is missing or the token is invalid.
    """
    auth_header = request.headers.get('Authorization')
    if not auth_header:
        raise UnauthorizedError('Missing authentication token.')

    if not auth_header.startswith('Bearer '):
        raise UnauthorizedError("Invalid token format. Expected 'Bearer <token>'.")

    token = auth_header[len('Bearer '):].strip()
    claims = decode_token(token)

    try:
        user_id = int(claims['sub'])
    except (TypeError, ValueError):
        raise UnauthorizedError('Invalid authentication token.')

    g.user = AuthenticatedUser(
        user_id=user_id,
        user_name=claims.get('name', ''),
        user_email=claims.get('email', ''),
    )
    g.user_id = user_id
    return g.user


def require_auth(f):
    """
    Decorator: Require a valid bearer token.

    The verified principal is available as ``g.user`` inside the view.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        load_authenticated_user()
        return f(*args, **kwargs)
    return decorated_function
