"""
Authentication service for user management.

Handles registration, credential checks and bearer token issuance.
"""
import logging
import re
from datetime import datetime, timedelta, timezone

import jwt
from flask import current_app
from sqlalchemy.exc import IntegrityError

from bellavibe.exceptions import ValidationError, BusinessLogicError, UnauthorizedError
from bellavibe.models import User
from bellavibe.utils.validation import as_text

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$')
MIN_PASSWORD_LENGTH = 6


def register_user(session, name, email, password):
    """
    Create a new user with a hashed password.

    Raises:
        ValidationError: missing/invalid fields
        BusinessLogicError: email already registered
    """
    name = as_text(name)
    email = as_text(email)

    if not name:
        raise ValidationError('name is required')
    if not email or not EMAIL_PATTERN.match(email.lower()):
        raise ValidationError('A valid email is required')
    email = email.lower()
    if not isinstance(password, str) or len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f'password must have at least {MIN_PASSWORD_LENGTH} characters')

    if session.query(User).filter_by(email=email).first():
        raise BusinessLogicError('Email already registered.')

    user = User(name=name, email=email)
    user.set_password(password)
    try:
        session.add(user)
        session.commit()
    except IntegrityError as e:
        # Concurrent registration with the same email
        session.rollback()
        logger.warning(f"Duplicate registration for {email}: {e}")
        raise BusinessLogicError('Email already registered.')

    logger.info(f"User registered: id={user.id}, email={email}")
    return user


def authenticate(session, email, password):
    """Return the user for valid credentials, else raise UnauthorizedError."""
    email = as_text(email)
    if not email or not isinstance(password, str):
        raise UnauthorizedError('Invalid credentials.')

    email = email.lower()
    user = session.query(User).filter_by(email=email).first()
    if not user or not user.check_password(password):
        logger.info(f"Failed login attempt for {email}")
        raise UnauthorizedError('Invalid credentials.')
    return user


def issue_token(user):
    """Encode a signed bearer token for ``user``."""
    config = current_app.config
    now = datetime.now(timezone.utc)
    payload = {
        'sub': str(user.id),
        'name': user.name,
        'email': user.email,
        'iat': now,
        'exp': now + timedelta(hours=config['JWT_EXPIRATION_HOURS']),
    }
    return jwt.encode(payload, config['JWT_SECRET'], algorithm=config['JWT_ALGORITHM'])


def decode_token(token):
    """
    Validate a bearer token and return its claims.

    Raises:
        UnauthorizedError: with a message describing why the token was refused
    """
    config = current_app.config
    try:
        claims = jwt.decode(
            token,
            config['JWT_SECRET'],
            algorithms=[config['JWT_ALGORITHM']],
            options={'require': ['sub', 'exp']},
        )
    except jwt.ExpiredSignatureError:
        raise UnauthorizedError('Token expired.')
    except jwt.InvalidSignatureError:
        raise UnauthorizedError('Invalid token signature.')
    except jwt.DecodeError:
        raise UnauthorizedError('Malformed token.')
    except jwt.InvalidTokenError as e:
        logger.info(f"Rejected token: {e}")
        raise UnauthorizedError('Invalid authentication token.')
    return claims
