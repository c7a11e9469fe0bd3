"""Users blueprint: registration and login."""
from flask import Blueprint

from bellavibe.database import get_session
from bellavibe.services.auth_service import register_user, authenticate, issue_token
from bellavibe.utils.http import success_response, get_json_payload

users_bp = Blueprint('users', __name__, url_prefix='/users')


@users_bp.route('/register', methods=['POST'])
def register():
    payload = get_json_payload()
    user = register_user(
        get_session(),
        payload.get('name'),
        payload.get('email'),
        payload.get('password'),
    )
    return success_response(
        f'User registered successfully! ID: {user.id}',
        {'id': user.id},
        201
    )


@users_bp.route('/login', methods=['POST'])
def login():
    payload = get_json_payload()
    user = authenticate(get_session(), payload.get('email'), payload.get('password'))
    token = issue_token(user)
    return success_response('Login successful!', {
        'user_id': user.id,
        'user_name': user.name,
        'user_email': user.email,
        'token': token,
    })
