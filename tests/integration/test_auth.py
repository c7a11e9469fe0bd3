"""
Integration tests for authentication and authorization.
"""

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from bellavibe.models import User


class TestRegistration:
    """Test user registration flow."""

    def test_register_new_user(self, client, session):
        """Test successful user registration."""
        response = client.post('/users/register', json={
            'name': 'New User',
            'email': 'NewUser@Test.com',
            'password': 'securepass123',
        })

        assert response.status_code == 201
        data = response.get_json()
        assert data['status'] == 'success'
        user_id = data['body']['id']

        user = session.get(User, user_id)
        assert user is not None
        assert user.email == 'newuser@test.com'
        assert user.password_hash != 'securepass123'

    def test_register_with_existing_email_fails(self, client, user1):
        """Test that registering with existing email fails."""
        response = client.post('/users/register', json={
            'name': 'Duplicate User',
            'email': user1.email,
            'password': 'password123',
        })

        assert response.status_code == 400
        assert 'already registered' in response.get_json()['message']

    def test_register_with_short_password_fails(self, client):
        response = client.post('/users/register', json={
            'name': 'Test User',
            'email': 'short@test.com',
            'password': '123',
        })

        assert response.status_code == 400
        assert response.get_json()['code'] == 'VALIDATION_ERROR'

    def test_register_with_invalid_email_fails(self, client):
        response = client.post('/users/register', json={
            'name': 'Test User',
            'email': 'not-an-email',
            'password': 'password123',
        })

        assert response.status_code == 400


class TestLogin:
    """Test login functionality."""

    def test_login_with_valid_credentials(self, client, user1):
        """Test successful login returns a usable token."""
        response = client.post('/users/login', json={
            'email': user1.email,
            'password': 'password123',
        })

        assert response.status_code == 200
        body = response.get_json()['body']
        assert body['user_id'] == user1.id
        assert body['user_name'] == 'User One'
        assert body['user_email'] == user1.email

        protected = client.get('/cart', headers={'Authorization': f"Bearer {body['token']}"})
        assert protected.status_code == 200

    def test_login_with_invalid_password(self, client, user1):
        """Test login with invalid password fails."""
        response = client.post('/users/login', json={
            'email': user1.email,
            'password': 'wrongpassword',
        })

        assert response.status_code == 401
        assert response.get_json()['message'] == 'Invalid credentials.'

    def test_login_with_nonexistent_email(self, client):
        """Test login with non-existent email fails."""
        response = client.post('/users/login', json={
            'email': 'nonexistent@test.com',
            'password': 'password123',
        })

        assert response.status_code == 401


class TestBearerToken:
    """Test token validation on protected routes."""

    def _token(self, app, **overrides):
        now = datetime.now(timezone.utc)
        payload = {'sub': '1', 'name': 'n', 'email': 'e@test.com', 'exp': now + timedelta(hours=1)}
        payload.update(overrides)
        return jwt.encode(payload, app.config['JWT_SECRET'], algorithm='HS256')

    def test_missing_header(self, client):
        response = client.get('/products')

        assert response.status_code == 401
        assert response.get_json()['message'] == 'Missing authentication token.'

    def test_wrong_scheme(self, client, app):
        response = client.get('/products', headers={'Authorization': f'Token {self._token(app)}'})

        assert response.status_code == 401
        assert 'Bearer' in response.get_json()['message']

    def test_expired_token(self, client, app):
        token = self._token(app, exp=datetime.now(timezone.utc) - timedelta(minutes=1))

        response = client.get('/products', headers={'Authorization': f'Bearer {token}'})

        assert response.status_code == 401
        assert response.get_json()['message'] == 'Token expired.'

    def test_bad_signature(self, client):
        token = jwt.encode(
            {'sub': '1', 'exp': datetime.now(timezone.utc) + timedelta(hours=1)},
            'some-other-secret-that-is-long-enough',
            algorithm='HS256'
        )

        response = client.get('/products', headers={'Authorization': f'Bearer {token}'})

        assert response.status_code == 401
        assert response.get_json()['message'] == 'Invalid token signature.'

    def test_malformed_token(self, client):
        response = client.get('/products', headers={'Authorization': 'Bearer not.a.jwt'})

        assert response.status_code == 401
        assert response.get_json()['message'] == 'Malformed token.'

    def test_valid_token(self, client, app):
        response = client.get('/products', headers={'Authorization': f'Bearer {self._token(app)}'})

        assert response.status_code == 200


class TestCredentialTypes:
    """Non-string credentials are rejected, not crashed on."""

    @pytest.mark.parametrize('overrides', [
        {'name': 5},
        {'email': 5},
        {'email': None},
        {'password': 1234567},
        {'password': ['password123']},
    ])
    def test_register_rejects_non_string_fields(self, client, overrides):
        payload = {'name': 'Typed User', 'email': 'typed@test.com', 'password': 'password123'}
        payload.update(overrides)

        response = client.post('/users/register', json=payload)

        assert response.status_code == 400
        assert response.get_json()['code'] == 'VALIDATION_ERROR'

    @pytest.mark.parametrize('payload', [
        {'email': 5, 'password': 'password123'},
        {'email': 'user@test.com', 'password': 1234567},
        {},
    ])
    def test_login_rejects_non_string_fields(self, client, payload):
        response = client.post('/users/login', json=payload)

        assert response.status_code == 401
        assert response.get_json()['message'] == 'Invalid credentials.'
