"""
Authentication API tests.

Verifies:
- POST /api/auth registers and returns a JWT
- PUT /api/auth logs in; bad credentials are 401 with one message
- DELETE /api/auth revokes the presented token
- Protected endpoints answer 401 with one body for every credential failure
"""

from datetime import timedelta

import jwt
import pytest

from conftest import TOKEN_PATTERN, auth_headers, get_auth_token, random_email
from pizza_service.models import SecurityEvent
from pizza_service.services import token_codec


class TestRegister:

    def test_register_diner(self, client):
        response = client.post('/api/auth', json={'name': 'pizza diner', 'email': 'd@test.com', 'password': 'a'})

        assert response.status_code == 200
        data = response.get_json()
        assert TOKEN_PATTERN.match(data['token'])
        assert data['user']['email'] == 'd@test.com'
        assert data['user']['roles'] == [{'role': 'diner'}]
        assert 'password' not in data['user']

    def test_register_duplicate_email(self, client):
        user = {'name': 'dup', 'email': random_email(), 'password': 'a'}
        assert client.post('/api/auth', json=user).status_code == 200

        response = client.post('/api/auth', json=user)
        assert response.status_code == 409
        assert response.get_json()['message']

    def test_register_missing_fields(self, client):
        response = client.post('/api/auth', json={'name': 'no email'})
        assert response.status_code == 400

    def test_register_non_json_body(self, client):
        response = client.post('/api/auth', data='not json', content_type='text/plain')
        assert response.status_code == 400

    def test_register_over_long_password(self, client):
        response = client.post('/api/auth', json={'name': 'long', 'email': random_email(), 'password': 'x' * 100})

        assert response.status_code == 400
        assert '72' in response.get_json()['message']

    def test_register_multibyte_password_at_limit(self, client):
        password = '\u00e9' * 36
        user = {'name': 'accents', 'email': random_email(), 'password': password}

        assert client.post('/api/auth', json=user).status_code == 200
        assert client.put('/api/auth', json={'email': user['email'], 'password': password}).status_code == 200


class TestLogin:

    def test_login_after_register(self, client):
        user = {'name': 'u', 'email': random_email(), 'password': 'a'}
        client.post('/api/auth', json=user)

        response = client.put('/api/auth', json={'email': user['email'], 'password': 'a'})
        assert response.status_code == 200
        data = response.get_json()
        assert TOKEN_PATTERN.match(data['token'])
        assert data['user']['email'] == user['email']

        me = client.get('/api/user/me', headers=auth_headers(data['token']))
        assert me.status_code == 200

    def test_wrong_password_and_unknown_email_are_indistinguishable(self, client, diner_user):
        wrong = client.put('/api/auth', json={'email': diner_user['email'], 'password': 'wrong'})
        unknown = client.put('/api/auth', json={'email': random_email(), 'password': 'a'})

        assert wrong.status_code == unknown.status_code == 401
        assert wrong.get_json() == unknown.get_json()

    def test_failed_login_is_audited(self, client, db_session, diner_user):
        client.put('/api/auth', json={'email': diner_user['email'], 'password': 'wrong'})
        assert db_session.query(SecurityEvent).filter_by(event_type='LOGIN_FAILED').count() == 1

    def test_missing_password(self, client):
        response = client.put('/api/auth', json={'email': random_email()})
        assert response.status_code == 400

    def test_over_long_password_is_validation_error(self, client, diner_user):
        long_password = 'x' * 100

        known = client.put('/api/auth', json={'email': diner_user['email'], 'password': long_password})
        unknown = client.put('/api/auth', json={'email': random_email(), 'password': long_password})

        assert known.status_code == unknown.status_code == 400
        assert known.get_json() == unknown.get_json()


class TestLogout:

    def test_logout_revokes_token(self, client, diner_user):
        token = get_auth_token(client, diner_user['email'], diner_user['password'])
        headers = auth_headers(token)

        response = client.delete('/api/auth', headers=headers)
        assert response.status_code == 200
        assert response.get_json() == {'message': 'logout successful'}

        for _ in range(2):
            assert client.get('/api/user/me', headers=headers).status_code == 401
        assert client.delete('/api/auth', headers=headers).status_code == 401

    def test_logout_leaves_other_sessions(self, client, diner_user):
        first = get_auth_token(client, diner_user['email'], diner_user['password'])
        second = get_auth_token(client, diner_user['email'], diner_user['password'])

        client.delete('/api/auth', headers=auth_headers(first))
        assert client.get('/api/user/me', headers=auth_headers(second)).status_code == 200

    def test_logout_requires_token(self, client):
        assert client.delete('/api/auth').status_code == 401


class TestGuard:

    @pytest.mark.parametrize(
        "method,path",
        [
            ("DELETE", "/api/auth"),
            ("GET", "/api/user/me"),
            ("GET", "/api/user"),
            ("GET", "/api/user/1"),
            ("PUT", "/api/user/1"),
            ("DELETE", "/api/user/1"),
            ("GET", "/api/franchise/1"),
            ("POST", "/api/franchise"),
            ("DELETE", "/api/franchise/1"),
            ("POST", "/api/franchise/1/store"),
            ("DELETE", "/api/franchise/1/store/1"),
            ("PUT", "/api/order/menu"),
            ("GET", "/api/order"),
            ("POST", "/api/order"),
        ],
    )
    def test_requires_auth(self, client, method, path):
        resp = client.open(path, method=method, json={})
        assert resp.status_code == 401, f"{method} {path} returned {resp.status_code}"
        assert resp.get_json() == {'message': 'unauthorized'}

    def test_every_rejection_has_the_same_shape(self, app, client, diner_user):
        forged = jwt.encode({'sub': str(diner_user['id']), 'iat': 0, 'exp': 4102444800}, 'wrong-secret', algorithm='HS256')
        unrecorded, _ = token_codec.issue_token(diner_user['id'])
        expired, _ = token_codec.issue_token(diner_user['id'], expires_in=timedelta(seconds=-5))

        bodies = []
        for headers in (
            {},
            {'Authorization': 'Basic abc'},
            {'Authorization': 'Bearer '},
            auth_headers('not-a-token'),
            auth_headers(forged),
            auth_headers(unrecorded),
            auth_headers(expired),
        ):
            response = client.get('/api/user/me', headers=headers)
            assert response.status_code == 401
            bodies.append(response.get_json())

        assert all(body == {'message': 'unauthorized'} for body in bodies)

    def test_rejections_are_audited_by_reason(self, client, db_session, diner_user):
        unrecorded, _ = token_codec.issue_token(diner_user['id'])

        client.get('/api/user/me')
        client.get('/api/user/me', headers=auth_headers('garbage'))
        client.get('/api/user/me', headers=auth_headers(unrecorded))

        event_types = {e.event_type for e in db_session.query(SecurityEvent).all()}
        assert {'AUTH_MISSING', 'AUTH_INVALID', 'AUTH_REVOKED'} <= event_types

    def test_token_of_deleted_user_rejected(self, client, diner_user):
        headers = auth_headers(get_auth_token(client, diner_user['email'], diner_user['password']))
        other = get_auth_token(client, diner_user['email'], diner_user['password'])

        assert client.delete(f"/api/user/{diner_user['id']}", headers=headers).status_code == 200
        assert client.get('/api/user/me', headers=auth_headers(other)).status_code == 401
