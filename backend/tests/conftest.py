"""
Pytest fixtures for pizza service tests.

Provides the application on an in-memory database, a per-test table wipe,
user/admin fixtures, authentication helpers and a stubbed pizza factory.
"""

import json
import re
import uuid

import httpx
import pytest

from pizza_service import create_app
from pizza_service.extensions import db
from pizza_service.roles import Admin
from pizza_service.services import auth_service
from pizza_service.services.factory_client import EXTENSION_KEY, FactoryClient

TOKEN_PATTERN = re.compile(r"^[A-Za-z0-9_-]+\.[A-Za-z0-9_-]+\.[A-Za-z0-9_-]+$")

FACTORY_URL = "http://factory.test"
FACTORY_API_KEY = "factory-test-key"


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
        'SQLALCHEMY_TRACK_MODIFICATIONS': False,
        'JWT_SECRET': 'test-jwt-secret',
        'BCRYPT_ROUNDS': 4,
        'FACTORY_URL': FACTORY_URL,
        'FACTORY_API_KEY': FACTORY_API_KEY,
    })

    with app.app_context():
        db.create_all()
        yield app
        db.drop_all()


@pytest.fixture(scope='function')
def db_session(app):
    """Create fresh database for each test."""
    with app.app_context():
        # Clear all data but keep schema
        meta = db.metadata
        for table in reversed(meta.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()

        yield db.session

        # Cleanup after test
        db.session.rollback()


@pytest.fixture(scope='function')
def client(app, db_session):
    """Create test client on a clean database."""
    return app.test_client()


def random_email(domain: str = "test.com") -> str:
    return f"{uuid.uuid4().hex[:10]}@{domain}"


@pytest.fixture(scope='function')
def make_user(db_session):
    """
    Factory fixture: create a user directly through the auth service.

    Returns a plain dict (id, name, email, password) so tests do not hold on
    to ORM instances across requests.
    """
    def _make_user(name: str = "pizza diner", email: str | None = None, password: str = "a", roles=None) -> dict:
        email = email or random_email()
        user = auth_service.create_user(name, email, password, roles=roles)
        return {"id": user.id, "name": user.name, "email": user.email, "password": password}

    return _make_user


@pytest.fixture(scope='function')
def admin_user(make_user):
    return make_user(name="pizza admin", email=random_email("admin.com"), password="toomanysecrets", roles=[Admin()])


@pytest.fixture(scope='function')
def diner_user(make_user):
    return make_user(name="pizza diner")


@pytest.fixture(scope='function')
def other_user(make_user):
    return make_user(name="other diner")


def get_auth_token(client, email: str, password: str) -> str:
    """Helper to get auth token for a user."""
    response = client.put('/api/auth', json={
        'email': email,
        'password': password
    })
    assert response.status_code == 200, response.get_json()
    return response.get_json()['token']


def auth_headers(token: str) -> dict:
    """Helper to create Authorization headers."""
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture(scope='function')
def admin_headers(client, admin_user):
    return auth_headers(get_auth_token(client, admin_user["email"], admin_user["password"]))


@pytest.fixture(scope='function')
def diner_headers(client, diner_user):
    return auth_headers(get_auth_token(client, diner_user["email"], diner_user["password"]))


@pytest.fixture(scope='function')
def other_headers(client, other_user):
    return auth_headers(get_auth_token(client, other_user["email"], other_user["password"]))


class FactoryStub:
    """
    Stand-in for the pizza factory behind an httpx.MockTransport.

    Set status/body to shape the reply, or error to raise a transport error.
    Every request received is kept in `requests`.
    """

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.status = 200
        self.body = {"jwt": "factory-jwt", "reportUrl": "http://factory.test/report/1"}
        self.error: Exception | None = None

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return httpx.Response(self.status, json=self.body)

    def last_payload(self) -> dict:
        return json.loads(self.requests[-1].content)


@pytest.fixture(scope='function')
def factory(app):
    """Route factory calls to a FactoryStub for the duration of a test."""
    stub = FactoryStub()
    original = app.extensions[EXTENSION_KEY]
    app.extensions[EXTENSION_KEY] = FactoryClient(
        FACTORY_URL,
        FACTORY_API_KEY,
        timeout=1.0,
        transport=httpx.MockTransport(stub.handler),
    )
    yield stub
    app.extensions[EXTENSION_KEY] = original
