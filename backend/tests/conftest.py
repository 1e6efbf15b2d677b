"""
Pytest fixtures for navguard backend tests.

Provides the in-memory application, per-test table cleanup, seeded roles
and users, and authentication helpers.
"""

import pytest

from navguard import create_app
from navguard.config import TestConfig
from navguard.extensions import db
from navguard.services import auth_service, permission_service, role_service

PASSWORD = "Password123!"


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    app = create_app(TestConfig)

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


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
def setup_roles(db_session):
    """Catalog permissions, default roles and their default grants."""
    permission_service.initialize_permissions()
    role_service.create_default_roles()
    role_service.assign_default_role_permissions()
    db_session.commit()


def _create_user(name: str, email: str, role_name: str | None):
    return auth_service.create_user(name, email, PASSWORD, role_name=role_name)


@pytest.fixture(scope='function')
def admin_user(setup_roles):
    return _create_user("Ada Admin", "admin@hms.test", "admin")


@pytest.fixture(scope='function')
def doctor_user(setup_roles):
    return _create_user("Dana Doctor", "doctor@hms.test", "doctor")


@pytest.fixture(scope='function')
def receptionist_user(setup_roles):
    return _create_user("Rey Reception", "desk@hms.test", "receptionist")


@pytest.fixture(scope='function')
def patient_user(setup_roles):
    return _create_user("Pat Patient", "patient@hms.test", "patient")


def get_auth_token(client, email: str, password: str = PASSWORD) -> str:
    """Helper to get auth token for a user."""
    response = client.post('/api/auth/login', json={
        'email': email,
        'password': password
    })
    if response.status_code == 200:
        return response.json.get('token')
    return None


def auth_headers(token: str) -> dict:
    """Helper to create Authorization headers."""
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture(scope='function')
def admin_headers(client, admin_user):
    return auth_headers(get_auth_token(client, admin_user.email))


@pytest.fixture(scope='function')
def doctor_headers(client, doctor_user):
    return auth_headers(get_auth_token(client, doctor_user.email))


@pytest.fixture(scope='function')
def receptionist_headers(client, receptionist_user):
    return auth_headers(get_auth_token(client, receptionist_user.email))
