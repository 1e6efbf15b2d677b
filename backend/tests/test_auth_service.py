"""
Credential and session service tests.
"""

from datetime import timedelta

import pytest

from navguard.errors import ConflictError, NotFoundError, ValidationError
from navguard.models import SessionToken
from navguard.services import auth_service, session_service
from navguard.time_utils import utcnow

from conftest import PASSWORD


class TestPasswords:
    def test_hash_and_verify(self, app):
        hashed = auth_service.hash_password("s3cret!")
        assert hashed != "s3cret!"
        assert auth_service.verify_password("s3cret!", hashed)
        assert not auth_service.verify_password("S3cret!", hashed)

    def test_malformed_hash_never_matches(self):
        assert auth_service.verify_password("anything", "not-a-bcrypt-hash") is False

    def test_empty_password_rejected(self, app):
        with pytest.raises(ValidationError):
            auth_service.hash_password("")


class TestUsers:
    def test_create_user_normalizes_email(self, setup_roles):
        user = auth_service.create_user("Rey", "  Rey@HMS.test ", PASSWORD, role_name="Receptionist")
        assert user.email == "rey@hms.test"
        assert user.role.name == "receptionist"

    def test_user_payload_fields(self, admin_user):
        assert set(admin_user.to_dict()) == {
            "id", "name", "email", "role_id", "is_active", "created_at", "last_login_at", "role",
        }

    def test_duplicate_email(self, setup_roles):
        auth_service.create_user("Rey", "rey@hms.test", PASSWORD)
        with pytest.raises(ConflictError):
            auth_service.create_user("Rey Again", "REY@hms.test", PASSWORD)

    def test_unknown_role(self, setup_roles):
        with pytest.raises(NotFoundError):
            auth_service.create_user("Rey", "rey@hms.test", PASSWORD, role_name="janitor")

    def test_authenticate_records_login(self, admin_user):
        user = auth_service.authenticate("admin@hms.test", PASSWORD)
        assert user.id == admin_user.id
        assert user.last_login_at is not None

    def test_inactive_user_cannot_authenticate(self, admin_user, db_session):
        admin_user.is_active = False
        db_session.commit()
        assert auth_service.authenticate("admin@hms.test", PASSWORD) is None


class TestSessions:
    def test_token_is_stored_hashed(self, admin_user, db_session):
        session, token = session_service.create_session(admin_user.id)
        assert session.token_hash == session_service.hash_token(token)
        assert db_session.query(SessionToken).filter_by(token_hash=token).count() == 0

    def test_validate_and_revoke(self, admin_user):
        _, token = session_service.create_session(admin_user.id)

        assert session_service.validate_session(token).id == admin_user.id
        assert session_service.revoke_session(token) is True
        assert session_service.validate_session(token) is None
        assert session_service.revoke_session(token) is False

    def test_expired_session(self, admin_user, db_session):
        session, token = session_service.create_session(admin_user.id)
        session.expires_at = utcnow() - timedelta(minutes=1)
        db_session.commit()

        assert session_service.validate_session(token) is None

    def test_idle_session_is_revoked(self, admin_user, db_session):
        session, token = session_service.create_session(admin_user.id)
        session.last_used_at = utcnow() - timedelta(hours=3)
        db_session.commit()

        assert session_service.validate_session(token) is None
        db_session.refresh(session)
        assert session.is_revoked
        assert session.revoked_reason == "Idle timeout"
