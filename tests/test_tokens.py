import base64
import json
from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from clinic.core.config import Settings
from clinic.core.security import UserRole
from clinic.repositories.identity_repository import IdentityRepository
from clinic.services.access_gate import AccessGate
from clinic.services.token_service import TokenService

OTHER_KEY = "another-signing-key-that-is-long-enough-987654321"

class TestTokenService:

    def test_issue_and_identifier_of(self, tokens):
        """A fresh token yields its identifier back."""
        token = tokens.issue("doc@example.com", UserRole.DOCTOR)
        assert tokens.identifier_of(token) == "doc@example.com"

        payload = tokens.decode(token)
        assert payload.role is UserRole.DOCTOR
        assert payload.exp - payload.iat == 7 * 24 * 3600

    def test_expired_token(self, tokens):
        """A token issued 8 days ago is expired."""
        issued = datetime.now(timezone.utc) - timedelta(days=8)
        token = tokens.issue("doc@example.com", UserRole.DOCTOR, issued_at=issued)
        assert tokens.identifier_of(token) is None

    def test_token_within_validity_window(self, tokens):
        issued = datetime.now(timezone.utc) - timedelta(days=6)
        token = tokens.issue("doc@example.com", UserRole.DOCTOR, issued_at=issued)
        assert tokens.identifier_of(token) == "doc@example.com"

    def test_bad_signature(self, tokens):
        """A token signed with a different key is rejected."""
        forged = TokenService(OTHER_KEY).issue("doc@example.com", UserRole.DOCTOR)
        assert tokens.identifier_of(forged) is None

    @pytest.mark.parametrize("token", [None, "", "not-a-token", "a.b.c"])
    def test_malformed_tokens(self, tokens, token):
        assert tokens.identifier_of(token) is None

    def test_tampered_payload(self, tokens):
        token = tokens.issue("alice@example.com", UserRole.PATIENT)
        header, payload, signature = token.split(".")
        claims = json.loads(base64.urlsafe_b64decode(payload + "=" * (-len(payload) % 4)))
        claims["role"] = UserRole.ADMIN.value
        forged_payload = base64.urlsafe_b64encode(json.dumps(claims).encode()).rstrip(b"=").decode()
        tampered = ".".join([header, forged_payload, signature])
        assert tokens.identifier_of(tampered) is None

    def test_requires_signing_key(self):
        with pytest.raises(ValueError):
            TokenService("")

class TestRoleBinding:

    def test_valid_for_issued_role_only(self, db_session, tokens, make_doctor):
        make_doctor(email="doc@example.com")
        identities = IdentityRepository(db_session)
        token = tokens.issue("doc@example.com", UserRole.DOCTOR)

        assert tokens.is_valid_for(token, UserRole.DOCTOR, identities)
        assert not tokens.is_valid_for(token, UserRole.PATIENT, identities)
        assert not tokens.is_valid_for(token, UserRole.ADMIN, identities)

    def test_shared_identifier_does_not_cross_roles(
        self, db_session, tokens, make_doctor, make_patient
    ):
        """A doctor token never passes as a patient, even when the emails collide."""
        make_doctor(email="shared@example.com")
        make_patient(email="shared@example.com")
        gate = AccessGate(db_session, tokens)

        doctor_token = tokens.issue("shared@example.com", UserRole.DOCTOR)
        assert gate.authorize(doctor_token, UserRole.DOCTOR).allowed
        assert not gate.authorize(doctor_token, UserRole.PATIENT).allowed

    def test_unknown_identity_denied(self, db_session, tokens):
        gate = AccessGate(db_session, tokens)
        token = tokens.issue("ghost@example.com", UserRole.PATIENT)
        assert not gate.authorize(token, UserRole.PATIENT).allowed

    def test_admin_resolved_by_username(self, db_session, tokens, make_admin):
        admin = make_admin("root")
        gate = AccessGate(db_session, tokens)

        decision = gate.authorize(tokens.issue("root", UserRole.ADMIN), UserRole.ADMIN)
        assert decision.allowed
        assert decision.identity.id == admin.id

    def test_expired_token_denied(self, db_session, tokens, make_doctor):
        make_doctor(email="doc@example.com")
        gate = AccessGate(db_session, tokens)
        issued = datetime.now(timezone.utc) - timedelta(days=8)
        token = tokens.issue("doc@example.com", UserRole.DOCTOR, issued_at=issued)

        decision = gate.authorize(token, UserRole.DOCTOR)
        assert not decision.allowed
        assert decision.identity is None
        assert decision.role is None

    def test_denials_are_indistinguishable(self, db_session, tokens, make_doctor):
        make_doctor(email="doc@example.com")
        gate = AccessGate(db_session, tokens)
        forged = TokenService(OTHER_KEY).issue("doc@example.com", UserRole.DOCTOR)
        wrong_role = tokens.issue("doc@example.com", UserRole.DOCTOR)

        assert gate.authorize(forged, UserRole.DOCTOR) == gate.authorize(wrong_role, UserRole.PATIENT)

class TestSettings:

    def test_short_secret_key_rejected(self):
        with pytest.raises(ValidationError):
            Settings(SECRET_KEY="too-short")

    def test_missing_secret_key_rejected(self, monkeypatch):
        monkeypatch.delenv("SECRET_KEY", raising=False)
        with pytest.raises(ValidationError):
            Settings(_env_file=None)
