from sqlalchemy.orm import Session
from typing import Optional
import logging

from ..core.errors import ClinicError, ReasonCode
from ..core.security import PasswordVerifier, UserRole, verify_password
from ..repositories.identity_repository import Identity, IdentityRepository
from ..schemas.auth import AdminLogin, TokenResponse, UserLogin
from .token_service import TokenService, get_token_service

logger = logging.getLogger(__name__)

class AuthService:
    def __init__(
        self,
        db: Session,
        tokens: Optional[TokenService] = None,
        verifier: PasswordVerifier = verify_password,
    ):
        self.db = db
        self.tokens = tokens or get_token_service()
        self.verifier = verifier
        self.identities = IdentityRepository(db)

    def login_admin(self, login_data: AdminLogin) -> TokenResponse:
        """Authenticate an admin by username and return a token."""
        admin = self.identities.find_admin_by_username(login_data.username)
        return self._issue(admin, login_data.password, UserRole.ADMIN, login_data.username)

    def login_doctor(self, login_data: UserLogin) -> TokenResponse:
        """Authenticate a doctor by email and return a token."""
        doctor = self.identities.find_doctor_by_email(login_data.email)
        return self._issue(doctor, login_data.password, UserRole.DOCTOR, login_data.email)

    def login_patient(self, login_data: UserLogin) -> TokenResponse:
        """Authenticate a patient by email and return a token."""
        patient = self.identities.find_patient_by_email(login_data.email)
        return self._issue(patient, login_data.password, UserRole.PATIENT, login_data.email)

    def _issue(
        self,
        account: Optional[Identity],
        password: str,
        role: UserRole,
        identifier: str,
    ) -> TokenResponse:
        # Same rejection for unknown accounts and wrong passwords
        if account is None or not self.verifier(password, account.password_hash):
            logger.info(f"Failed {role.value} login for '{identifier}'")
            raise ClinicError(ReasonCode.UNAUTHORIZED)

        token = self.tokens.issue(identifier, role)
        logger.info(f"{role.value.capitalize()} '{identifier}' logged in")
        return TokenResponse(
            token=token,
            role=role,
            expires_in=int(self.tokens.lifetime.total_seconds()),
        )
