from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Optional
import logging

from jose import JWTError, jwt
from pydantic import ValidationError

from ..core.config import settings
from ..core.security import TokenPayload, UserRole
from ..repositories.identity_repository import Identity, IdentityRepository

logger = logging.getLogger(__name__)

class TokenService:
    """
    Issues and verifies signed, role-bound session tokens.

    A token carries ``sub`` (admin username, or doctor/patient email), the
    ``role`` it was issued for, and its ``iat``/``exp`` window. Both the
    identifier and the role are covered by the signature, so a token
    authorizes exactly one role.
    """

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        lifetime: timedelta = timedelta(days=7),
    ):
        if not secret_key:
            raise ValueError("A signing key is required")
        self._secret_key = secret_key
        self.algorithm = algorithm
        self.lifetime = lifetime

    def issue(
        self,
        identifier: str,
        role: UserRole,
        issued_at: Optional[datetime] = None,
    ) -> str:
        """Create a token valid from ``issued_at`` (default: now) for ``lifetime``."""
        issued_at = issued_at or datetime.now(timezone.utc)
        claims = {
            "sub": identifier,
            "role": role.value,
            "iat": int(issued_at.timestamp()),
            "exp": int((issued_at + self.lifetime).timestamp()),
        }
        return jwt.encode(claims, self._secret_key, algorithm=self.algorithm)

    def decode(self, token: Optional[str]) -> Optional[TokenPayload]:
        """Verify signature and expiry. Any failure yields None."""
        if not token:
            return None
        try:
            claims = jwt.decode(token, self._secret_key, algorithms=[self.algorithm])
            return TokenPayload(**claims)
        except (JWTError, ValidationError) as exc:
            logger.debug(f"Token rejected: {exc}")
            return None

    def identifier_of(self, token: Optional[str]) -> Optional[str]:
        payload = self.decode(token)
        return payload.sub if payload else None

    def resolve(
        self,
        token: Optional[str],
        role: UserRole,
        identities: IdentityRepository,
    ) -> Optional[Identity]:
        """Account the token speaks for, provided it was issued for ``role``."""
        payload = self.decode(token)
        if payload is None:
            return None
        if payload.role is not role:
            logger.debug(f"Token role {payload.role.value} does not match {role.value}")
            return None
        return identities.find_by_identifier(role, payload.sub)

    def is_valid_for(
        self,
        token: Optional[str],
        role: UserRole,
        identities: IdentityRepository,
    ) -> bool:
        return self.resolve(token, role, identities) is not None

@lru_cache()
def get_token_service() -> TokenService:
    """Process-wide token service built once from settings."""
    return TokenService(
        secret_key=settings.SECRET_KEY,
        algorithm=settings.ALGORITHM,
        lifetime=timedelta(days=settings.TOKEN_EXPIRE_DAYS),
    )
