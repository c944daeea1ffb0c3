from dataclasses import dataclass
from sqlalchemy.orm import Session
from typing import Optional
import logging

from ..core.security import UserRole
from ..repositories.identity_repository import Identity, IdentityRepository
from .token_service import TokenService, get_token_service

logger = logging.getLogger(__name__)

@dataclass(frozen=True)
class AccessDecision:
    allowed: bool
    role: Optional[UserRole] = None
    identity: Optional[Identity] = None

DENIED = AccessDecision(allowed=False)

class AccessGate:
    """
    Maps (token, required role) to allow/deny.

    Every role-scoped entry point goes through ``authorize``. A denial is the
    same value whatever the cause, so callers cannot tell a bad signature
    from a wrong role or an unknown account.
    """

    def __init__(self, db: Session, tokens: Optional[TokenService] = None):
        self.tokens = tokens or get_token_service()
        self.identities = IdentityRepository(db)

    def authorize(self, token: Optional[str], required_role: UserRole) -> AccessDecision:
        identity = self.tokens.resolve(token, required_role, self.identities)
        if identity is None:
            logger.info(f"Access denied for role {required_role.value}")
            return DENIED
        return AccessDecision(allowed=True, role=required_role, identity=identity)
