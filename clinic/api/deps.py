from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from typing import Optional
import logging
import redis

from ..core.config import settings
from ..core.database import get_db, get_redis
from ..core.errors import AuthenticationError, ClinicError, ReasonCode
from ..core.security import security, UserRole
from ..repositories.identity_repository import Identity
from ..services.access_gate import AccessGate
from ..services.token_service import TokenService, get_token_service

logger = logging.getLogger(__name__)

async def get_bearer_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> Optional[str]:
    """Raw token from the Authorization header, if any."""
    return credentials.credentials if credentials else None

def get_access_gate(
    db: Session = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
) -> AccessGate:
    return AccessGate(db, tokens)

# Role-based access control dependencies
def require_role(role: UserRole):
    """Create a dependency that admits only tokens issued for ``role``."""
    async def role_checker(
        token: Optional[str] = Depends(get_bearer_token),
        gate: AccessGate = Depends(get_access_gate),
    ) -> Identity:
        decision = gate.authorize(token, role)
        if not decision.allowed:
            raise AuthenticationError()
        return decision.identity

    return role_checker

get_admin_user = require_role(UserRole.ADMIN)
get_doctor_user = require_role(UserRole.DOCTOR)
get_patient_user = require_role(UserRole.PATIENT)

# Rate limiting dependency
async def rate_limit_check(
    request: Request,
    redis_client = Depends(get_redis)
) -> None:
    """Basic rate limiting for login and signup endpoints."""
    client_ip = request.client.host if request.client else "unknown"
    key = f"rate_limit:{request.url.path}:{client_ip}"

    try:
        current_requests = redis_client.get(key)
        if current_requests is None:
            redis_client.setex(key, settings.LOGIN_RATE_WINDOW_SECONDS, 1)
            return
        if int(current_requests) >= settings.LOGIN_RATE_LIMIT:
            raise ClinicError(
                ReasonCode.RATE_LIMITED,
                "Too many requests. Please try again later."
            )
        redis_client.incr(key)
    except redis.RedisError as exc:
        # Limiter unavailable; let the request through
        logger.warning(f"Rate limiter unavailable: {exc}")
