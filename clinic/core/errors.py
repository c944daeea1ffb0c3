from enum import Enum
from typing import Optional

from fastapi import status


class ReasonCode(str, Enum):
    """Stable rejection codes clients can branch on."""
    UNAUTHORIZED = "unauthorized"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    MALFORMED = "malformed"
    FORBIDDEN = "forbidden"
    RATE_LIMITED = "rate_limited"
    INTERNAL = "internal"


STATUS_BY_REASON = {
    ReasonCode.UNAUTHORIZED: status.HTTP_401_UNAUTHORIZED,
    ReasonCode.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ReasonCode.CONFLICT: status.HTTP_409_CONFLICT,
    ReasonCode.MALFORMED: status.HTTP_400_BAD_REQUEST,
    ReasonCode.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ReasonCode.RATE_LIMITED: status.HTTP_429_TOO_MANY_REQUESTS,
    ReasonCode.INTERNAL: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

UNAUTHORIZED_MESSAGE = "Unauthorized"


class ClinicError(Exception):
    """Raised by services and API dependencies; rendered by the app's handler."""

    def __init__(self, reason: ReasonCode, message: Optional[str] = None):
        if reason is ReasonCode.UNAUTHORIZED:
            # never say why
            message = UNAUTHORIZED_MESSAGE
        self.reason = reason
        self.message = message or reason.value.replace("_", " ").capitalize()
        super().__init__(self.message)

    @property
    def status_code(self) -> int:
        return STATUS_BY_REASON[self.reason]


class AuthenticationError(ClinicError):
    def __init__(self):
        super().__init__(ReasonCode.UNAUTHORIZED)


class SlotConflictError(Exception):
    """The database rejected a second appointment for the same doctor and timestamp."""
