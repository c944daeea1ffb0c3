from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...core.database import get_db
from ...api.deps import rate_limit_check
from ...services.auth_service import AuthService
from ...services.token_service import TokenService, get_token_service
from ...schemas.auth import AdminLogin, UserLogin, TokenResponse

router = APIRouter(prefix="/auth", tags=["Authentication"])

@router.post("/admin/login", response_model=TokenResponse)
async def admin_login(
    login_data: AdminLogin,
    db: Session = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
    _: None = Depends(rate_limit_check)
):
    """Authenticate an admin and return an access token."""
    return AuthService(db, tokens).login_admin(login_data)

@router.post("/doctor/login", response_model=TokenResponse)
async def doctor_login(
    login_data: UserLogin,
    db: Session = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
    _: None = Depends(rate_limit_check)
):
    """Authenticate a doctor and return an access token."""
    return AuthService(db, tokens).login_doctor(login_data)

@router.post("/patient/login", response_model=TokenResponse)
async def patient_login(
    login_data: UserLogin,
    db: Session = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
    _: None = Depends(rate_limit_check)
):
    """Authenticate a patient and return an access token."""
    return AuthService(db, tokens).login_patient(login_data)
