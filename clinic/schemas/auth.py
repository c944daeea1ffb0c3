from pydantic import BaseModel, EmailStr, Field

from ..core.security import UserRole

class AdminLogin(BaseModel):
    username: str = Field(..., min_length=1, max_length=100)
    password: str = Field(..., min_length=1)

class UserLogin(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)

class TokenResponse(BaseModel):
    token: str
    token_type: str = "bearer"
    role: UserRole
    expires_in: int
    message: str = "Login successful"
