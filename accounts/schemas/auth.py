"""Auth API schemas."""

from pydantic import BaseModel, Field

from accounts.schemas.user import UserResponse


class LoginRequest(BaseModel):
    """Request body for login."""

    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class TokenResponse(BaseModel):
    """Issued bearer credential."""

    token: str
    token_type: str = "Bearer"
    expires_in: int


class LoginResponse(TokenResponse):
    """Login payload: token plus the authenticated user."""

    user: UserResponse
