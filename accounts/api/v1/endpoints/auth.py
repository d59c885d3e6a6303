"""Auth API: login, current user and token refresh."""

from fastapi import APIRouter, Depends, Request

from accounts.api.v1.dependencies import CurrentIdentity, UserServiceDep
from accounts.middleware.auth import require_authentication
from accounts.schemas.auth import LoginRequest, LoginResponse, TokenResponse
from accounts.schemas.envelope import Envelope, ErrorEnvelope
from accounts.schemas.user import UserResponse

router = APIRouter()
protected_router = APIRouter(
    dependencies=[Depends(require_authentication)],
    responses={401: {"model": ErrorEnvelope, "description": "Missing or invalid bearer credential"}},
)


@router.post("/login", response_model=Envelope[LoginResponse])
async def login(body: LoginRequest, service: UserServiceDep):
    """Exchange username and password for a bearer token."""
    result = await service.login(body.username, body.password)
    return Envelope(
        message="login succeeded",
        data=LoginResponse(
            token=result.token,
            expires_in=result.expires_in,
            user=UserResponse.model_validate(result.user),
        ),
    )


@protected_router.get("/me", response_model=Envelope[UserResponse])
async def me(identity: CurrentIdentity, service: UserServiceDep):
    """Return the authenticated user."""
    user = await service.get_user(identity.user_id)
    return Envelope(data=UserResponse.model_validate(user))


@protected_router.post("/token/refresh", response_model=Envelope[TokenResponse])
async def refresh_token(request: Request, service: UserServiceDep):
    """Issue a new token when the presented one expires within the refresh window."""
    issued = await service.refresh_token(request.state.token)
    return Envelope(
        message="token refreshed",
        data=TokenResponse(token=issued.token, expires_in=issued.expires_in),
    )
