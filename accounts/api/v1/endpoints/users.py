"""User API: thin routes delegating to UserService."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from accounts.api.v1.dependencies import UserServiceDep
from accounts.application.dtos.user import UserCreate, UserListQuery, UserUpdate
from accounts.domain.enums import UserStatus
from accounts.middleware.auth import require_authentication
from accounts.schemas.envelope import Envelope, ErrorEnvelope
from accounts.schemas.user import (
    UserCreatedResponse,
    UserCreateRequest,
    UserListParams,
    UserListResponse,
    UserResponse,
    UserUpdateRequest,
)

router = APIRouter()
protected_router = APIRouter(
    dependencies=[Depends(require_authentication)],
    responses={401: {"model": ErrorEnvelope, "description": "Missing or invalid bearer credential"}},
)


@router.post("", response_model=Envelope[UserCreatedResponse], status_code=201)
async def create_user(body: UserCreateRequest, service: UserServiceDep):
    """Register a new user."""
    user = await service.create_user(
        UserCreate(
            username=body.username,
            password=body.password,
            email=str(body.email),
            phone=body.phone,
            nickname=body.nickname,
        )
    )
    return Envelope(
        message="user created",
        data=UserCreatedResponse(id=user.id, username=user.username, email=user.email),
    )


@protected_router.get("", response_model=Envelope[UserListResponse])
async def list_users(
    params: Annotated[UserListParams, Query()],
    service: UserServiceDep,
):
    """List users, newest first (paginated, optional keyword and status filter)."""
    page = await service.list_users(
        UserListQuery(
            page=params.page,
            page_size=params.page_size,
            keyword=params.keyword or None,
            status=UserStatus(params.status) if params.status is not None else None,
        )
    )
    return Envelope(
        data=UserListResponse(
            list=[UserResponse.model_validate(u) for u in page.items],
            total=page.total,
            page=params.page,
            page_size=params.page_size,
        )
    )


@protected_router.get("/{user_id}", response_model=Envelope[UserResponse])
async def get_user(user_id: int, service: UserServiceDep):
    """Get user by id."""
    user = await service.get_user(user_id)
    return Envelope(data=UserResponse.model_validate(user))


@protected_router.put("/{user_id}", response_model=Envelope[UserResponse])
async def update_user(user_id: int, body: UserUpdateRequest, service: UserServiceDep):
    """Update any of email, phone, nickname, avatar and status."""
    changes = body.model_dump(exclude_unset=True, exclude_none=True)
    if "email" in changes:
        changes["email"] = str(changes["email"])
    user = await service.update_user(user_id, UserUpdate(changes=changes))
    return Envelope(message="user updated", data=UserResponse.model_validate(user))


@protected_router.delete("/{user_id}", response_model=Envelope[None])
async def delete_user(user_id: int, service: UserServiceDep):
    """Soft-delete a user."""
    await service.delete_user(user_id)
    return Envelope(message="user deleted")
