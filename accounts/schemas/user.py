"""User API schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from accounts.core.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE


class UserCreateRequest(BaseModel):
    """Request body for creating a user."""

    username: str = Field(..., min_length=3, max_length=50)
    password: str = Field(..., min_length=6, max_length=128)
    email: EmailStr
    phone: str | None = Field(default=None, min_length=11, max_length=11)
    nickname: str | None = Field(default=None, max_length=50)


class UserUpdateRequest(BaseModel):
    """Request body for updating a user (partial; omitted fields are left unchanged)."""

    email: EmailStr | None = None
    phone: str | None = Field(default=None, min_length=11, max_length=11)
    nickname: str | None = Field(default=None, max_length=50)
    avatar: str | None = Field(default=None, max_length=255)
    status: int | None = Field(default=None, ge=0, le=1)


class UserListParams(BaseModel):
    """Query parameters for GET /users."""

    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE)
    keyword: str | None = Field(default=None, max_length=50)
    status: int | None = Field(default=None, ge=0, le=1)


class UserCreatedResponse(BaseModel):
    """Payload returned by POST /users."""

    id: int
    username: str
    email: str


class UserResponse(BaseModel):
    """User response (no password)."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    email: str
    phone: str | None = None
    nickname: str | None = None
    avatar: str | None = None
    status: int
    created_at: datetime
    updated_at: datetime


class UserListResponse(BaseModel):
    """One page of users."""

    list: list[UserResponse]
    total: int
    page: int
    page_size: int
