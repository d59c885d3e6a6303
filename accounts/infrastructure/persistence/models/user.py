"""User ORM model."""

from sqlalchemy import Integer, SmallInteger, String
from sqlalchemy.orm import Mapped, mapped_column

from accounts.domain.enums import UserStatus
from accounts.infrastructure.persistence.database import Base
from accounts.infrastructure.persistence.models.mixins import (
    SoftDeleteMixin,
    TimestampMixin,
)


class User(TimestampMixin, SoftDeleteMixin, Base):
    """User model. Table: users. Username and email are unique across all rows, deleted included."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    phone: Mapped[str | None] = mapped_column(String(20), nullable=True)
    nickname: Mapped[str | None] = mapped_column(String(50), nullable=True)
    avatar: Mapped[str | None] = mapped_column(String(255), nullable=True)
    status: Mapped[int] = mapped_column(
        SmallInteger, nullable=False, default=int(UserStatus.ACTIVE)
    )
