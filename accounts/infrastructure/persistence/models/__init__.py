"""ORM models."""

from accounts.infrastructure.persistence.models.user import User

__all__ = ["User"]
