"""User repositories: in-memory and SQL implementations of IUserRepository."""

from accounts.infrastructure.persistence.repositories.memory_repo import (
    InMemoryUserRepository,
)
from accounts.infrastructure.persistence.repositories.user_repo import (
    SqlUserRepository,
)

__all__ = ["InMemoryUserRepository", "SqlUserRepository"]
