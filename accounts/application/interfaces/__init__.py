"""Application ports."""

from accounts.application.interfaces.repositories import IUserRepository

__all__ = ["IUserRepository"]
