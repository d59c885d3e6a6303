"""Domain enums."""

from enum import IntEnum


class UserStatus(IntEnum):
    """Account status stored on the user record."""

    DISABLED = 0
    ACTIVE = 1
