"""Core: config, constants, failure governor and application bootstrap.

Single place for settings and shared constants.
"""

from accounts.core.config import Settings, get_settings

__all__ = ["Settings", "get_settings"]
