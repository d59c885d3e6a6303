"""Shared utilities."""

from accounts.shared.utils.datetime import (
    ensure_utc,
    from_timestamp_utc,
    to_epoch_seconds,
    utc_now,
)

__all__ = ["ensure_utc", "from_timestamp_utc", "to_epoch_seconds", "utc_now"]
