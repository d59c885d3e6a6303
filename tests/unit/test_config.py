"""Tests for Settings validation."""

import pytest
from pydantic import ValidationError

from accounts.core.config import Settings, get_settings


def test_defaults(settings: Settings) -> None:
    assert settings.algorithm == "HS256"
    assert settings.access_token_expire_seconds == 86400
    assert settings.token_refresh_window_seconds == 1800
    assert settings.failure_threshold == 10
    assert settings.cache_ttl_user == 300
    assert settings.trace_id_header == "X-Trace-ID"


def test_missing_secret_is_rejected(make_settings) -> None:
    with pytest.raises(ValidationError):
        make_settings(secret_key="")


def test_non_hmac_algorithm_is_rejected(make_settings) -> None:
    with pytest.raises(ValidationError):
        make_settings(algorithm="RS256")


def test_sql_backend_requires_url(make_settings) -> None:
    with pytest.raises(ValidationError):
        make_settings(database_backend="sql", database_url="")


def test_unknown_backend_is_rejected(make_settings) -> None:
    with pytest.raises(ValidationError):
        make_settings(database_backend="firestore")


def test_get_settings_reads_environment(monkeypatch) -> None:
    monkeypatch.setenv("FAILURE_THRESHOLD", "3")
    get_settings.cache_clear()
    assert get_settings().failure_threshold == 3
