"""Unit tests for parsing the Authorization header."""

import pytest

from accounts.domain.exceptions import (
    MalformedCredentialException,
    MissingCredentialException,
)
from accounts.middleware.auth import extract_bearer_token


def test_returns_token_after_bearer_scheme() -> None:
    assert extract_bearer_token("Bearer a.b.c") == "a.b.c"


@pytest.mark.parametrize("value", [None, "", "   "])
def test_absent_header_is_missing_credential(value) -> None:
    with pytest.raises(MissingCredentialException):
        extract_bearer_token(value)


@pytest.mark.parametrize(
    "value",
    [
        "bearer a.b.c",
        "BEARER a.b.c",
        "Bearer   a.b.c",
        "Bearer a.b.c ",
        "Bearer",
        "Bearer ",
        "Token a.b.c",
        "Bearer a.b.c extra",
    ],
)
def test_other_shapes_are_malformed(value: str) -> None:
    with pytest.raises(MalformedCredentialException):
        extract_bearer_token(value)
