from __future__ import annotations

from types import SimpleNamespace

from quizdesk.services.caller_auth import (
    ROLE_ADMIN,
    ROLE_STUDENT,
    Caller,
    is_valid_gateway_token,
    resolve_caller,
)


def _request(**headers: str) -> SimpleNamespace:
    return SimpleNamespace(headers=headers)


def test_is_valid_gateway_token_requires_exact_match() -> None:
    assert is_valid_gateway_token(expected_token="secret", received_token="secret") is True
    assert is_valid_gateway_token(expected_token="secret", received_token="wrong") is False
    assert is_valid_gateway_token(expected_token="secret", received_token=None) is False


def test_is_valid_gateway_token_rejects_when_not_configured() -> None:
    assert is_valid_gateway_token(expected_token="", received_token="") is False
    assert is_valid_gateway_token(expected_token="", received_token="anything") is False


def test_resolve_caller_reads_identity_headers() -> None:
    request = _request(**{"X-Gateway-Token": "secret", "X-User-Id": " 42 ", "X-User-Role": "Admin"})

    caller = resolve_caller(request, expected_token="secret")

    assert caller == Caller(user_id=42, role=ROLE_ADMIN)
    assert caller.is_admin is True


def test_resolve_caller_defaults_unknown_role_to_student() -> None:
    for role in (None, "moderator", ""):
        headers = {"X-Gateway-Token": "secret", "X-User-Id": "5"}
        if role is not None:
            headers["X-User-Role"] = role
        caller = resolve_caller(_request(**headers), expected_token="secret")
        assert caller == Caller(user_id=5, role=ROLE_STUDENT)
        assert caller.is_admin is False


def test_resolve_caller_rejects_bad_token_or_user_id() -> None:
    assert resolve_caller(_request(**{"X-User-Id": "5"}), expected_token="secret") is None
    assert (
        resolve_caller(
            _request(**{"X-Gateway-Token": "nope", "X-User-Id": "5"}),
            expected_token="secret",
        )
        is None
    )
    for user_id in ("0", "-3", "abc", "1.5", ""):
        request = _request(**{"X-Gateway-Token": "secret", "X-User-Id": user_id})
        assert resolve_caller(request, expected_token="secret") is None
