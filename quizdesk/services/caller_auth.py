from __future__ import annotations

import secrets
from dataclasses import dataclass

from fastapi import Request

ROLE_ADMIN = "admin"
ROLE_STUDENT = "student"
KNOWN_ROLES = frozenset({ROLE_ADMIN, ROLE_STUDENT})

GATEWAY_TOKEN_HEADER = "X-Gateway-Token"
USER_ID_HEADER = "X-User-Id"
USER_ROLE_HEADER = "X-User-Role"


@dataclass(frozen=True, slots=True)
class Caller:
    user_id: int
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN


def is_valid_gateway_token(*, expected_token: str, received_token: str | None) -> bool:
    if not expected_token or not received_token:
        return False
    return secrets.compare_digest(expected_token, received_token)


def _parse_user_id(value: str | None) -> int | None:
    if value is None:
        return None
    candidate = value.strip()
    if not candidate.isdigit():
        return None
    user_id = int(candidate)
    if user_id <= 0:
        return None
    return user_id


def _parse_role(value: str | None) -> str:
    role = (value or ROLE_STUDENT).strip().lower()
    if role not in KNOWN_ROLES:
        return ROLE_STUDENT
    return role


def resolve_caller(request: Request, *, expected_token: str) -> Caller | None:
    if not is_valid_gateway_token(
        expected_token=expected_token,
        received_token=request.headers.get(GATEWAY_TOKEN_HEADER),
    ):
        return None

    user_id = _parse_user_id(request.headers.get(USER_ID_HEADER))
    if user_id is None:
        return None

    return Caller(user_id=user_id, role=_parse_role(request.headers.get(USER_ROLE_HEADER)))
