from __future__ import annotations

from types import SimpleNamespace

GATEWAY_TOKEN = "gateway-secret"


class _FakeTransaction:
    async def __aenter__(self) -> object:
        return object()

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        return False


class FakeSessionFactory:
    def begin(self) -> _FakeTransaction:
        return _FakeTransaction()


def settings(**overrides: object) -> SimpleNamespace:
    base: dict[str, object] = {
        "gateway_token": GATEWAY_TOKEN,
        "quiz_redact_correct_answers": False,
        "legacy_answer_route_admin_only": False,
    }
    base.update(overrides)
    return SimpleNamespace(**base)


def identity_headers(user_id: int = 7, role: str = "student") -> dict[str, str]:
    return {
        "X-Gateway-Token": GATEWAY_TOKEN,
        "X-User-Id": str(user_id),
        "X-User-Role": role,
    }
