from fastapi.testclient import TestClient

from quizdesk.api.routes import health as health_routes
from quizdesk.main import app


async def _ok_check() -> dict[str, str]:
    return {"status": "ok"}


async def _failed_check() -> dict[str, str]:
    return {"status": "failed", "error": "database_unavailable"}


def test_health_ok(monkeypatch) -> None:
    monkeypatch.setattr(health_routes, "_check_database", _ok_check)

    client = TestClient(app)
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {
        "status": "ok",
        "checks": {"database": {"status": "ok"}},
    }


def test_live_ok() -> None:
    client = TestClient(app)
    response = client.get("/live")
    assert response.status_code == 200
    assert response.json() == {"status": "live"}


def test_health_returns_503_when_database_failed(monkeypatch) -> None:
    monkeypatch.setattr(health_routes, "_check_database", _failed_check)

    client = TestClient(app)
    response = client.get("/health")

    assert response.status_code == 503
    payload = response.json()
    assert payload["status"] == "degraded"
    assert payload["checks"]["database"] == {"status": "failed", "error": "database_unavailable"}


def test_ready_ok(monkeypatch) -> None:
    monkeypatch.setattr(health_routes, "_check_database", _ok_check)

    client = TestClient(app)
    response = client.get("/ready")
    assert response.status_code == 200
    assert response.json()["status"] == "ready"


def test_ready_returns_503_when_database_failed(monkeypatch) -> None:
    monkeypatch.setattr(health_routes, "_check_database", _failed_check)

    client = TestClient(app)
    response = client.get("/ready")
    assert response.status_code == 503
    assert response.json()["status"] == "not_ready"


def test_database_check_reports_unavailable_database(monkeypatch) -> None:
    class _BrokenSessionFactory:
        def __call__(self):
            raise ConnectionError("connection refused")

    monkeypatch.setattr(health_routes, "SessionLocal", _BrokenSessionFactory())

    client = TestClient(app)
    response = client.get("/health")
    assert response.status_code == 503
    assert response.json()["checks"]["database"]["error"] == "database_unavailable"
