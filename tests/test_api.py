"""Tests for the HTTP API."""

from fastapi.testclient import TestClient

from exercise_tracker.api.app import create_app
from exercise_tracker.containers import AppContainer
from exercise_tracker.domain.errors import StorageError
from tests.conftest import FIXED_TODAY


def _client(container: AppContainer) -> TestClient:
    return TestClient(create_app(container), raise_server_exceptions=False)


def _create_user(client: TestClient, username: str = "testuser") -> int:
    response = client.post("/api/users", json={"username": username})
    assert response.status_code == 200
    return response.json()["id"]


def test_health(container) -> None:
    response = _client(container).get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_health_reports_unreachable_storage(container) -> None:
    container.health_check = lambda: False

    response = _client(container).get("/health")

    assert response.status_code == 503
    assert response.json() == {"status": "unavailable"}


def test_health_checks_sql_storage(sql_container) -> None:
    response = _client(sql_container).get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_logs_for_user_id_beyond_integer_range(sql_container) -> None:
    response = _client(sql_container).get("/api/users/99999999999999999999/logs")

    assert response.status_code == 404
    assert response.json() == {"error": "User not found"}


def test_create_exercise_for_user_id_beyond_integer_range(sql_container) -> None:
    response = _client(sql_container).post(
        "/api/users/99999999999999999999/exercises",
        json={"description": "Run", "duration": 30},
    )

    assert response.status_code == 404


def test_logs_with_limit_beyond_integer_range(sql_container) -> None:
    client = _client(sql_container)
    user_id = _create_user(client)
    for day in ("2024-01-01", "2024-01-02"):
        client.post(
            f"/api/users/{user_id}/exercises",
            json={"description": "Run", "duration": 30, "date": day},
        )

    response = client.get(
        f"/api/users/{user_id}/logs", params={"limit": "99999999999999999999"}
    )

    assert response.status_code == 200
    body = response.json()
    assert body["count"] == 2
    assert [entry["date"] for entry in body["logs"]] == ["2024-01-01", "2024-01-02"]


def test_create_exercise_with_duration_beyond_integer_range(sql_container) -> None:
    client = _client(sql_container)
    user_id = _create_user(client)

    response = client.post(
        f"/api/users/{user_id}/exercises",
        json={"description": "Run", "duration": "99999999999999999999"},
    )

    assert response.status_code == 400
    assert response.json() == {
        "error": "Duration is required and must be a positive integer"
    }


def test_index_serves_html(container) -> None:
    response = _client(container).get("/")

    assert response.status_code == 200
    assert "Exercise Tracker" in response.text


def test_create_user(container) -> None:
    response = _client(container).post("/api/users", json={"username": "testuser"})

    assert response.status_code == 200
    assert response.json() == {"id": 1, "username": "testuser"}


def test_create_user_accepts_form_body(container) -> None:
    response = _client(container).post("/api/users", data={"username": "formuser"})

    assert response.status_code == 200
    assert response.json()["username"] == "formuser"


def test_create_user_rejects_empty_username(container) -> None:
    response = _client(container).post("/api/users", json={"username": ""})

    assert response.status_code == 400
    assert "cannot be empty" in response.json()["error"]


def test_create_user_rejects_missing_username(container) -> None:
    response = _client(container).post("/api/users", json={})

    assert response.status_code == 400
    assert "required" in response.json()["error"]


def test_create_user_rejects_duplicate(container) -> None:
    client = _client(container)
    _create_user(client, "duplicate")

    response = client.post("/api/users", json={"username": "duplicate"})

    assert response.status_code == 400
    assert "already exists" in response.json()["error"]


def test_create_user_rejects_malformed_json(container) -> None:
    response = _client(container).post(
        "/api/users",
        content=b"{not json",
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 400


def test_list_users(container) -> None:
    client = _client(container)
    _create_user(client, "first")
    _create_user(client, "second")

    response = client.get("/api/users")

    assert response.status_code == 200
    assert response.json() == [
        {"id": 1, "username": "first"},
        {"id": 2, "username": "second"},
    ]


def test_create_exercise(container) -> None:
    client = _client(container)
    user_id = _create_user(client)

    response = client.post(
        f"/api/users/{user_id}/exercises",
        json={"description": "Running", "duration": 30, "date": "2024-01-01"},
    )

    assert response.status_code == 200
    assert response.json() == {
        "userId": user_id,
        "exerciseId": 1,
        "description": "Running",
        "duration": 30,
        "date": "2024-01-01",
    }


def test_create_exercise_defaults_date(container) -> None:
    client = _client(container)
    user_id = _create_user(client)

    response = client.post(
        f"/api/users/{user_id}/exercises",
        data={"description": "Cycling", "duration": "45"},
    )

    assert response.status_code == 200
    assert response.json()["date"] == FIXED_TODAY.isoformat()
    assert response.json()["duration"] == 45


def test_create_exercise_for_unknown_user(container) -> None:
    response = _client(container).post(
        "/api/users/999/exercises", json={"description": "Running", "duration": 30}
    )

    assert response.status_code == 404
    assert response.json() == {"error": "User not found"}


def test_create_exercise_with_invalid_user_id(container) -> None:
    response = _client(container).post(
        "/api/users/abc/exercises", json={"description": "Running", "duration": 30}
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid user ID"}


def test_create_exercise_reports_all_field_errors(container) -> None:
    client = _client(container)
    user_id = _create_user(client)

    response = client.post(
        f"/api/users/{user_id}/exercises",
        json={"duration": "invalid", "date": "not-a-date"},
    )

    assert response.status_code == 400
    error = response.json()["error"]
    assert "Description is required" in error
    assert "Duration" in error
    assert "YYYY-MM-DD" in error


def test_logs_with_date_range_and_limit(container) -> None:
    client = _client(container)
    user_id = _create_user(client)
    for day in ("2024-01-03", "2024-01-01", "2024-01-02"):
        client.post(
            f"/api/users/{user_id}/exercises",
            json={"description": f"Run {day}", "duration": 20, "date": day},
        )

    ranged = client.get(
        f"/api/users/{user_id}/logs",
        params={"from": "2024-01-02", "to": "2024-01-03"},
    )
    limited = client.get(f"/api/users/{user_id}/logs", params={"limit": "1"})

    assert ranged.status_code == 200
    body = ranged.json()
    assert body["id"] == user_id
    assert body["username"] == "testuser"
    assert body["count"] == 2
    assert [entry["date"] for entry in body["logs"]] == ["2024-01-02", "2024-01-03"]
    assert set(body["logs"][0]) == {"id", "description", "duration", "date"}
    assert len(limited.json()["logs"]) == 1
    assert limited.json()["count"] == 3


def test_logs_reject_negative_limit(container) -> None:
    client = _client(container)
    user_id = _create_user(client)

    response = client.get(f"/api/users/{user_id}/logs", params={"limit": "-1"})

    assert response.status_code == 400
    assert "positive integer" in response.json()["error"]


def test_logs_for_unknown_user(container) -> None:
    response = _client(container).get("/api/users/77/logs")

    assert response.status_code == 404


def test_unknown_route_returns_not_found(container) -> None:
    client = _client(container)

    missing = client.get("/api/unknown")
    wrong_method = client.delete("/api/users")

    assert missing.status_code == 404
    assert missing.json() == {"error": "Route not found"}
    assert wrong_method.status_code == 404
    assert wrong_method.json() == {"error": "Route not found"}


def test_storage_failure_maps_to_internal_error(container, monkeypatch) -> None:
    def fail() -> list:
        raise StorageError("Database operation failed")

    monkeypatch.setattr(container.user_service, "get_all_users", fail)

    response = _client(container).get("/api/users")

    assert response.status_code == 500
    assert response.json() == {"error": "Internal server error"}


def test_unexpected_error_maps_to_internal_error(container, monkeypatch) -> None:
    def fail() -> list:
        raise RuntimeError("boom")

    monkeypatch.setattr(container.user_service, "get_all_users", fail)

    response = _client(container).get("/api/users")

    assert response.status_code == 500
    assert response.json() == {"error": "Internal server error"}


def test_lifespan_closes_resources(container) -> None:
    closed: list[bool] = []

    async def close_resources() -> None:
        closed.append(True)

    container.close_resources = close_resources
    with TestClient(create_app(container)) as client:
        client.get("/health")

    assert closed == [True]
