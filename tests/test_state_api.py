import pytest
from fastapi.testclient import TestClient

from dashboard.app import create_app
from dashboard.config import DashboardSettings
from dashboard.core.state_repository import app_state_table

PAYLOAD = {
    "habits": [{"id": "1", "name": "Read"}, {"id": "2", "name": "Gym"}],
    "completions": {"2024-01-01": {"1": True}, "2024-01-02": {"1": "skipped", "2": True}},
}


@pytest.fixture
def client(tmp_path):
    settings = DashboardSettings(
        DATABASE_URL=f"sqlite:///{tmp_path / 'state.db'}",
        ENVIRONMENT="testing",
        DEBUG=False,
        LOGS_DIR=None,
    )
    with TestClient(create_app(settings)) as test_client:
        yield test_client


def test_get_without_record_returns_default(client):
    response = client.get("/api/state")
    assert response.status_code == 200
    assert response.json() == {"habits": [], "completions": {}}
    assert response.headers["cache-control"] == "no-store"


def test_post_then_get(client):
    response = client.post("/api/state", json=PAYLOAD)
    assert response.status_code == 200
    assert response.json() == {"ok": True}
    assert response.headers["cache-control"] == "no-store"

    assert client.get("/api/state").json() == PAYLOAD


def test_last_write_wins(client):
    client.post("/api/state", json=PAYLOAD)
    client.post("/api/state", json={"habits": [], "completions": {}})
    assert client.get("/api/state").json() == {"habits": [], "completions": {}}


def test_save_of_loaded_payload_is_idempotent(client):
    client.post("/api/state", json=PAYLOAD)
    repository = client.app.state.repository
    stored_before = repository.load_raw()

    loaded = client.get("/api/state").json()
    client.post("/api/state", json=loaded)

    assert repository.load_raw() == stored_before
    assert client.get("/api/state").json() == loaded


def test_arbitrary_json_round_trips_untouched(client):
    payload = {"habits": [{"id": "x", "name": "Ünïcode ✓", "color": "#0ff"}], "completions": {}, "extra": [1, None, {"a": 2.5}]}
    client.post("/api/state", json=payload)
    assert client.get("/api/state").json() == payload


def test_corrupted_record_falls_back_to_default(client):
    repository = client.app.state.repository
    repository.save(PAYLOAD)
    with repository.engine.begin() as conn:
        conn.execute(app_state_table.update().values(state_json="{not json"))

    assert client.get("/api/state").json() == {"habits": [], "completions": {}}


def test_post_rejects_non_json_body(client):
    response = client.post("/api/state", content=b"{broken", headers={"content-type": "application/json"})
    assert response.status_code == 400
    assert client.get("/api/state").json() == {"habits": [], "completions": {}}


def test_save_updates_timestamp(client):
    repository = client.app.state.repository
    assert repository.updated_at() is None
    client.post("/api/state", json=PAYLOAD)
    assert repository.updated_at() is not None


def test_month_stats(client):
    client.post("/api/state", json=PAYLOAD)
    response = client.get("/api/stats/month", params={"month": "2024-01"})
    assert response.status_code == 200
    data = response.json()

    # 31 день x 2 привычки, один пропуск
    assert data["month"] == "2024-01"
    assert data["overall"] == {"completed_count": 2, "eligible_count": 61, "percentage": 3}
    assert data["quota"] == {"completed": 3, "incomplete": 97}
    assert [h["habit_id"] for h in data["habits"]] == ["1", "2"]
    assert data["habits"][0]["eligible_count"] == 30
    assert len(data["daily"]) == 31
    assert data["daily"][0]["percentage"] == 50
    assert data["daily"][1]["percentage"] == 100


def test_month_stats_validation(client):
    assert client.get("/api/stats/month", params={"month": "2024-13"}).status_code == 400
    assert client.get("/api/stats/month", params={"month": "January"}).status_code == 422


def test_year_stats(client):
    client.post("/api/state", json=PAYLOAD)
    response = client.get("/api/stats/year", params={"year": 2024})
    assert response.status_code == 200
    data = response.json()
    assert data["year"] == 2024
    assert len(data["months"]) == 12
    assert data["months"][0]["percentage"] == 3
    assert data["months"][1]["eligible_count"] == 58
    assert data["best_month"] == "January"


def test_stats_on_empty_storage(client):
    data = client.get("/api/stats/month", params={"month": "2024-01"}).json()
    assert data["overall"]["percentage"] == 0
    assert data["habits"] == []


def test_health(client):
    client.post("/api/state", json=PAYLOAD)
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["data"]["has_record"] is True
    assert data["data"]["updated_at"]
