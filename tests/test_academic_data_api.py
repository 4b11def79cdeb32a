import pytest
from fastapi.testclient import TestClient

from backend.app.db.base import Base
from backend.app.db.session import engine
from backend.app.main import app


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


def register_and_login(client: TestClient, phone: str, roles) -> dict:
    client.post("/auth/register", json={"full_name": phone, "phone": phone, "password": "secret", "roles": roles})
    response = client.post("/auth/login", json={"phone": phone, "password": "secret"})
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


def test_academic_data_lifecycle():
    client = TestClient(app)
    head = register_and_login(client, "0782000001", ["HEAD"])
    parent = register_and_login(client, "0782000002", ["PARENTS"])

    payload = {"trimester": "FIRST", "academic_year": 2024, "period": "PERIOD_1"}
    resp = client.post("/academic-data", json=payload, headers=head)
    assert resp.status_code == 201
    record = resp.json()
    assert record["published"] is False

    assert client.post("/academic-data", json=payload, headers=head).status_code == 409

    resp = client.post(
        "/academic-data/get-or-create",
        params={"trimester": "FIRST", "academic_year": 2024, "period": "PERIOD_1"},
        headers=head,
    )
    assert resp.status_code == 200
    assert resp.json()["id"] == record["id"]

    assert client.get("/academic-data/published", headers=parent).json() == []
    resp = client.post(f"/academic-data/{record['id']}/publish", headers=head)
    assert resp.json()["published"] is True
    assert [ad["id"] for ad in client.get("/academic-data/published", headers=parent).json()] == [record["id"]]

    client.post(f"/academic-data/{record['id']}/unpublish", headers=head)
    assert client.get("/academic-data/published", headers=parent).json() == []

    resp = client.put(f"/academic-data/{record['id']}", json={"period": "FINAL_SEMESTER"}, headers=head)
    assert resp.json()["period"] == "FINAL_SEMESTER"

    assert client.delete(f"/academic-data/{record['id']}", headers=head).status_code == 204
    assert client.get(f"/academic-data/{record['id']}", headers=head).status_code == 404


def test_only_head_manages_academic_data():
    client = TestClient(app)
    teacher = register_and_login(client, "0782000003", ["TEACHER"])
    resp = client.post("/academic-data", json={"trimester": "FIRST", "academic_year": 2024, "period": "PERIOD_1"}, headers=teacher)
    assert resp.status_code == 403


def test_invalid_enum_is_rejected():
    client = TestClient(app)
    head = register_and_login(client, "0782000004", ["HEAD"])
    resp = client.post("/academic-data", json={"trimester": "FOURTH", "academic_year": 2024, "period": "PERIOD_1"}, headers=head)
    assert resp.status_code == 422
