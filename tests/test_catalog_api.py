import pytest
from fastapi.testclient import TestClient

from quotedesk.app.db.base import Base
from quotedesk.app.db.session import engine
from quotedesk.app.main import app


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


def register_and_login(client: TestClient, email: str, password: str) -> str:
    client.post("/auth/register", json={"email": email, "password": password})
    resp = client.post("/auth/login", json={"email": email, "password": password})
    assert resp.status_code == 200
    return resp.json()["access_token"]


def test_client_crud():
    client = TestClient(app)
    headers = {"Authorization": f"Bearer {register_and_login(client, 'c1@example.com', 'secret')}"}

    resp = client.post(
        "/clients/",
        json={"name": "Acme", "email": "acme@example.com", "city": "Pune", "tax_id": "27AAAAA0000A1Z5"},
        headers=headers,
    )
    assert resp.status_code == 201
    client_id = resp.json()["id"]

    resp = client.put(f"/clients/{client_id}", json={"phone": "+91 98000 00000"}, headers=headers)
    assert resp.status_code == 200
    assert resp.json()["phone"] == "+91 98000 00000"
    assert resp.json()["city"] == "Pune"

    assert len(client.get("/clients/", headers=headers).json()) == 1
    assert client.delete(f"/clients/{client_id}", headers=headers).status_code == 200
    assert client.get(f"/clients/{client_id}", headers=headers).status_code == 404


def test_client_with_quotations_cannot_be_deleted():
    client = TestClient(app)
    headers = {"Authorization": f"Bearer {register_and_login(client, 'c2@example.com', 'secret')}"}
    client_id = client.post("/clients/", json={"name": "Acme", "email": "acme@example.com"}, headers=headers).json()["id"]
    item_id = client.post("/items/", json={"name": "Switch", "unit_price": "300"}, headers=headers).json()["id"]
    client.post(
        "/quotations/",
        json={"client_id": client_id, "project_title": "Network", "line_items": [{"item_id": item_id}]},
        headers=headers,
    )
    assert client.delete(f"/clients/{client_id}", headers=headers).status_code == 409


def test_invalid_client_email_rejected():
    client = TestClient(app)
    headers = {"Authorization": f"Bearer {register_and_login(client, 'c3@example.com', 'secret')}"}
    resp = client.post("/clients/", json={"name": "Bad", "email": "not-an-email"}, headers=headers)
    assert resp.status_code == 422


def test_items_ordered_by_name_and_update_keeps_quoted_price():
    client = TestClient(app)
    headers = {"Authorization": f"Bearer {register_and_login(client, 'i1@example.com', 'secret')}"}
    client_id = client.post("/clients/", json={"name": "Acme", "email": "acme@example.com"}, headers=headers).json()["id"]
    zeta = client.post("/items/", json={"name": "Zeta NVR", "unit_price": "8000"}, headers=headers).json()
    client.post("/items/", json={"name": "Alpha Camera", "unit_price": "2500"}, headers=headers)

    names = [item["name"] for item in client.get("/items/", headers=headers).json()]
    assert names == ["Alpha Camera", "Zeta NVR"]

    quotation = client.post(
        "/quotations/",
        json={"client_id": client_id, "project_title": "NVR", "line_items": [{"item_id": zeta["id"]}], "tax_rate": "0"},
        headers=headers,
    ).json()

    resp = client.put(f"/items/{zeta['id']}", json={"unit_price": "9000"}, headers=headers)
    assert resp.status_code == 200
    reread = client.get(f"/quotations/{quotation['id']}", headers=headers).json()
    assert float(reread["total"]) == 8000.0

    assert client.post("/items/", json={"name": "Bad", "unit_price": "-1"}, headers=headers).status_code == 422


def test_template_crud_recomputes_line_totals():
    client = TestClient(app)
    headers = {"Authorization": f"Bearer {register_and_login(client, 't1@example.com', 'secret')}"}
    resp = client.post(
        "/templates/",
        json={
            "name": "Basic",
            "tax_rate": "18",
            "line_items": [{"item_id": 1, "name": "Camera", "quantity": "3", "unit_price": "10", "total": "1"}],
        },
        headers=headers,
    )
    assert resp.status_code == 201
    data = resp.json()
    assert float(data["line_items"][0]["total"]) == 30.0

    resp = client.put(f"/templates/{data['id']}", json={"name": "Basic v2"}, headers=headers)
    assert resp.json()["name"] == "Basic v2"

    bad = client.post("/templates/", json={"name": "Bad", "line_items": [{"quantity": "1"}]}, headers=headers)
    assert bad.status_code == 400

    assert client.delete(f"/templates/{data['id']}", headers=headers).status_code == 200
    assert client.get(f"/templates/{data['id']}", headers=headers).status_code == 404


def test_goal_crud_and_progress():
    client = TestClient(app)
    headers = {"Authorization": f"Bearer {register_and_login(client, 'g1@example.com', 'secret')}"}
    resp = client.post(
        "/goals/",
        json={
            "goal_type": "revenue",
            "target_value": "100000",
            "period_start": "2026-06-01T00:00:00Z",
            "period_end": "2026-07-01T00:00:00Z",
        },
        headers=headers,
    )
    assert resp.status_code == 201
    goal_id = resp.json()["id"]
    client.post(
        "/goals/",
        json={
            "goal_type": "conversion_rate",
            "target_value": "40",
            "period_start": "2026-06-01T00:00:00Z",
            "period_end": "2026-07-01T00:00:00Z",
            "is_active": False,
        },
        headers=headers,
    )

    assert len(client.get("/goals/", headers=headers).json()) == 2
    assert len(client.get("/goals/", params={"active_only": True}, headers=headers).json()) == 1

    progress = client.get("/goals/progress", params={"now": "2026-06-11T00:00:00Z"}, headers=headers).json()
    assert len(progress) == 1
    assert progress[0]["goal"]["id"] == goal_id
    assert progress[0]["status"] == "not-started"
    assert progress[0]["days_remaining"] == 20

    bad = client.post(
        "/goals/",
        json={
            "goal_type": "revenue",
            "target_value": "10",
            "period_start": "2026-07-01T00:00:00Z",
            "period_end": "2026-06-01T00:00:00Z",
        },
        headers=headers,
    )
    assert bad.status_code == 400


def test_null_for_required_field_is_rejected():
    client = TestClient(app)
    headers = {"Authorization": f"Bearer {register_and_login(client, 'n1@example.com', 'secret')}"}
    item_id = client.post("/items/", json={"name": "Switch", "unit_price": "300"}, headers=headers).json()["id"]
    client_id = client.post("/clients/", json={"name": "Acme", "email": "acme@example.com"}, headers=headers).json()["id"]
    template_id = client.post("/templates/", json={"name": "Basic", "tax_rate": "18"}, headers=headers).json()["id"]
    goal_id = client.post(
        "/goals/",
        json={
            "goal_type": "revenue",
            "target_value": "5000",
            "period_start": "2026-06-01T00:00:00Z",
            "period_end": "2026-07-01T00:00:00Z",
        },
        headers=headers,
    ).json()["id"]

    resp = client.put(f"/items/{item_id}", json={"unit_price": None}, headers=headers)
    assert resp.status_code == 400
    assert resp.json()["detail"] == "unit_price cannot be empty"
    assert client.put(f"/clients/{client_id}", json={"name": None}, headers=headers).status_code == 400
    assert client.put(f"/templates/{template_id}", json={"tax_rate": None}, headers=headers).status_code == 400
    assert client.put(f"/goals/{goal_id}", json={"target_value": None}, headers=headers).status_code == 400
    assert client.put(f"/goals/{goal_id}", json={"period_start": None}, headers=headers).status_code == 400

    assert client.get(f"/items/{item_id}", headers=headers).json()["unit_price"] == "300.00"
    cleared = client.put(f"/items/{item_id}", json={"category": None}, headers=headers)
    assert cleared.status_code == 200
