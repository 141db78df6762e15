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


def test_sheets_export_unknown_quotation():
    client = TestClient(app)
    headers = {"Authorization": f"Bearer {register_and_login(client, 'e1@example.com', 'secret')}"}
    resp = client.post("/exports/sheets", json={"access_token": "google-token", "quotation_ids": [404]}, headers=headers)
    assert resp.status_code == 404
    assert resp.json() == {"detail": "Quotation not found"}


def test_drive_export_reports_unknown_quotations():
    client = TestClient(app)
    headers = {"Authorization": f"Bearer {register_and_login(client, 'e2@example.com', 'secret')}"}
    resp = client.post("/exports/drive", json={"access_token": "google-token", "quotation_ids": [7, 8]}, headers=headers)
    assert resp.status_code == 200
    data = resp.json()
    assert data["succeeded"] == 0
    assert data["failed"] == 2
    assert [r["quotation_id"] for r in data["results"]] == [7, 8]


def test_export_requires_auth():
    client = TestClient(app)
    resp = client.post("/exports/drive", json={"access_token": "t", "quotation_ids": [1]})
    assert resp.status_code in (401, 403)
