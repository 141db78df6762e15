from datetime import datetime, timezone
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from quotedesk.app.db.base import Base
from quotedesk.app.db.session import SessionLocal, engine
from quotedesk.app.main import app
from quotedesk.app.models.client import Client
from quotedesk.app.models.item import Item
from quotedesk.app.models.quotation import Quotation


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


def seed_quotations():
    db = SessionLocal()
    try:
        acme = Client(name="Acme", email="acme@example.com")
        camera = Item(name="Camera", unit_price=Decimal("1000"), cost_price=Decimal("400"), category="CCTV")
        db.add_all([acme, camera])
        db.flush()
        rows = [
            ("QTN-2026-0001", "accepted", Decimal("1000"), "400", datetime(2026, 5, 3, tzinfo=timezone.utc)),
            ("QTN-2026-0002", "sent", Decimal("1000"), "950", datetime(2026, 5, 20, tzinfo=timezone.utc)),
            ("QTN-2026-0003", "draft", Decimal("500"), "100", datetime(2026, 4, 2, tzinfo=timezone.utc)),
        ]
        for number, status, total, cost, created_at in rows:
            db.add(
                Quotation(
                    quotation_number=number,
                    client_id=acme.id,
                    project_title=number,
                    line_items=[{"item_id": camera.id, "quantity": "1.000", "unit_price": str(total), "cost_price": cost}],
                    subtotal=total,
                    tax_rate=Decimal("0"),
                    tax_amount=Decimal("0"),
                    total=total,
                    status=status,
                    created_at=created_at,
                )
            )
        db.commit()
    finally:
        db.close()


def test_profit_report():
    client = TestClient(app)
    headers = {"Authorization": f"Bearer {register_and_login(client, 'a1@example.com', 'secret')}"}
    seed_quotations()

    resp = client.get("/analytics/profit", params={"months": 3, "as_of": "2026-05-31"}, headers=headers)
    assert resp.status_code == 200
    data = resp.json()
    assert data["currency"] == "INR"
    assert data["overall"] == {
        "revenue": "1000.00",
        "cost": "400.00",
        "gross_profit": "600.00",
        "profit_margin": "60.00",
        "quotation_count": 1,
    }
    assert data["by_client"][0]["client_name"] == "Acme"
    assert data["by_category"][0]["category"] == "CCTV"
    assert [m["label"] for m in data["monthly_trend"]] == ["Mar", "Apr", "May"]
    assert data["monthly_trend"][2]["gross_profit"] == "600.00"
    assert [(a["quotation_number"], a["severity"]) for a in data["low_margin_alerts"]] == [("QTN-2026-0002", "critical")]


def test_dashboard_summary():
    client = TestClient(app)
    headers = {"Authorization": f"Bearer {register_and_login(client, 'a2@example.com', 'secret')}"}
    seed_quotations()

    data = client.get("/analytics/summary", headers=headers).json()
    assert data["quotation_count"] == 3
    assert data["status_counts"] == {"draft": 1, "sent": 1, "accepted": 1, "rejected": 0}
    assert data["client_count"] == 1
    assert data["item_count"] == 1
    assert data["accepted_revenue"] == "1000.00"
    assert data["pipeline_value"] == "1000.00"


def test_months_must_be_positive():
    client = TestClient(app)
    headers = {"Authorization": f"Bearer {register_and_login(client, 'a3@example.com', 'secret')}"}
    assert client.get("/analytics/profit", params={"months": 0}, headers=headers).status_code == 422
