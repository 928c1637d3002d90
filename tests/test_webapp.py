import importlib
from datetime import datetime
from typing import Dict, List

import pytest

pytest.importorskip("fastapi")
import httpx
from fastapi.testclient import TestClient
from sqlmodel import Session, select

from elisia.lok import ContributionAggregator

THURSDAY = datetime(2024, 3, 14, 12, 0)
ADMIN = {"username": "warden", "password": "keep-the-gate"}

UPSTREAM: Dict[str, List[dict]] = {
    "100": [
        {"kingdomId": "K1", "total": 40, "name": "Alpha", "continent": 3},
        {"kingdomId": "K2", "total": 15, "name": "Beta", "continent": 4},
    ],
    "200": [
        {"kingdomId": "K1", "total": 60, "name": "Alpha", "continent": 3},
        {"kingdomId": "K3", "total": 5, "name": "Gamma", "continent": 4},
    ],
}


def upstream_handler(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, json={"contribution": UPSTREAM.get(request.url.params["landId"], [])})


@pytest.fixture
def webapp_module(tmp_path, monkeypatch):
    monkeypatch.setenv("ELISIA_SQLITE", str(tmp_path / "elisia.db"))
    monkeypatch.setenv("ADMIN_USERNAME", ADMIN["username"])
    monkeypatch.setenv("ADMIN_PASSWORD", ADMIN["password"])
    monkeypatch.setenv("LOGIN_MAX_ATTEMPTS", "3")
    from elisia.webapp import application, config, persistence, storage

    for module in (config, persistence, storage, application):
        importlib.reload(module)
    application.set_contribution_aggregator(
        ContributionAggregator(
            ("100", "200"),
            endpoint="https://lok.test/contribution",
            transport=httpx.MockTransport(upstream_handler),
            clock=lambda: THURSDAY,
        )
    )
    monkeypatch.setattr(application, "_time_provider", lambda: THURSDAY)
    return application


@pytest.fixture
def admin(webapp_module) -> TestClient:
    client = TestClient(webapp_module.app)
    assert client.post("/api/login", json=ADMIN).status_code == 200
    return client


def register(webapp_module, username: str = "ava", *, approve_with: TestClient | None = None) -> TestClient:
    client = TestClient(webapp_module.app)
    response = client.post(
        "/api/register",
        json={"username": username, "password": "secret-pass", "firstName": username.title()},
    )
    assert response.status_code == 201
    if approve_with is not None:
        user_id = response.json()["id"]
        assert approve_with.post(f"/api/admin/approve-user/{user_id}").status_code == 200
    return client


def test_register_creates_pending_account(webapp_module) -> None:
    client = register(webapp_module)

    me = client.get("/api/user")
    assert me.status_code == 200
    body = me.json()
    assert body["username"] == "ava" and body["firstName"] == "Ava"
    assert body["isApproved"] is False
    assert "passwordHash" not in body

    assert client.get("/api/auth/user").json() == {"message": "Account pending approval"}
    assert client.get("/api/kingdoms").status_code == 403

    duplicate = TestClient(webapp_module.app).post("/api/register", json={"username": "ava", "password": "another-pass"})
    assert duplicate.status_code == 400
    assert "already exists" in duplicate.json()["message"]


def test_anonymous_requests_are_unauthorized(webapp_module) -> None:
    client = TestClient(webapp_module.app)
    for path in ("/api/user", "/api/kingdoms", "/api/admin/stats", "/api/user/land-contributions"):
        response = client.get(path)
        assert response.status_code == 401
        assert response.json() == {"message": "Unauthorized"}


def test_register_validates_password_length(webapp_module) -> None:
    response = TestClient(webapp_module.app).post("/api/register", json={"username": "ava", "password": "abc"})
    assert response.status_code == 422


def test_login_logout_and_lockout(webapp_module) -> None:
    register(webapp_module)
    client = TestClient(webapp_module.app)

    for _ in range(3):
        response = client.post("/api/login", json={"username": "ava", "password": "wrong-pass"})
        assert response.status_code == 401
    locked = client.post("/api/login", json={"username": "ava", "password": "secret-pass"})
    assert locked.status_code == 429

    webapp_module.auth_manager.reset()
    assert client.post("/api/login", json={"username": "ava", "password": "secret-pass"}).status_code == 200
    assert client.get("/api/user").status_code == 200
    assert client.post("/api/logout").status_code == 200
    assert client.get("/api/user").status_code == 401


def test_admin_routes_require_admin(webapp_module, admin: TestClient) -> None:
    member = register(webapp_module, approve_with=admin)

    assert member.get("/api/admin/stats").json() == {"message": "Admin access required"}
    stats = admin.get("/api/admin/stats").json()
    assert stats == {"totalUsers": 2, "totalKingdoms": 0, "pendingApprovals": 0, "totalPayouts": "0.00"}


def test_pending_users_can_be_approved_or_rejected(webapp_module, admin: TestClient) -> None:
    register(webapp_module, "ava")
    register(webapp_module, "ben")

    pending = admin.get("/api/admin/pending-users").json()
    assert [user["username"] for user in pending] == ["ava", "ben"]

    ava_id, ben_id = pending[0]["id"], pending[1]["id"]
    assert admin.post(f"/api/admin/approve-user/{ava_id}").json()["isApproved"] is True
    assert admin.delete(f"/api/admin/reject-user/{ben_id}").status_code == 200
    assert admin.get("/api/admin/pending-users").json() == []
    assert admin.delete(f"/api/admin/reject-user/{ben_id}").status_code == 404


def test_kingdom_ownership_and_contributions(webapp_module, admin: TestClient) -> None:
    ava = register(webapp_module, "ava", approve_with=admin)
    ben = register(webapp_module, "ben", approve_with=admin)

    created = ava.post("/api/kingdoms", json={"name": "Avalon", "lokKingdomId": "K1", "level": 4})
    assert created.status_code == 200
    kingdom = created.json()
    assert kingdom["lokKingdomId"] == "K1" and kingdom["totalContributions"] == "0.00"

    clash = ben.post("/api/kingdoms", json={"name": "Copycat", "lokKingdomId": "K1"})
    assert clash.status_code == 400
    assert ben.put(f"/api/kingdoms/{kingdom['id']}", json={"name": "Stolen"}).status_code == 404

    renamed = ava.put(f"/api/kingdoms/{kingdom['id']}", json={"name": "Avalon Prime", "status": "developing"})
    assert renamed.json()["name"] == "Avalon Prime"
    assert renamed.json()["level"] == 4

    contribution = ava.post("/api/contributions", json={"kingdomId": kingdom["id"], "amount": "12.50", "period": "weekly"})
    assert contribution.json()["amount"] == "12.50"
    assert ben.post("/api/contributions", json={"kingdomId": kingdom["id"], "amount": "1"}).status_code == 404

    history = ava.get(f"/api/kingdoms/{kingdom['id']}/contributions", params={"period": "weekly"}).json()
    assert [row["amount"] for row in history] == ["12.50"]
    assert ava.get("/api/kingdoms").json()[0]["totalContributions"] == "12.50"
    assert [row["name"] for row in admin.get("/api/admin/kingdoms").json()] == ["Avalon Prime"]


def test_wallets_and_payment_requests(webapp_module, admin: TestClient) -> None:
    ava = register(webapp_module, approve_with=admin)

    assert ava.post("/api/wallets", json={"address": "0xabc"}).json()["isPrimary"] is True
    assert ava.post("/api/wallets", json={"address": "0xdef"}).json()["isPrimary"] is False
    assert len(ava.get("/api/wallets").json()) == 2

    assert ava.post("/api/payment-requests", json={"amount": "-1", "walletAddress": "0xabc"}).status_code == 422
    request = ava.post("/api/payment-requests", json={"amount": "25", "walletAddress": "0xabc"}).json()
    assert request["status"] == "pending" and request["amount"] == "25.00"

    pending = admin.get("/api/admin/pending-payments").json()
    assert [row["id"] for row in pending] == [request["id"]]
    reviewed = admin.put(f"/api/admin/payment-requests/{request['id']}", json={"status": "approved", "adminNotes": "ok"})
    assert reviewed.json()["status"] == "approved" and reviewed.json()["adminNotes"] == "ok"
    assert admin.put(f"/api/admin/payment-requests/{request['id']}", json={"status": "lost"}).status_code == 422
    assert ava.get("/api/payment-requests").json()[0]["status"] == "approved"


def test_payment_settings_and_drago_rentals(webapp_module, admin: TestClient) -> None:
    ava = register(webapp_module, approve_with=admin)
    kingdom = ava.post("/api/kingdoms", json={"name": "Avalon"}).json()
    rental = {"kingdomId": kingdom["id"], "dragoType": "war", "duration": "1Week"}

    assert ava.get("/api/payment-settings").json() is None
    missing = ava.post("/api/drago-rental-requests", json=rental)
    assert missing.status_code == 400

    created = admin.post(
        "/api/admin/payment-settings",
        json={"payoutFor1000Points": "5.00", "minimumPayout": "10", "warDrago1Week": 7000},
    ).json()
    assert created["payoutFor1000Points"] == "5.00"
    assert created["minimumPayout"] == "10.00"
    assert created["warDrago1Week"] == 7000
    assert created["payoutFrequency"] == "monthly"

    updated = admin.put(f"/api/admin/payment-settings/{created['id']}", json={"regularDrago1Month": 15000}).json()
    assert updated["warDrago1Week"] == 7000 and updated["regularDrago1Month"] == 15000
    assert updated["payoutFor1000Points"] == "5.00"
    assert ava.get("/api/payment-settings").json()["regularDrago1Month"] == 15000

    requested = ava.post("/api/drago-rental-requests", json=rental).json()
    assert requested["pointsRequired"] == 7000 and requested["status"] == "pending"
    assert [row["id"] for row in admin.get("/api/admin/pending-drago-rentals").json()] == [requested["id"]]

    approved = admin.put(
        f"/api/admin/drago-rental-requests/{requested['id']}",
        json={"status": "active", "rentalStartDate": "2024-03-17", "rentalEndDate": "2024-03-23"},
    ).json()
    assert approved["status"] == "active"
    assert approved["rentalStartDate"] == "2024-03-17"
    assert approved["processedAt"] is not None
    assert admin.get("/api/admin/pending-drago-rentals").json() == []
    assert len(admin.get("/api/admin/drago-rental-requests").json()) == 1
    assert ava.get("/api/drago-rental-requests").json()[0]["status"] == "active"


def test_payout_settles_contributions(webapp_module, admin: TestClient) -> None:
    ava = register(webapp_module, approve_with=admin)
    ava_id = ava.get("/api/user").json()["id"]
    kingdom = ava.post("/api/kingdoms", json={"name": "Avalon"}).json()
    ava.post("/api/contributions", json={"kingdomId": kingdom["id"], "amount": "7.50"})
    ava.post("/api/contributions", json={"kingdomId": kingdom["id"], "amount": "5"})

    before = ava.get("/api/user/payout-summary").json()
    assert before["summary"]["totalPaid"] == "0.00"
    assert before["unpaidAmount"] == "12.50"
    assert len(before["unpaidContributions"]) == 2

    payout = admin.post("/api/admin/payouts", json={"userId": ava_id, "totalAmount": "12.50", "walletAddress": "0xabc"}).json()
    assert payout["totalAmount"] == "12.50" and payout["status"] == "pending"
    assert [row["id"] for row in admin.get("/api/admin/pending-payouts").json()] == [payout["id"]]

    after = ava.get("/api/user/payout-summary").json()
    assert after["summary"]["totalPaid"] == "12.50"
    assert after["unpaidAmount"] == "0.00" and after["unpaidContributions"] == []

    done = admin.put(f"/api/admin/payouts/{payout['id']}", json={"status": "completed", "transactionHash": "0xfeed"}).json()
    assert done["status"] == "completed" and done["transactionHash"] == "0xfeed"
    assert ava.get("/api/payouts").json()[0]["status"] == "completed"


def test_user_land_contributions_are_scoped_to_linked_kingdoms(webapp_module, admin: TestClient) -> None:
    ava = register(webapp_module, approve_with=admin)

    empty = ava.get("/api/user/land-contributions").json()
    assert empty["data"] == []
    assert empty["from"] == empty["to"] == "2024-03-14"

    ava.post("/api/kingdoms", json={"name": "Avalon", "lokKingdomId": "K1"})
    result = ava.get("/api/user/land-contributions", params={"period": "lastWeek"}).json()

    assert (result["from"], result["to"]) == ("2024-03-03", "2024-03-09")
    assert {row["kingdomId"] for row in result["data"]} == {"K1"}
    assert sorted(row["landId"] for row in result["data"]) == ["100", "200"]
    assert result["pairs"] == {"requested": 2, "failed": 0}


def test_admin_land_contributions_filters_and_stats(webapp_module, admin: TestClient) -> None:
    everything = admin.get("/api/admin/land-contributions", params={"period": "lastWeek"}).json()
    assert len(everything["data"]) == 4

    by_continent = admin.get("/api/admin/land-contributions", params={"period": "lastWeek", "continent": "3"}).json()
    assert {row["kingdomId"] for row in by_continent["data"]} == {"K1"}

    by_land = admin.get("/api/admin/land-contributions", params={"period": "lastWeek", "landId": "200"}).json()
    assert sorted(row["kingdomId"] for row in by_land["data"]) == ["K1", "K3"]

    unfiltered = admin.get(
        "/api/admin/land-contributions", params={"period": "lastWeek", "continent": "all", "landId": "all"}
    ).json()
    assert len(unfiltered["data"]) == 4

    stats = admin.get("/api/admin/land-stats", params={"period": "lastWeek"}).json()
    assert stats["totalContributions"] == 120
    assert stats["totalKingdoms"] == 3
    assert stats["landStats"]["100"]["kingdomCount"] == 2
    assert stats["continentStats"]["4"]["kingdomCount"] == 2

    health = TestClient(webapp_module.app).get("/api/health").json()
    assert health["database"] == "ok"
    assert health["upstream"] == "ok"
    assert health["lastPairsRequested"] == 2


def test_non_integer_custom_days_is_treated_as_absent(webapp_module, admin: TestClient) -> None:
    result = admin.get("/api/admin/land-contributions", params={"period": "customDays", "customDays": "ten"}).json()
    assert (result["from"], result["to"]) == ("2024-03-07", "2024-03-13")

    result = admin.get("/api/admin/land-contributions", params={"period": "customDays", "customDays": "10"}).json()
    assert (result["from"], result["to"]) == ("2024-03-04", "2024-03-13")
    assert result["pairs"]["requested"] == 4


def test_oversized_custom_days_falls_back_to_a_week(webapp_module, admin: TestClient) -> None:
    calls = []

    def counting(request: httpx.Request) -> httpx.Response:
        calls.append(request.url.params["landId"])
        return upstream_handler(request)

    webapp_module.set_contribution_aggregator(
        ContributionAggregator(("100", "200"), transport=httpx.MockTransport(counting), clock=lambda: THURSDAY)
    )
    response = admin.get("/api/admin/land-stats", params={"period": "customDays", "customDays": "800000"})
    assert response.status_code == 200

    result = admin.get("/api/admin/land-contributions", params={"period": "customDays", "customDays": "3650"}).json()
    assert (result["from"], result["to"]) == ("2024-03-07", "2024-03-13")
    assert result["pairs"]["requested"] == 4
    assert len(calls) == 8


def test_upstream_outage_is_visible_in_health(webapp_module, admin: TestClient) -> None:
    def outage(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, text="maintenance")

    webapp_module.set_contribution_aggregator(
        ContributionAggregator(("100", "200"), transport=httpx.MockTransport(outage), clock=lambda: THURSDAY)
    )
    result = admin.get("/api/admin/land-contributions").json()

    assert result["data"] == []
    assert result["pairs"] == {"requested": 2, "failed": 2}
    assert admin.get("/api/health").json()["upstream"] == "down"


def test_announcements_and_user_overview(webapp_module, admin: TestClient) -> None:
    ava = register(webapp_module, approve_with=admin)
    ava.post("/api/kingdoms", json={"name": "Avalon"})
    ava.post("/api/wallets", json={"address": "0xabc"})

    posted = admin.post("/api/admin/announcements", json={"title": "Land war", "message": "Rally", "type": "urgent"})
    assert posted.json()["type"] == "urgent"
    assert [row["title"] for row in ava.get("/api/announcements").json()] == ["Land war"]

    users = {row["username"]: row for row in admin.get("/api/admin/all-users").json()}
    assert [kingdom["name"] for kingdom in users["ava"]["kingdoms"]] == ["Avalon"]
    assert [wallet["address"] for wallet in users["ava"]["wallets"]] == ["0xabc"]
    assert "passwordHash" not in users["warden"]


def test_admin_can_delete_members_but_not_themselves(webapp_module, admin: TestClient) -> None:
    ava = register(webapp_module, approve_with=admin)
    ava_id = ava.get("/api/user").json()["id"]
    admin_id = admin.get("/api/user").json()["id"]
    ava.post("/api/kingdoms", json={"name": "Avalon"})

    assert admin.delete(f"/api/admin/delete-user/{admin_id}").status_code == 400
    assert admin.delete(f"/api/admin/delete-user/{ava_id}").status_code == 200
    assert ava.get("/api/user").status_code == 401

    with Session(webapp_module.storage.engine) as session:
        assert session.exec(select(webapp_module.storage.Kingdom)).all() == []
