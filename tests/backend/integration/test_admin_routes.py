import csv
import datetime as dt
import io

import pytest

from portal.models import ConnectionLog


pytestmark = pytest.mark.asyncio


def _parse_csv(resp):
    return list(csv.reader(io.StringIO(resp.text)))


async def test_admin_login(client, create_admin, radius_calls):
    admin, password = await create_admin()

    ok = await client.post("/api/admin/login", json={"email": admin.email, "password": password})
    body = ok.json()
    assert ok.status_code == 200
    assert body["admin"] == {"id": str(admin.id), "email": admin.email}
    assert body["token"]
    # Admins never go through RADIUS
    assert radius_calls == []

    wrong = await client.post("/api/admin/login", json={"email": admin.email, "password": "nope"})
    unknown = await client.post("/api/admin/login", json={"email": "who@x.com", "password": password})
    for resp in (wrong, unknown):
        assert resp.status_code == 401
        assert resp.json()["message"] == "invalid credentials"

    missing = await client.post("/api/admin/login", json={"email": admin.email})
    assert missing.status_code == 400


async def test_dashboard_stats(client, admin_headers, user_headers):
    user, _, _ = await user_headers(full_name="Dash User", company_name="Dash Co")

    resp = await client.get("/api/admin/dashboard", headers=admin_headers)
    body = resp.json()
    assert resp.status_code == 200
    assert body["stats"]["totalUsers"] == 1
    assert body["stats"]["todayConnections"] == 1
    assert body["stats"]["monthConnections"] == 1
    assert len(body["recentConnections"]) == 1
    recent = body["recentConnections"][0]
    assert recent["email"] == user.email
    assert recent["fullName"] == "Dash User"
    assert recent["companyName"] == "Dash Co"


async def test_users_list_search_and_totals(client, admin_headers, user_headers, create_user):
    active, _, headers = await user_headers(full_name="Alice Smith", company_name="Globex")
    await client.post("/api/users/connect", headers=headers, json={"ipAddress": "10.1.1.1"})
    await create_user(full_name="Bob Jones", company_name="Umbrella")

    resp = await client.get("/api/admin/users", headers=admin_headers, params={"page": 1, "limit": 20})
    body = resp.json()
    assert resp.status_code == 200
    assert body["pagination"]["total"] == 2
    by_email = {u["email"]: u for u in body["users"]}
    assert by_email[active.email]["totalConnections"] == 2
    assert by_email[active.email]["lastConnection"] is not None
    assert "passwordHash" not in by_email[active.email]

    search = await client.get("/api/admin/users", headers=admin_headers, params={"search": "globex"})
    assert [u["email"] for u in search.json()["users"]] == [active.email]

    none = await client.get("/api/admin/users", headers=admin_headers, params={"search": "zzz"})
    assert none.json()["users"] == []
    assert none.json()["pagination"]["total"] == 0


async def test_admin_can_disable_user(client, admin_headers, create_user):
    user, password = await create_user()

    resp = await client.patch(
        f"/api/admin/users/{user.id}", headers=admin_headers, json={"isActive": False}
    )
    assert resp.status_code == 200
    assert resp.json()["user"]["isActive"] is False

    login = await client.post(
        "/api/auth/login",
        json={"email": user.email, "phoneNumber": user.phone_number, "password": password},
    )
    assert login.status_code == 401

    missing = await client.patch(
        "/api/admin/users/00000000-0000-0000-0000-000000000000",
        headers=admin_headers,
        json={"isActive": True},
    )
    assert missing.status_code == 404


async def test_export_users_csv(client, admin_headers, user_headers):
    user, _, _ = await user_headers(company_name="Export Co")

    resp = await client.get("/api/admin/export/users", headers=admin_headers)
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/csv")
    assert "users_export.csv" in resp.headers["content-disposition"]

    rows = _parse_csv(resp)
    assert rows[0] == [
        "ID", "Email", "Full Name", "Phone Number", "Company",
        "Registration Date", "Last Login", "Total Connections", "Last Connection",
    ]
    assert len(rows) == 2
    assert rows[1][1] == user.email
    assert rows[1][4] == "Export Co"
    assert rows[1][7] == "1"


async def test_export_connections_csv_with_date_range(client, admin_headers, user_headers):
    user, _, _ = await user_headers()
    old = await ConnectionLog.create(user=user, email=user.email, ip_address="10.9.9.9")
    await ConnectionLog.filter(id=old.id).update(
        connection_time=dt.datetime(2020, 1, 15, 12, 0, tzinfo=dt.timezone.utc)
    )

    everything = await client.get("/api/admin/export/connections", headers=admin_headers)
    rows = _parse_csv(everything)
    assert rows[0] == [
        "ID", "Email", "Full Name", "Company", "Connection Time",
        "IP Address", "Session Duration (minutes)", "Status",
    ]
    assert len(rows) == 3
    assert "connections_export.csv" in everything.headers["content-disposition"]

    ranged = await client.get(
        "/api/admin/export/connections",
        headers=admin_headers,
        params={"startDate": "2020-01-15", "endDate": "2020-01-15"},
    )
    rows = _parse_csv(ranged)
    assert len(rows) == 2
    assert rows[1][0] == str(old.id)
    assert rows[1][5] == "10.9.9.9"
    assert rows[1][7] == "connected"

    bad = await client.get(
        "/api/admin/export/connections",
        headers=admin_headers,
        params={"startDate": "not-a-date", "endDate": "2020-01-15"},
    )
    assert bad.status_code == 400


async def test_admin_routes_reject_user_token(client, user_headers):
    _, _, headers = await user_headers()
    for url in (
        "/api/admin/dashboard",
        "/api/admin/users",
        "/api/admin/export/users",
        "/api/admin/export/connections",
    ):
        resp = await client.get(url, headers=headers)
        assert resp.status_code == 403, url
        assert resp.json()["message"] == "wrong role"

    unauth = await client.get("/api/admin/dashboard")
    assert unauth.status_code == 401
