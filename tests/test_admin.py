from datetime import date

import pytest
from sqlalchemy import select, func, false

from api.admin import db_manager
from api.apars.db_manager import create_apar
from api.inspections.db_manager import create_inspection
from core.exceptions import SelfDeletionError, ValidationError
from db_models.inspection import Inspection
from db_models.inspection_item import InspectionItem
from db_models.user import User
from conftest import apar_payload, checklist, inspection_payload

TODAY = date(2025, 6, 15)


async def _seed(db_session):
    """
    APAR-A active, inspected this month (twice)
    APAR-B inactive, inspected last month
    APAR-C expired, never inspected
    APAR-D maintenance, never inspected
    """
    a = await create_apar(db_session, apar_payload(number="APAR-A", location="Gudang"))
    b = await create_apar(db_session, apar_payload(number="APAR-B", location="Lobby", status="inactive"))
    await create_apar(db_session, apar_payload(number="APAR-C", location="Gudang", status="expired"))
    await create_apar(db_session, apar_payload(number="APAR-D", location="Aula", status="maintenance"))

    first = await create_inspection(
        db_session, inspector_id=2, apar_id=b.id, inspection_date=date(2025, 5, 30), items=checklist()
    )
    second = await create_inspection(
        db_session, inspector_id=2, apar_id=a.id, inspection_date=date(2025, 6, 1), items=checklist()
    )
    third = await create_inspection(
        db_session,
        inspector_id=2,
        apar_id=a.id,
        inspection_date=date(2025, 6, 3),
        items=checklist(pressure="needs_repair", cleanliness="needs_repair"),
    )
    return first, second, third


@pytest.mark.anyio
async def test_admin_stats(db_session):
    await _seed(db_session)

    stats = await db_manager.get_admin_stats(db_session, TODAY)

    assert stats == {
        "total_apar": 4,
        "total_users": 2,
        "total_inspections": 3,
        "apar_baik": 1,
        "apar_rusak": 2,
        "apar_belum_cek": 3,
    }


@pytest.mark.anyio
async def test_not_inspected_uses_inspection_month_and_year(db_session):
    await _seed(db_session)

    # Same month a year later: nothing counts as inspected
    stats = await db_manager.get_admin_stats(db_session, date(2026, 6, 15))
    assert stats["apar_belum_cek"] == 4

    stats = await db_manager.get_admin_stats(db_session, date(2025, 5, 1))
    assert stats["apar_belum_cek"] == 3


@pytest.mark.anyio
async def test_users_with_counts_newest_first(db_session):
    await _seed(db_session)
    await db_manager.create_user(
        db_session,
        {"name": "Budi", "email": "budi@test.com", "password": "rahasia123", "role": "petugas"},
    )

    users = await db_manager.list_users_with_counts(db_session)

    assert [(u["user"].email, u["inspections_count"]) for u in users] == [
        ("budi@test.com", 0),
        ("petugas@test.com", 3),
        ("admin@test.com", 0),
    ]


@pytest.mark.anyio
async def test_apars_with_stats(db_session):
    await _seed(db_session)

    apars = await db_manager.list_apars_with_stats(db_session)

    assert [
        (a["apar"].number, a["inspections_count"], a["last_inspection"]) for a in apars
    ] == [
        ("APAR-A", 2, date(2025, 6, 3)),
        ("APAR-B", 1, date(2025, 5, 30)),
        ("APAR-C", 0, None),
        ("APAR-D", 0, None),
    ]


@pytest.mark.anyio
async def test_inspections_with_pass_rates_newest_first(db_session):
    first, second, third = await _seed(db_session)

    rows = await db_manager.list_inspections_with_pass_rates(db_session)

    assert [r["inspection"].id for r in rows] == [third.id, second.id, first.id]
    assert (rows[0]["items_count"], rows[0]["passed_items"], rows[0]["pass_rate"]) == (7, 5, 71)
    assert rows[0]["pass_rate_band"] == "warning"
    assert rows[1]["pass_rate"] == 100


@pytest.mark.anyio
async def test_apars_by_location(db_session):
    await _seed(db_session)

    locations = await db_manager.get_apars_by_location(db_session)

    assert locations == [
        {"location": "Gudang", "count": 2},
        {"location": "Aula", "count": 1},
        {"location": "Lobby", "count": 1},
    ]


@pytest.mark.anyio
async def test_latest_recorded_inspections(db_session):
    first, second, third = await _seed(db_session)

    recent = await db_manager.get_latest_recorded_inspections(db_session, limit=2)

    assert [i.id for i in recent] == [third.id, second.id]


@pytest.mark.anyio
async def test_delete_self_is_refused(db_session):
    with pytest.raises(SelfDeletionError):
        await db_manager.delete_user(db_session, 1, acting_user_id=1)


@pytest.mark.anyio
async def test_email_claimed_after_validation_is_a_field_error(db_session, monkeypatch):
    # Validation sees a free email; the unique index rejects the insert
    monkeypatch.setattr(
        db_manager.queries,
        "select_user_by_email",
        lambda email, exclude_id=None: select(User).where(false()),
    )
    fields = {"name": "Petugas Dua", "email": "petugas@test.com", "password": "rahasia123"}

    with pytest.raises(ValidationError) as exc_info:
        await db_manager.create_user(db_session, fields)
    assert exc_info.value.errors == {"email": "The email has already been taken."}

    with pytest.raises(ValidationError) as exc_info:
        await db_manager.update_user(db_session, 1, fields)
    assert "email" in exc_info.value.errors

    result = await db_session.execute(select(func.count(User.id)))
    assert result.scalar() == 2


# --- Endpoints ---

@pytest.mark.anyio
async def test_admin_dashboard_endpoint(async_client, admin_headers, petugas_headers):
    resp = await async_client.post("/api/v1/apars", json=apar_payload(), headers=petugas_headers)
    apar_id = resp.json()["id"]
    await async_client.post(
        "/api/v1/inspections",
        json=inspection_payload(apar_id, items=checklist(hose="damaged")),
        headers=petugas_headers,
    )

    resp = await async_client.get("/api/v1/admin/dashboard", headers=admin_headers)
    assert resp.status_code == 200, resp.text
    data = resp.json()
    assert data["stats"]["total_apar"] == 1
    assert data["stats"]["total_inspections"] == 1
    assert {u["email"]: u["inspections_count"] for u in data["users"]}["petugas@test.com"] == 1
    assert data["apars"][0]["inspections_count"] == 1
    assert data["apars"][0]["last_inspection"] == "2025-06-10"
    assert data["inspections"][0]["pass_rate"] == 86
    assert data["inspections"][0]["overall_status"] == "critical"
    assert data["recent_inspections"][0]["inspector"]["name"] == "Test Petugas"
    assert data["apar_by_location"] == [{"location": "Lantai 1 - Ruang Server", "count": 1}]


@pytest.mark.anyio
@pytest.mark.parametrize(
    "path", ["/api/v1/admin/dashboard", "/api/v1/admin/users", "/api/v1/admin/apars", "/api/v1/admin/inspections"]
)
async def test_admin_endpoints_forbidden_for_petugas(async_client, petugas_headers, path):
    resp = await async_client.get(path, headers=petugas_headers)
    assert resp.status_code == 403


@pytest.mark.anyio
async def test_admin_apars_and_inspections(async_client, admin_headers):
    resp = await async_client.post("/api/v1/apars", json=apar_payload(), headers=admin_headers)
    apar_id = resp.json()["id"]
    await async_client.post(
        "/api/v1/inspections",
        json=inspection_payload(apar_id, items=checklist(content="needs_repair")),
        headers=admin_headers,
    )

    resp = await async_client.get("/api/v1/admin/apars", headers=admin_headers)
    assert resp.status_code == 200
    assert resp.json()[0]["type_label"] == "Bubuk"

    resp = await async_client.get("/api/v1/admin/inspections", headers=admin_headers)
    assert resp.status_code == 200
    row = resp.json()[0]
    assert (row["passed_items"], row["pass_rate"], row["pass_rate_band"]) == (6, 86, "good")
    assert row["inspector"]["role_label"] == "Administrator"


@pytest.mark.anyio
async def test_create_user(async_client, admin_headers):
    resp = await async_client.post(
        "/api/v1/admin/users",
        json={"name": "Budi", "email": "budi@test.com", "password": "rahasia123", "role": "petugas"},
        headers=admin_headers,
    )
    assert resp.status_code == 201, resp.text
    data = resp.json()
    assert data["role_label"] == "Petugas"
    assert "hashed_password" not in data

    resp = await async_client.post(
        "/api/v1/auth/login/json", json={"email": "budi@test.com", "password": "rahasia123"}
    )
    assert resp.status_code == 200


@pytest.mark.anyio
@pytest.mark.parametrize(
    "overrides, field",
    [
        ({"email": "petugas@test.com"}, "email"),
        ({"password": "short"}, "password"),
        ({"role": "superuser"}, "role"),
        ({"password_confirmation": "different123"}, "password"),
        ({"email": "not-an-email"}, "email"),
    ],
)
async def test_create_user_validation(async_client, admin_headers, overrides, field):
    payload = {"name": "Budi", "email": "budi@test.com", "password": "rahasia123", "role": "petugas"}
    payload.update(overrides)

    resp = await async_client.post("/api/v1/admin/users", json=payload, headers=admin_headers)

    assert resp.status_code == 422
    assert field in resp.json()["detail"]["errors"]


@pytest.mark.anyio
async def test_update_user_keeps_password_when_blank(async_client, admin_headers):
    resp = await async_client.put(
        "/api/v1/admin/users/2",
        json={"name": "Petugas Baru", "email": "petugas@test.com", "role": "admin", "password": None},
        headers=admin_headers,
    )
    assert resp.status_code == 200, resp.text
    assert resp.json()["role"] == "admin"

    resp = await async_client.post(
        "/api/v1/auth/login/json", json={"email": "petugas@test.com", "password": "petugaspass"}
    )
    assert resp.status_code == 200


@pytest.mark.anyio
async def test_update_user_changes_password(async_client, admin_headers):
    resp = await async_client.put(
        "/api/v1/admin/users/2",
        json={"name": "Test Petugas", "email": "petugas@test.com", "role": "petugas", "password": "gantibaru99"},
        headers=admin_headers,
    )
    assert resp.status_code == 200, resp.text

    resp = await async_client.post(
        "/api/v1/auth/login/json", json={"email": "petugas@test.com", "password": "gantibaru99"}
    )
    assert resp.status_code == 200


@pytest.mark.anyio
async def test_get_missing_user(async_client, admin_headers):
    resp = await async_client.get("/api/v1/admin/users/999", headers=admin_headers)
    assert resp.status_code == 404


@pytest.mark.anyio
async def test_admin_cannot_delete_self(async_client, admin_headers):
    resp = await async_client.delete("/api/v1/admin/users/1", headers=admin_headers)
    assert resp.status_code == 400


@pytest.mark.anyio
async def test_delete_user_removes_their_inspections(async_client, admin_headers, petugas_headers, db_session):
    resp = await async_client.post("/api/v1/apars", json=apar_payload(), headers=petugas_headers)
    apar_id = resp.json()["id"]
    resp = await async_client.post(
        "/api/v1/inspections", json=inspection_payload(apar_id), headers=petugas_headers
    )
    inspection_id = resp.json()["id"]

    resp = await async_client.delete("/api/v1/admin/users/2", headers=admin_headers)
    assert resp.status_code == 204

    resp = await async_client.get("/api/v1/admin/users/2", headers=admin_headers)
    assert resp.status_code == 404

    inspections = await db_session.execute(select(func.count(Inspection.id)))
    items = await db_session.execute(
        select(func.count(InspectionItem.id)).where(InspectionItem.inspection_id == inspection_id)
    )
    assert inspections.scalar() == 0
    assert items.scalar() == 0

    # The APAR itself stays
    resp = await async_client.get(f"/api/v1/apars/{apar_id}", headers=admin_headers)
    assert resp.status_code == 200
