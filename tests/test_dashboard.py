from datetime import date

import pytest

from api.apars.db_manager import create_apar
from api.dashboard import db_manager
from api.inspections.db_manager import create_inspection
from conftest import apar_payload, checklist, inspection_payload

TODAY = date(2025, 6, 15)


async def _seed(db_session):
    expired = await create_apar(
        db_session, apar_payload(number="APAR-001", fill_date="2023-06-01", expiry_date="2025-06-01")
    )
    expiring = await create_apar(
        db_session, apar_payload(number="APAR-002", fill_date="2023-07-15", expiry_date="2025-07-15")
    )
    await create_apar(
        db_session,
        apar_payload(number="APAR-003", status="maintenance", fill_date="2025-01-01", expiry_date="2027-01-01"),
    )

    for apar, day in [
        (expired, date(2024, 12, 31)),
        (expired, date(2025, 1, 10)),
        (expiring, date(2025, 3, 5)),
        (expiring, date(2025, 3, 20)),
    ]:
        await create_inspection(
            db_session,
            inspector_id=2,
            apar_id=apar.id,
            inspection_date=day,
            items=checklist(),
        )


@pytest.mark.anyio
async def test_apar_stats(db_session):
    await _seed(db_session)

    stats = await db_manager.get_apar_stats(db_session, TODAY)

    assert stats == {
        "total_apars": 3,
        "active_apars": 2,
        "expired_apars": 1,
        "expiring_soon": 1,
    }


@pytest.mark.anyio
async def test_expiring_window_excludes_day_ninety(db_session):
    await create_apar(
        db_session, apar_payload(number="APAR-090", fill_date="2024-01-01", expiry_date="2025-09-13")
    )
    await create_apar(
        db_session, apar_payload(number="APAR-089", fill_date="2024-01-01", expiry_date="2025-09-12")
    )

    stats = await db_manager.get_apar_stats(db_session, TODAY)

    # TODAY + 90 days is 2025-09-13
    assert stats["expiring_soon"] == 1


@pytest.mark.anyio
async def test_monthly_inspections_only_current_year(db_session):
    await _seed(db_session)

    monthly = await db_manager.get_monthly_inspections(db_session, TODAY)

    assert monthly == [{"month": 1, "count": 1}, {"month": 3, "count": 2}]


@pytest.mark.anyio
async def test_status_distribution(db_session):
    await _seed(db_session)

    distribution = await db_manager.get_status_distribution(db_session)

    assert {d["status"]: d["count"] for d in distribution} == {"active": 2, "maintenance": 1}


@pytest.mark.anyio
async def test_recent_inspections_latest_date_first(db_session):
    await _seed(db_session)

    recent = await db_manager.get_recent_inspections(db_session, limit=3)

    assert [i.inspection_date for i in recent] == [
        date(2025, 3, 20),
        date(2025, 3, 5),
        date(2025, 1, 10),
    ]
    assert recent[0].apar.number == "APAR-002"


@pytest.mark.anyio
async def test_dashboard_endpoint(async_client, petugas_headers):
    resp = await async_client.post("/api/v1/apars", json=apar_payload(), headers=petugas_headers)
    apar_id = resp.json()["id"]
    resp = await async_client.post(
        "/api/v1/inspections", json=inspection_payload(apar_id), headers=petugas_headers
    )
    assert resp.status_code == 201, resp.text

    resp = await async_client.get("/api/v1/dashboard", headers=petugas_headers)
    assert resp.status_code == 200, resp.text
    data = resp.json()
    assert data["stats"]["total_apars"] == 1
    assert data["stats"]["active_apars"] == 1
    assert len(data["recent_inspections"]) == 1
    assert data["recent_inspections"][0]["apar"]["number"] == "APAR-001"
    assert data["apar_status_distribution"] == [
        {"status": "active", "count": 1, "status_label": "Aktif"}
    ]


@pytest.mark.anyio
async def test_dashboard_requires_authentication(async_client):
    resp = await async_client.get("/api/v1/dashboard")
    assert resp.status_code == 401
