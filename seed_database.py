"""Script to seed the database with sample users, APARs and inspections"""
import asyncio
from datetime import date

from sqlalchemy import select, func

from config import settings
from core.logging_config import setup_logging
from core.security import get_password_hash
from db import AsyncSessionLocal, init_db
from db_models.apar import Apar
from db_models.inspection_item import ItemType, ItemStatus
from db_models.user import User, UserRole
from api.apars.db_manager import create_apar
from api.inspections.db_manager import create_inspection

USERS = [
    {"name": "Administrator", "email": "admin@example.com", "password": "password", "role": UserRole.ADMIN.value},
    {"name": "Petugas APAR", "email": "petugas@example.com", "password": "password", "role": UserRole.PETUGAS.value},
]

APARS = [
    {
        "number": "APAR-001",
        "location": "Lantai 1 - Ruang Server",
        "type": "powder",
        "capacity": "6 kg",
        "fill_date": "2024-01-15",
        "expiry_date": "2026-01-15",
        "status": "active",
        "notes": "APAR untuk ruang server utama",
    },
    {
        "number": "APAR-002",
        "location": "Lantai 1 - Ruang Meeting",
        "type": "co2",
        "capacity": "5 kg",
        "fill_date": "2024-02-20",
        "expiry_date": "2026-02-20",
        "status": "active",
        "notes": "APAR CO2 untuk ruang meeting",
    },
    {
        "number": "APAR-003",
        "location": "Lantai 2 - Ruang Kerja",
        "type": "powder",
        "capacity": "6 kg",
        "fill_date": "2023-12-10",
        "expiry_date": "2025-12-10",
        "status": "active",
        "notes": "APAR untuk area kerja lantai 2",
    },
    {
        "number": "APAR-004",
        "location": "Lantai 2 - Ruang Break",
        "type": "foam",
        "capacity": "9 liter",
        "fill_date": "2024-03-05",
        "expiry_date": "2026-03-05",
        "status": "active",
        "notes": "APAR foam untuk dapur dan ruang break",
    },
    {
        "number": "APAR-005",
        "location": "Parkiran - Area Utama",
        "type": "powder",
        "capacity": "6 kg",
        "fill_date": "2023-11-15",
        "expiry_date": "2025-11-15",
        "status": "maintenance",
        "notes": "APAR di area parkiran, sedang dalam pemeliharaan",
    },
]

# Items flagged on the oldest sample inspection of every APAR
WORN_ITEMS = {ItemType.PRESSURE.value, ItemType.CLEANLINESS.value}


def months_ago(today: date, months: int) -> date:
    """Same day N months back, clamped to the 28th so every month has it."""
    month_index = today.year * 12 + (today.month - 1) - months
    return date(month_index // 12, month_index % 12 + 1, min(today.day, 28))


def sample_items(worn: bool) -> list[dict]:
    items = []
    for item_type in ItemType:
        status = ItemStatus.GOOD.value
        notes = None
        if worn and item_type.value in WORN_ITEMS:
            status = ItemStatus.NEEDS_REPAIR.value
        if worn and item_type is ItemType.PRESSURE:
            notes = "Tekanan sedikit menurun"
        items.append({"item_type": item_type.value, "status": status, "notes": notes})
    return items


async def seed_users(session) -> User:
    """Create the sample accounts if missing; return the officer."""
    officer = None
    for data in USERS:
        result = await session.execute(select(User).where(User.email == data["email"]))
        user = result.scalar_one_or_none()
        if user is None:
            user = User(
                name=data["name"],
                email=data["email"],
                role=data["role"],
                hashed_password=get_password_hash(data["password"]),
            )
            session.add(user)
            await session.commit()
            await session.refresh(user)
            print(f"  Added user: {user.email} ({user.role})")
        if user.role == UserRole.PETUGAS.value:
            officer = user
    return officer


async def seed_apars(session, inspector: User) -> None:
    """Create the sample APARs, each with four monthly inspections."""
    result = await session.execute(select(func.count(Apar.id)))
    existing_count = result.scalar() or 0
    if existing_count > 0:
        print(f"Database already has {existing_count} APARs, skipping")
        return

    today = date.today()
    for data in APARS:
        apar = await create_apar(session, data)
        print(f"  Added: {apar.number} - {apar.location}")

        for months_back in (3, 2, 1, 0):
            worn = months_back == 3
            await create_inspection(
                session,
                inspector_id=inspector.id,
                apar_id=apar.id,
                inspection_date=months_ago(today, months_back),
                items=sample_items(worn),
                digital_signature=f"Ttd. {inspector.name}",
                notes="Beberapa item perlu perhatian" if worn else "Semua item dalam kondisi baik",
            )


async def main() -> None:
    setup_logging(settings.LOG_LEVEL)
    print("Creating database tables...")
    await init_db()
    print("[OK] Tables created successfully")

    async with AsyncSessionLocal() as session:
        inspector = await seed_users(session)
        await seed_apars(session, inspector)

        result = await session.execute(select(func.count(Apar.id)))
        print(f"[OK] Total APARs in database: {result.scalar()}")


if __name__ == "__main__":
    print("=" * 60)
    print("DATABASE SEEDING SCRIPT")
    print("=" * 60)
    print(f"Database: {settings.DATABASE_URL}")
    print()

    asyncio.run(main())
    print("\n" + "=" * 60)
    print("[OK] Database setup complete!")
    print("=" * 60)
