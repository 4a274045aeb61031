#!/usr/bin/env python3
"""Seed a handful of clinics for local development."""

import asyncio

from sqlalchemy import select

from app.config import get_settings
from app.database import create_engine, create_session_factory, init_db, session_scope
from app.models.clinic import Clinic

CLINICS = [
    {
        "name": {"en": "Gangnam Glow Clinic", "ja": "江南グロウクリニック", "zh": "江南光彩诊所"},
        "address": {"en": "123 Teheran-ro, Gangnam-gu, Seoul"},
        "city": "seoul",
        "phone": "+82-2-555-0101",
        "languages": ["en", "ja", "zh"],
        "tags": ["skin", "laser"],
    },
    {
        "name": {"en": "Haeundae Derma", "ja": "海雲台ダーマ", "zh": "海云台皮肤科"},
        "address": {"en": "45 Haeundae-ro, Busan"},
        "city": "busan",
        "phone": "+82-51-555-0202",
        "languages": ["en", "ja"],
        "tags": ["skin"],
    },
    {
        "name": {"en": "Jeju Aesthetic Center"},
        "address": {"en": "7 Nohyeong-ro, Jeju"},
        "city": "jeju",
        "phone": "+82-64-555-0303",
        "languages": ["en"],
        "tags": ["botox", "filler"],
    },
]


async def seed_clinics(create_tables: bool = False) -> None:
    """Insert clinics whose English name is not already present."""
    engine = create_engine(get_settings())
    try:
        if create_tables:
            await init_db(engine)
        async with session_scope(create_session_factory(engine)) as session:
            existing = {
                clinic.localized("name")
                for clinic in (await session.execute(select(Clinic))).scalars()
            }
            for data in CLINICS:
                if data["name"]["en"] in existing:
                    print(f"Skipping existing clinic: {data['name']['en']}")
                    continue
                session.add(Clinic(**data))
                print(f"Created clinic: {data['name']['en']}")
    finally:
        await engine.dispose()


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Seed development clinics")
    parser.add_argument(
        "--create-tables", action="store_true", help="Create tables before seeding"
    )
    args = parser.parse_args()

    asyncio.run(seed_clinics(create_tables=args.create_tables))
