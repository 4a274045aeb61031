#!/usr/bin/env python3
"""Create or reset an ops user with a properly hashed password."""

import asyncio

from sqlalchemy import select

from app.config import get_settings
from app.core.security import get_password_hash
from app.database import create_engine, create_session_factory, session_scope
from app.models.user import OpsUser


async def create_ops_user(
    email: str = "admin@globalbeauty.com",
    password: str = "Admin@1234",
    name: str = "Ops Admin",
    role: str = "admin",
) -> None:
    """Create an ops user if it doesn't exist, otherwise reset it."""
    engine = create_engine(get_settings())
    try:
        async with session_scope(create_session_factory(engine)) as session:
            result = await session.execute(
                select(OpsUser).where(OpsUser.email == email.lower())
            )
            existing = result.scalar_one_or_none()

            if existing:
                existing.password_hash = get_password_hash(password)
                existing.role = role
                existing.name = name
                existing.is_active = True
                print(f"Updated existing ops user: {email}")
            else:
                session.add(
                    OpsUser(
                        email=email.lower(),
                        name=name,
                        password_hash=get_password_hash(password),
                        role=role,
                        is_active=True,
                    )
                )
                print(f"Created ops user: {email}")
    finally:
        await engine.dispose()

    print(f"Email: {email}")
    print(f"Role: {role}")


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Create an ops user")
    parser.add_argument("--email", default="admin@globalbeauty.com", help="Ops user email")
    parser.add_argument("--password", default="Admin@1234", help="Ops user password")
    parser.add_argument("--name", default="Ops Admin", help="Display name")
    parser.add_argument("--role", default="admin", choices=["admin", "operator"], help="Role")

    args = parser.parse_args()

    asyncio.run(
        create_ops_user(
            email=args.email,
            password=args.password,
            name=args.name,
            role=args.role,
        )
    )
