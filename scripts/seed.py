#!/usr/bin/env python
"""
Seed accounts for a fresh database.

Scenarios:
    admin  the bootstrap administrator from SEED_ADMIN_EMAIL / SEED_ADMIN_PASSWORD
    demo   the administrator plus one account per role, for local testing
"""

import argparse
import asyncio
import sys


# Add src to path for imports
sys.path.insert(0, "src")

from communiserver.config import settings
from communiserver.core.auth.backend import hash_password
from communiserver.core.database.session import async_session_factory
from communiserver.core.permissions.catalog import UserRole
from communiserver.modules.users.models import User
from communiserver.modules.users.repos import UserRepository


DEMO_ACCOUNTS = [
    ("cell.leader@demo.communiserver.rw", "Demo Cell Leader", UserRole.CELL_LEADER),
    ("village.leader@demo.communiserver.rw", "Demo Village Leader", UserRole.VILLAGE_LEADER),
    ("isibo.leader@demo.communiserver.rw", "Demo Isibo Leader", UserRole.ISIBO_LEADER),
    ("house.rep@demo.communiserver.rw", "Demo House Representative", UserRole.HOUSE_REPRESENTATIVE),
    ("citizen@demo.communiserver.rw", "Demo Citizen", UserRole.CITIZEN),
]


async def ensure_user(
    repo: UserRepository,
    email: str,
    names: str,
    password: str,
    role: UserRole,
) -> bool:
    """Create the user unless the email is taken. Returns True when created."""
    existing = await repo.get_by_email(email)
    if existing:
        print(f"User already exists: {existing.email} ({existing.role})")
        return False

    await repo.create(
        User(
            email=email.lower(),
            names=names,
            password_hash=hash_password(password),
            role=role,
            is_active=True,
        )
    )
    print(f"Created user: {email} ({role})")
    return True


async def seed_admin() -> None:
    """Create the bootstrap administrator."""
    if not settings.seed_admin_enabled:
        print("Admin seeding disabled (SEED_ADMIN_ENABLED=false)")
        return
    if not settings.seed_admin_email or not settings.seed_admin_password:
        print("SEED_ADMIN_EMAIL and SEED_ADMIN_PASSWORD must be set")
        sys.exit(1)

    async with async_session_factory() as session:
        repo = UserRepository(session)
        await ensure_user(
            repo,
            settings.seed_admin_email,
            "Administrator",
            settings.seed_admin_password,
            UserRole.ADMIN,
        )
        await session.commit()


async def seed_demo(password: str) -> None:
    """Create the administrator and one demo account per role."""
    await seed_admin()

    async with async_session_factory() as session:
        repo = UserRepository(session)
        for email, names, role in DEMO_ACCOUNTS:
            await ensure_user(repo, email, names, password, role)
        await session.commit()


async def main(scenario: str, password: str) -> None:
    """Run the seeding based on scenario."""
    if scenario == "admin":
        await seed_admin()
    elif scenario == "demo":
        if settings.is_production:
            print("Refusing to create demo accounts in production")
            sys.exit(1)
        await seed_demo(password)
    else:
        print(f"Unknown scenario: {scenario}")
        print("Available scenarios: admin, demo")
        sys.exit(1)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed database with accounts")
    parser.add_argument(
        "--scenario",
        "-s",
        default="admin",
        help="Seed scenario to run (admin, demo)",
    )
    parser.add_argument(
        "--password",
        "-p",
        default="demo-password",
        help="Password for demo accounts",
    )
    args = parser.parse_args()

    asyncio.run(main(args.scenario, args.password))
