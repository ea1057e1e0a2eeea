#!/usr/bin/env python3
"""
Create an approved admin account.

Run this from the backend directory with the APP_ environment available.

Usage: python create_admin.py "Full Name" admin@example.org 'password'
"""
import argparse
import asyncio

from rallypoint.api.users.models import UserRoles, UserStatus
from rallypoint.api.users.service import create_user
from rallypoint.db.core import AsyncSessionLocal, engine


async def create_admin(full_name: str, email: str, password: str):
    async with AsyncSessionLocal() as session:
        user = await create_user(
            session,
            full_name=full_name,
            email=email,
            password=password,
            role=UserRoles.admin,
            status=UserStatus.approved,
        )
    await engine.dispose()
    print(f"Created admin {user.email} (ID: {user.id})")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("full_name")
    parser.add_argument("email")
    parser.add_argument("password")
    args = parser.parse_args()
    asyncio.run(create_admin(args.full_name, args.email, args.password))
