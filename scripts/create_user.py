#!/usr/bin/env python3
# scripts/create_user.py
import argparse
import asyncio
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from sheetlens.auth import build_identity_provider
from sheetlens.core.config import settings
from sheetlens.core.exceptions import ValidationException
from sheetlens.store import build_metadata_store


async def create_user(email: str, password: str, name: str) -> int:
    """Create an account with the configured identity provider"""
    store = build_metadata_store(settings)
    await store.init()
    identity = build_identity_provider(settings, store)
    try:
        user = await identity.create_user(email=email, password=password, name=name)
    except ValidationException as e:
        print(f"❌ {e.detail}")
        return 1
    finally:
        await identity.close()
        await store.close()

    print("✅ User created!")
    print(f"Id:    {user.id}")
    print(f"Email: {user.email}")
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Create a SheetLens user")
    parser.add_argument("email")
    parser.add_argument("password")
    parser.add_argument("--name", default="SheetLens User")
    args = parser.parse_args()
    sys.exit(asyncio.run(create_user(args.email, args.password, args.name)))
