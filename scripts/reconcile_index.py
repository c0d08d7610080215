#!/usr/bin/env python3
# scripts/reconcile_index.py
import asyncio
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from sheetlens.core.config import settings
from sheetlens.core.logging import setup_logging
from sheetlens.services.reconcile import reconcile_ownership_index
from sheetlens.store import build_metadata_store


async def reconcile():
    """Rebuild user_files: index entries from the canonical file: records"""
    if settings.METADATA_STORE.lower() == "memory":
        print("❌ METADATA_STORE=memory has nothing persistent to reconcile")
        return 1

    store = build_metadata_store(settings)
    await store.init()
    try:
        report = await reconcile_ownership_index(store)
    finally:
        await store.close()

    print("✅ Ownership index reconciled")
    print(f"Checked:  {report.checked}")
    print(f"Repaired: {report.repaired}")
    print(f"Removed:  {report.removed}")
    print(f"Skipped:  {report.skipped}")
    return 0


if __name__ == "__main__":
    setup_logging()
    sys.exit(asyncio.run(reconcile()))
