"""
Ownership index reconciliation
The canonical `file:` records are the source of truth; `user_files:` entries are
rebuilt from them and dangling entries are dropped.
"""
import logging
from dataclasses import dataclass, asdict
from typing import Dict

from sheetlens.store import keys
from sheetlens.store.base import MetadataStore, Record

logger = logging.getLogger(__name__)


@dataclass
class ReconcileReport:
    checked: int = 0
    repaired: int = 0
    removed: int = 0
    skipped: int = 0

    def as_dict(self) -> Dict[str, int]:
        return asdict(self)


async def _is_dangling(store: MetadataStore, index_key: str) -> bool:
    """An index entry is dangling when its canonical record is absent or owned by someone else right now."""
    parts = keys.split_key(index_key)
    if len(parts) != 3:
        return True
    try:
        canonical = await store.get(keys.file_key(parts[2]))
    except ValueError:
        return True
    return canonical is None or canonical.get("userId") != parts[1]


async def reconcile_ownership_index(store: MetadataStore) -> ReconcileReport:
    """
    Bring the ownership index back in line with the canonical records.

    Safe to run while the service is live: a racing upload only ever writes the
    same value this job would write, and an index entry is deleted only after
    its canonical record is re-read and found missing or reassigned.
    """
    report = ReconcileReport()

    canonical: Dict[str, Record] = {}
    for key, value in await store.scan_prefix_items(keys.build_prefix(keys.FILE)):
        if value.get("id") and value.get("userId"):
            canonical[value["id"]] = value
        else:
            report.skipped += 1
            logger.warning(f"⚠️ Skipping malformed file record {key}")

    for file_id, value in canonical.items():
        try:
            index_key = keys.user_file_key(value["userId"], file_id)
        except ValueError as e:
            report.skipped += 1
            logger.warning(f"⚠️ Skipping file record {file_id}: {e}")
            continue

        report.checked += 1
        if await store.get(index_key) != value:
            await store.put(index_key, value)
            report.repaired += 1
            logger.info(f"🔧 Rebuilt index entry {index_key}")

    # Uploads may land between the two scans, so every candidate is re-checked
    for key, _ in await store.scan_prefix_items(keys.build_prefix(keys.USER_FILES)):
        if await _is_dangling(store, key):
            await store.delete(key)
            report.removed += 1
            logger.info(f"🗑️ Removed dangling index entry {key}")

    logger.info(f"✅ Reconciliation finished: {report.as_dict()}")
    return report
