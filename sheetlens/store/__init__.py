# sheetlens/store/__init__.py
from sheetlens.core.config import Settings
from sheetlens.store.base import MetadataStore, Record
from sheetlens.store.memory import MemoryMetadataStore


def build_metadata_store(settings: Settings) -> MetadataStore:
    backend = settings.METADATA_STORE.lower()
    if backend == "memory":
        return MemoryMetadataStore()
    if backend == "sql":
        from sheetlens.store.sql import SQLMetadataStore
        return SQLMetadataStore(
            settings.DATABASE_URL,
            table_name=settings.KV_TABLE_NAME,
            echo=settings.LOG_LEVEL.upper() == "DEBUG"
        )
    raise ValueError(f"Unknown METADATA_STORE: {settings.METADATA_STORE}")


__all__ = [
    "MetadataStore",
    "Record",
    "MemoryMetadataStore",
    "build_metadata_store",
]
