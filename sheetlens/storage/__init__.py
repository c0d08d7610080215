# sheetlens/storage/__init__.py
from sheetlens.core.config import Settings
from sheetlens.storage.base import BlobInfo, BlobStore
from sheetlens.storage.local import LocalBlobStore
from sheetlens.storage.memory import MemoryBlobStore


def build_blob_store(settings: Settings) -> BlobStore:
    backend = settings.BLOB_BACKEND.lower()
    if backend == "memory":
        return MemoryBlobStore()
    if backend == "local":
        return LocalBlobStore(settings.get_upload_dir())
    if backend == "supabase":
        from sheetlens.storage.supabase import SupabaseBlobStore
        return SupabaseBlobStore(
            settings.SUPABASE_URL,
            settings.SUPABASE_SERVICE_ROLE_KEY,
            settings.STORAGE_BUCKET,
            timeout=settings.SUPABASE_TIMEOUT_SECONDS
        )
    raise ValueError(f"Unknown BLOB_BACKEND: {settings.BLOB_BACKEND}")


__all__ = [
    "BlobInfo",
    "BlobStore",
    "LocalBlobStore",
    "MemoryBlobStore",
    "build_blob_store",
]
