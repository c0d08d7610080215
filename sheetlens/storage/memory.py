"""In-memory blob storage backend."""

from threading import Lock
from typing import Dict, Optional, Tuple

from sheetlens.storage.base import BlobInfo, BlobStore


class MemoryBlobStore(BlobStore):
    """Keeps blobs in a dict; used by tests and demo deployments."""

    def __init__(self):
        self._blobs: Dict[str, Tuple[bytes, Optional[str]]] = {}
        self._lock = Lock()

    async def write(self, path: str, content: bytes, content_type: Optional[str] = None) -> BlobInfo:
        with self._lock:
            self._blobs[path] = (bytes(content), content_type)
        return BlobInfo(path=path, size_bytes=len(content), content_type=content_type)

    async def read(self, path: str) -> bytes:
        with self._lock:
            if path not in self._blobs:
                raise FileNotFoundError(f"Blob not found: {path}")
            return self._blobs[path][0]

    async def exists(self, path: str) -> bool:
        with self._lock:
            return path in self._blobs

    async def delete(self, path: str) -> bool:
        with self._lock:
            return self._blobs.pop(path, None) is not None

    def __len__(self) -> int:
        return len(self._blobs)
