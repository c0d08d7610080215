"""Local filesystem blob storage backend."""

import logging
from pathlib import Path
from typing import Optional, Union

import aiofiles
import aiofiles.os

from sheetlens.core.exceptions import BlobStorageException
from sheetlens.storage.base import BlobInfo, BlobStore

logger = logging.getLogger(__name__)


class LocalBlobStore(BlobStore):
    """
    Stores blobs under a base directory, preserving the path structure
    (uploads/<ownerId>/<fileId>_<name>).
    """

    def __init__(self, base_path: Union[str, Path] = "uploads"):
        self.base_path = Path(base_path).resolve()

    def _resolve_path(self, path: str) -> Path:
        clean_path = Path(path).as_posix().lstrip("/")
        full_path = (self.base_path / clean_path).resolve()
        try:
            full_path.relative_to(self.base_path)
        except ValueError:
            raise ValueError(f"Invalid path: {path} (outside base directory)")
        return full_path

    async def write(self, path: str, content: bytes, content_type: Optional[str] = None) -> BlobInfo:
        full_path = self._resolve_path(path)
        try:
            full_path.parent.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(full_path, "wb") as f:
                await f.write(content)
        except OSError as e:
            logger.error(f"❌ Failed to save blob {path}: {e}")
            raise BlobStorageException(f"Failed to save file: {e}") from e

        logger.info(f"✅ Blob saved to disk: {full_path} ({len(content)} bytes)")
        return BlobInfo(path=path, size_bytes=len(content), content_type=content_type)

    async def read(self, path: str) -> bytes:
        full_path = self._resolve_path(path)
        if not await aiofiles.os.path.exists(full_path):
            raise FileNotFoundError(f"Blob not found: {path}")
        try:
            async with aiofiles.open(full_path, "rb") as f:
                return await f.read()
        except OSError as e:
            raise BlobStorageException(f"Failed to read file: {e}") from e

    async def exists(self, path: str) -> bool:
        return await aiofiles.os.path.isfile(self._resolve_path(path))

    async def delete(self, path: str) -> bool:
        full_path = self._resolve_path(path)
        if not await aiofiles.os.path.exists(full_path):
            return False
        try:
            await aiofiles.os.remove(full_path)
        except OSError as e:
            raise BlobStorageException(f"Failed to delete file: {e}") from e
        logger.info(f"🗑️ Deleted blob: {path}")
        return True
