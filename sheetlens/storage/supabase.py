"""
Supabase Storage blob backend
Talks to the Storage REST API with the service-role key
"""
import logging
from typing import Optional
from urllib.parse import quote

import httpx

from sheetlens.core.exceptions import BlobStorageException
from sheetlens.storage.base import BlobInfo, BlobStore

logger = logging.getLogger(__name__)


class SupabaseBlobStore(BlobStore):
    """Private bucket in Supabase Storage, created on first write if missing."""

    def __init__(
            self,
            supabase_url: str,
            service_role_key: str,
            bucket: str,
            *,
            timeout: float = 10.0,
            client: Optional[httpx.AsyncClient] = None
    ):
        if not supabase_url or not service_role_key:
            raise ValueError("SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY are required for supabase storage")
        self.bucket = bucket
        self._bucket_ready = False
        self._client = client or httpx.AsyncClient(
            base_url=supabase_url.rstrip("/"),
            headers={
                "apikey": service_role_key,
                "Authorization": f"Bearer {service_role_key}",
            },
            timeout=timeout,
        )

    def _object_url(self, path: str) -> str:
        return f"/storage/v1/object/{quote(self.bucket, safe='')}/{quote(path, safe='/')}"

    async def _ensure_bucket(self) -> None:
        if self._bucket_ready:
            return
        response = await self._client.get("/storage/v1/bucket")
        response.raise_for_status()
        if not any(b.get("name") == self.bucket for b in response.json()):
            logger.info(f"🪣 Creating storage bucket: {self.bucket}")
            created = await self._client.post(
                "/storage/v1/bucket",
                json={"id": self.bucket, "name": self.bucket, "public": False},
            )
            # Concurrent creators race here; "already exists" is fine
            if created.status_code >= 400 and "exist" not in created.text.lower():
                created.raise_for_status()
        self._bucket_ready = True

    async def write(self, path: str, content: bytes, content_type: Optional[str] = None) -> BlobInfo:
        try:
            await self._ensure_bucket()
            response = await self._client.post(
                self._object_url(path),
                content=content,
                headers={
                    "Content-Type": content_type or "application/octet-stream",
                    "x-upsert": "false",
                },
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(f"❌ File upload error for {path}: {e}")
            raise BlobStorageException(f"File upload failed: {e}") from e

        logger.info(f"✅ Blob uploaded to bucket {self.bucket}: {path}")
        return BlobInfo(path=path, size_bytes=len(content), content_type=content_type)

    async def read(self, path: str) -> bytes:
        try:
            response = await self._client.get(self._object_url(path))
        except httpx.HTTPError as e:
            raise BlobStorageException(f"File download failed: {e}") from e
        if response.status_code in (400, 404):
            raise FileNotFoundError(f"Blob not found: {path}")
        if response.status_code >= 400:
            raise BlobStorageException(f"File download failed: HTTP {response.status_code}")
        return response.content

    async def exists(self, path: str) -> bool:
        try:
            response = await self._client.head(self._object_url(path))
        except httpx.HTTPError as e:
            raise BlobStorageException(f"File lookup failed: {e}") from e
        return response.status_code == 200

    async def delete(self, path: str) -> bool:
        try:
            response = await self._client.request(
                "DELETE",
                f"/storage/v1/object/{quote(self.bucket, safe='')}",
                json={"prefixes": [path]},
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise BlobStorageException(f"File delete failed: {e}") from e
        return bool(response.json())

    async def close(self) -> None:
        await self._client.aclose()
