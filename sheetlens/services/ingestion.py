"""
File Ingestion Service
Validates spreadsheet uploads, stores the bytes, then writes the canonical
record and the ownership index entry
"""
import logging
from datetime import datetime, timezone
from typing import List, Optional
from uuid import uuid4

from sheetlens.auth.base import Principal
from sheetlens.core.config import Settings
from sheetlens.core.exceptions import ValidationException
from sheetlens.observability.context import file_id_ctx
from sheetlens.observability.metrics import inc_counter
from sheetlens.schemas.file import FileRecord
from sheetlens.storage.base import BlobStore
from sheetlens.store import keys
from sheetlens.store.base import MetadataStore

logger = logging.getLogger(__name__)


def display_name_for(file_name: Optional[str]) -> str:
    """Client-supplied name reduced to its base name (browsers may send full paths)."""
    return (file_name or "").replace("\\", "/").rsplit("/", 1)[-1].strip()


class FileIngestionService:

    def __init__(self, store: MetadataStore, blobs: BlobStore, settings: Settings):
        self.store = store
        self.blobs = blobs
        self.settings = settings

    def validate(self, file_name: Optional[str], content_type: Optional[str], size: Optional[int]) -> str:
        """
        Check the declared type and size; returns the display name.

        `size` may be None when the transport does not know it yet; the
        ingest() call checks the real byte count again.
        """
        display_name = display_name_for(file_name)
        if not display_name:
            raise ValidationException("No file provided")

        if not self.settings.is_file_supported(display_name, content_type):
            inc_counter("upload_rejected_total", reason="type")
            logger.warning(f"⚠️ Rejected upload {display_name!r}: unsupported type {content_type!r}")
            raise ValidationException("Please select a valid Excel file (.xls or .xlsx)")

        if size is not None and size > self.settings.max_filesize_bytes:
            inc_counter("upload_rejected_total", reason="size")
            logger.warning(f"⚠️ Rejected upload {display_name!r}: {size} bytes")
            raise ValidationException(
                f"File size must be less than {self.settings.MAX_FILESIZE_MB}MB"
            )
        return display_name

    async def ingest(
            self,
            principal: Principal,
            content: bytes,
            file_name: Optional[str],
            content_type: Optional[str]
    ) -> FileRecord:
        """
        Store an uploaded spreadsheet for the principal.

        Order is fixed: blob, canonical record, ownership index entry. A
        failure after the blob write leaves a harmless orphan blob; a failure
        between the two metadata writes is repaired by
        services.reconcile.reconcile_ownership_index.
        """
        display_name = self.validate(file_name, content_type, len(content))

        file_id = str(uuid4())
        file_id_ctx.set(file_id)
        storage_path = f"{principal.user_id}/{file_id}_{display_name}"

        logger.info(f"📤 Uploading file: {display_name} ({len(content)} bytes) as {file_id}")
        await self.blobs.write(storage_path, content, content_type)

        record = FileRecord(
            id=file_id,
            user_id=principal.user_id,
            file_name=display_name,
            original_name=display_name,
            storage_path=storage_path,
            uploaded_at=datetime.now(timezone.utc),
            size=len(content),
            type=content_type or ""
        )
        value = record.to_store()

        await self.store.put(keys.file_key(file_id), value)
        logger.info(f"✅ File record written: {file_id}")
        await self.store.put(keys.user_file_key(principal.user_id, file_id), value)
        logger.info(f"✅ Ownership index written: {principal.user_id}/{file_id}")

        inc_counter("files_uploaded_total")
        return record

    async def list_files(self, principal: Principal) -> List[FileRecord]:
        """All files of the principal, via a prefix scan of its ownership index."""
        values = await self.store.scan_prefix(keys.user_files_prefix(principal.user_id))
        return [FileRecord.model_validate(value) for value in values]
