# sheetlens/services/access.py
import logging

from sheetlens.auth.base import Principal
from sheetlens.core.exceptions import AccessDeniedException, NotFoundException
from sheetlens.observability.context import file_id_ctx
from sheetlens.schemas.file import FileRecord
from sheetlens.store import keys
from sheetlens.store.base import MetadataStore

logger = logging.getLogger(__name__)


async def get_owned_file(store: MetadataStore, principal: Principal, file_id: str) -> FileRecord:
    """
    Load the canonical FileRecord and verify the principal owns it.

    Raises NotFoundException when no canonical record exists and
    AccessDeniedException when it belongs to someone else.
    """
    try:
        key = keys.file_key(file_id)
    except ValueError:
        raise NotFoundException("File not found")

    file_id_ctx.set(file_id)
    value = await store.get(key)
    if value is None:
        raise NotFoundException("File not found")

    record = FileRecord.model_validate(value)
    if record.user_id != principal.user_id:
        logger.warning(f"⚠️ Access denied: user {principal.user_id} requested file {file_id}")
        raise AccessDeniedException()
    return record
