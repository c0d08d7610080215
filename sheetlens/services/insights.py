"""
Insight Generator
(Re)computes the insight summary of a file and republishes it as the file's
current record
"""
import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, List, Optional
from uuid import uuid4

from sheetlens.auth.base import Principal
from sheetlens.core.exceptions import InternalErrorException, NotFoundException
from sheetlens.observability.metrics import inc_counter
from sheetlens.schemas.file import FileRecord
from sheetlens.schemas.insight import InsightRecord
from sheetlens.services.access import get_owned_file
from sheetlens.store import keys
from sheetlens.store.base import MetadataStore

logger = logging.getLogger(__name__)

MIN_INSIGHTS = 3
MAX_INSIGHTS = 6


class InsightStrategy(ABC):
    """Produces natural-language insights for a file"""

    @abstractmethod
    async def generate(self, file: FileRecord, data: Optional[Any] = None) -> List[str]:
        pass


class SampleInsightStrategy(InsightStrategy):
    """Fixed sample output until a real analysis backend is wired in"""

    INSIGHTS = [
        "Your data shows a strong upward trend over time",
        "Peak performance occurs in Q3 consistently",
        "There's a 23% correlation between variables A and B",
        "Seasonal patterns suggest planning for Q4 dips",
    ]

    async def generate(self, file: FileRecord, data: Optional[Any] = None) -> List[str]:
        return list(self.INSIGHTS)


class InsightGenerator:

    def __init__(self, store: MetadataStore, strategy: InsightStrategy):
        self.store = store
        self.strategy = strategy

    async def generate(self, principal: Principal, file_id: str, data: Optional[Any] = None) -> InsightRecord:
        """
        Mint a new InsightRecord and make it the file's current one.

        Every call gets a fresh id; readers must go through current() (the
        per-file key) rather than remember an id.
        """
        file = await get_owned_file(self.store, principal, file_id)

        insights = [text.strip() for text in await self.strategy.generate(file, data) if text and text.strip()]
        if not MIN_INSIGHTS <= len(insights) <= MAX_INSIGHTS:
            logger.error(f"❌ {type(self.strategy).__name__} returned {len(insights)} insights for {file_id}")
            raise InternalErrorException("Insight generation failed")

        record = InsightRecord(
            id=str(uuid4()),
            file_id=file.id,
            user_id=principal.user_id,
            insights=insights,
            generated_at=datetime.now(timezone.utc)
        )
        value = record.to_store()

        await self.store.put(keys.insight_key(record.id), value)
        await self.store.put(keys.file_insights_key(file.id), value)

        inc_counter("insights_generated_total")
        logger.info(f"✅ Insights regenerated for {file.id}: {record.id} ({len(insights)} items)")
        return record

    async def current(self, principal: Principal, file_id: str) -> InsightRecord:
        """The file's current InsightRecord, read through the per-file key"""
        file = await get_owned_file(self.store, principal, file_id)
        value = await self.store.get(keys.file_insights_key(file.id))
        if value is None:
            raise NotFoundException("No insights generated for this file yet")
        return InsightRecord.model_validate(value)
