"""
Service wiring
Every collaborator is built here and handed to the app explicitly
"""
import logging
from dataclasses import dataclass
from typing import Optional

from sheetlens.auth import IdentityProvider, build_identity_provider
from sheetlens.core.config import Settings
from sheetlens.services.chart import (
    ChartDataProvider,
    ChartDataStrategy,
    SampleChartDataStrategy,
    SpreadsheetChartDataStrategy,
)
from sheetlens.services.ingestion import FileIngestionService
from sheetlens.services.insights import InsightGenerator, InsightStrategy, SampleInsightStrategy
from sheetlens.storage import BlobStore, build_blob_store
from sheetlens.store import MetadataStore, build_metadata_store

logger = logging.getLogger(__name__)


@dataclass
class Services:
    settings: Settings
    store: MetadataStore
    blobs: BlobStore
    identity: IdentityProvider
    ingestion: FileIngestionService
    insights: InsightGenerator
    charts: ChartDataProvider

    async def startup(self) -> None:
        await self.store.init()

    async def shutdown(self) -> None:
        await self.identity.close()
        await self.blobs.close()
        await self.store.close()


def build_insight_strategy(settings: Settings) -> InsightStrategy:
    if settings.INSIGHTS_STRATEGY.lower() == "sample":
        return SampleInsightStrategy()
    raise ValueError(f"Unknown INSIGHTS_STRATEGY: {settings.INSIGHTS_STRATEGY}")


def build_chart_strategy(settings: Settings, blobs: BlobStore) -> ChartDataStrategy:
    strategy = settings.CHART_DATA_STRATEGY.lower()
    if strategy == "sample":
        return SampleChartDataStrategy()
    if strategy == "spreadsheet":
        return SpreadsheetChartDataStrategy(blobs)
    raise ValueError(f"Unknown CHART_DATA_STRATEGY: {settings.CHART_DATA_STRATEGY}")


def build_services(
        settings: Settings,
        *,
        store: Optional[MetadataStore] = None,
        blobs: Optional[BlobStore] = None,
        identity: Optional[IdentityProvider] = None,
        insight_strategy: Optional[InsightStrategy] = None,
        chart_strategy: Optional[ChartDataStrategy] = None
) -> Services:
    if store is None:
        store = build_metadata_store(settings)
    if blobs is None:
        blobs = build_blob_store(settings)
    if identity is None:
        identity = build_identity_provider(settings, store)
    if insight_strategy is None:
        insight_strategy = build_insight_strategy(settings)
    if chart_strategy is None:
        chart_strategy = build_chart_strategy(settings, blobs)

    services = Services(
        settings=settings,
        store=store,
        blobs=blobs,
        identity=identity,
        ingestion=FileIngestionService(store, blobs, settings),
        insights=InsightGenerator(store, insight_strategy),
        charts=ChartDataProvider(store, chart_strategy),
    )
    logger.info(
        f"🔧 Services: store={type(store).__name__}, blobs={type(blobs).__name__}, "
        f"identity={type(identity).__name__}"
    )
    return services
