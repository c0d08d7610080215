"""
Chart Data Provider
Returns the full tabular projection of an owned file
"""
import asyncio
import io
import logging
from abc import ABC, abstractmethod
from typing import Any, Optional

from sheetlens.auth.base import Principal
from sheetlens.core.exceptions import FileProcessingException
from sheetlens.schemas.chart import ChartDataset, Scalar
from sheetlens.schemas.file import FileRecord
from sheetlens.services.access import get_owned_file
from sheetlens.storage.base import BlobStore
from sheetlens.store.base import MetadataStore

logger = logging.getLogger(__name__)


class ChartDataStrategy(ABC):
    """Projects a stored file into columns and rows"""

    @abstractmethod
    async def extract(self, file: FileRecord) -> ChartDataset:
        pass


class SampleChartDataStrategy(ChartDataStrategy):
    """Fixed sample dataset until real spreadsheet parsing is enabled"""

    COLUMNS = ["Month", "Sales", "Profit", "Customers"]
    ROWS = [
        {"Month": "Jan", "Sales": 4000, "Profit": 2400, "Customers": 240},
        {"Month": "Feb", "Sales": 3000, "Profit": 1398, "Customers": 221},
        {"Month": "Mar", "Sales": 2000, "Profit": 9800, "Customers": 229},
        {"Month": "Apr", "Sales": 2780, "Profit": 3908, "Customers": 200},
        {"Month": "May", "Sales": 1890, "Profit": 4800, "Customers": 218},
        {"Month": "Jun", "Sales": 2390, "Profit": 3800, "Customers": 250},
    ]

    async def extract(self, file: FileRecord) -> ChartDataset:
        return ChartDataset(columns=list(self.COLUMNS), rows=[dict(row) for row in self.ROWS])


def _to_scalar(value: Any) -> Scalar:
    # NaN and NaT are the only cell values unequal to themselves
    if value is None or value != value:
        return None
    if hasattr(value, "isoformat"):
        return value.isoformat()
    if hasattr(value, "item"):
        # numpy scalar
        return _to_scalar(value.item())
    if isinstance(value, (str, int, float, bool)):
        return value
    return str(value)


class SpreadsheetChartDataStrategy(ChartDataStrategy):
    """
    Reads the first worksheet of the stored blob with pandas: header row gives
    the column order, each following row becomes a record.
    """

    def __init__(self, blobs: BlobStore, max_rows: Optional[int] = None):
        self.blobs = blobs
        self.max_rows = max_rows

    def _parse(self, content: bytes) -> ChartDataset:
        import pandas as pd

        try:
            df = pd.read_excel(io.BytesIO(content), sheet_name=0, nrows=self.max_rows)
        except Exception as e:
            raise FileProcessingException(f"Could not read spreadsheet: {e}") from e

        columns = [str(c) for c in df.columns]
        rows = [
            {column: _to_scalar(value) for column, value in zip(columns, values)}
            for values in df.itertuples(index=False, name=None)
        ]
        return ChartDataset(columns=columns, rows=rows)

    async def extract(self, file: FileRecord) -> ChartDataset:
        try:
            content = await self.blobs.read(file.storage_path)
        except FileNotFoundError:
            raise FileProcessingException("Stored spreadsheet is missing")
        dataset = await asyncio.to_thread(self._parse, content)
        logger.info(f"📊 Parsed {file.id}: {len(dataset.columns)} columns, {len(dataset.rows)} rows")
        return dataset


class ChartDataProvider:

    def __init__(self, store: MetadataStore, strategy: ChartDataStrategy):
        self.store = store
        self.strategy = strategy

    async def get(self, principal: Principal, file_id: str) -> ChartDataset:
        file = await get_owned_file(self.store, principal, file_id)
        return await self.strategy.extract(file)
