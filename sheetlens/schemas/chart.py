# sheetlens/schemas/chart.py
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field, model_validator

Scalar = Optional[Union[str, int, float, bool]]


class ChartDataset(BaseModel):
    """Tabular projection: ordered columns and rows keyed by column name."""
    columns: List[str]
    rows: List[Dict[str, Scalar]] = Field(default_factory=list, alias="data")

    class Config:
        populate_by_name = True

    @model_validator(mode="after")
    def check_rows_match_columns(self) -> "ChartDataset":
        if len(set(self.columns)) != len(self.columns):
            raise ValueError("Column names must be unique")
        known = set(self.columns)
        for index, row in enumerate(self.rows):
            unknown = set(row) - known
            if unknown:
                raise ValueError(f"Row {index} has unknown columns: {sorted(unknown)}")
        return self


class ChartDataResponse(BaseModel):
    chart_data: ChartDataset = Field(..., alias="chartData")

    class Config:
        populate_by_name = True
