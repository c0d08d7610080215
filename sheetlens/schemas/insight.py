# sheetlens/schemas/insight.py
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class InsightRecord(BaseModel):
    id: str
    file_id: str = Field(..., alias="fileId")
    user_id: str = Field(..., alias="userId")
    insights: List[str]
    generated_at: datetime = Field(..., alias="generatedAt")

    class Config:
        populate_by_name = True

    def to_store(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")


class InsightRequest(BaseModel):
    file_id: str = Field(..., alias="fileId", min_length=1)
    # Client-side rows the caller may send along; unused by the sample strategy
    data: Optional[Any] = None

    class Config:
        populate_by_name = True


class InsightResponse(BaseModel):
    insights: InsightRecord
