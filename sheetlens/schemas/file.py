# sheetlens/schemas/file.py
from datetime import datetime
from typing import Any, Dict, List

from pydantic import BaseModel, Field


class FileRecord(BaseModel):
    """Canonical metadata of an uploaded spreadsheet; also the ownership index payload."""
    id: str
    user_id: str = Field(..., alias="userId")
    file_name: str = Field(..., alias="fileName")
    original_name: str = Field(..., alias="originalName")
    storage_path: str = Field(..., alias="storagePath")
    uploaded_at: datetime = Field(..., alias="uploadedAt")
    size: int = Field(..., ge=0)
    type: str = ""

    class Config:
        populate_by_name = True

    def to_store(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")


class FileUploadResponse(BaseModel):
    message: str = "File uploaded successfully"
    file_id: str = Field(..., alias="fileId")
    file_name: str = Field(..., alias="fileName")

    class Config:
        populate_by_name = True


class FileListResponse(BaseModel):
    files: List[FileRecord]
