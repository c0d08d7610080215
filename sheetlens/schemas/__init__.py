# sheetlens/schemas/__init__.py
from sheetlens.schemas.user import (
    SignupRequest, UserInfo, UserResponse, LoginRequest, Token
)
from sheetlens.schemas.file import (
    FileRecord, FileUploadResponse, FileListResponse
)
from sheetlens.schemas.insight import (
    InsightRecord, InsightRequest, InsightResponse
)
from sheetlens.schemas.chart import (
    ChartDataset, ChartDataResponse
)
from sheetlens.schemas.common import (
    HealthCheck, ErrorResponse
)

__all__ = [
    # User
    "SignupRequest", "UserInfo", "UserResponse", "LoginRequest", "Token",
    # File
    "FileRecord", "FileUploadResponse", "FileListResponse",
    # Insight
    "InsightRecord", "InsightRequest", "InsightResponse",
    # Chart
    "ChartDataset", "ChartDataResponse",
    # Common
    "HealthCheck", "ErrorResponse"
]
