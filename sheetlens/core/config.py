# sheetlens/core/config.py
from pathlib import Path
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Application
    APP_ENV: str = Field("development")
    API_PREFIX: str = Field("")
    ALLOWED_ORIGINS: str = Field("*")
    SERVER_HOST: str = Field("127.0.0.1")
    SERVER_PORT: int = Field(8000)

    # Logging
    LOG_LEVEL: str = Field("INFO")
    LOG_FILE: Optional[str] = Field(None)

    # Metadata store
    METADATA_STORE: str = Field("memory")  # memory, sql
    DATABASE_URL: str = Field("sqlite+aiosqlite:///./sheetlens.db")
    KV_TABLE_NAME: str = Field("kv_store")

    # Blob storage
    BLOB_BACKEND: str = Field("local")  # memory, local, supabase
    UPLOAD_DIR: str = Field("uploads")
    STORAGE_BUCKET: str = Field("sheetlens-files")

    # Identity provider
    IDENTITY_PROVIDER: str = Field("local")  # local, supabase
    SUPABASE_URL: str = Field("")
    SUPABASE_SERVICE_ROLE_KEY: str = Field("")
    SUPABASE_TIMEOUT_SECONDS: float = Field(10.0)

    # Local tokens
    JWT_SECRET_KEY: str = Field("sheetlens-dev-secret-change-me")
    JWT_ALGORITHM: str = Field("HS256")
    JWT_ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(10080)
    PASSWORD_MIN_LENGTH: int = Field(8)
    # When set, POST /signup requires "Authorization: Bearer <key>"
    SIGNUP_SERVICE_KEY: str = Field("")

    # Uploads
    MAX_FILESIZE_MB: int = Field(10)
    SUPPORTED_FILETYPES: str = Field("xls,xlsx")
    SPREADSHEET_CONTENT_TYPES: str = Field(
        "application/vnd.ms-excel,"
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    )

    # Derived data
    INSIGHTS_STRATEGY: str = Field("sample")
    CHART_DATA_STRATEGY: str = Field("sample")  # sample, spreadsheet

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

    @property
    def max_filesize_bytes(self) -> int:
        return self.MAX_FILESIZE_MB * 1024 * 1024

    @property
    def allowed_origins_list(self) -> List[str]:
        return [o.strip() for o in self.ALLOWED_ORIGINS.split(",") if o.strip()]

    def get_upload_dir(self) -> Path:
        return Path(self.UPLOAD_DIR)

    def is_file_supported(self, filename: Optional[str], content_type: Optional[str] = None) -> bool:
        """Spreadsheet check: declared MIME type first, file extension as fallback."""
        content_types = {
            t.strip().lower() for t in self.SPREADSHEET_CONTENT_TYPES.split(",") if t.strip()
        }
        if content_type and content_type.split(";")[0].strip().lower() in content_types:
            return True

        allowed = tuple(
            f".{ext.strip().lower().lstrip('.')}"
            for ext in self.SUPPORTED_FILETYPES.split(",")
            if ext.strip()
        )
        return bool(filename) and filename.lower().endswith(allowed)


settings = Settings()
