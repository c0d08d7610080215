from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from sheetlens.core.exceptions import (
    BlobStorageException,
    FileProcessingException,
    IdentityProviderException,
    MetadataStoreException,
)

logger = logging.getLogger(__name__)


def _error_response(
        status_code: int,
        message: str,
        headers: Optional[Dict[str, str]] = None
) -> JSONResponse:
    content: Dict[str, Any] = {"error": message}
    return JSONResponse(status_code=status_code, content=content, headers=headers)


def _describe_validation_errors(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = [str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path")]
    if first.get("type") == "missing" and location == ["file"]:
        return "No file provided"
    field = ".".join(location)
    message = first.get("msg", "Invalid value")
    return f"{field}: {message}" if field else message


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(_: Request, exc: StarletteHTTPException) -> JSONResponse:
        return _error_response(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        message = _describe_validation_errors(exc)
        logger.warning(f"⚠️ Validation failed: {request.method} {request.url.path}: {message}")
        return _error_response(status.HTTP_400_BAD_REQUEST, message)

    @app.exception_handler(FileProcessingException)
    async def file_processing_handler(request: Request, exc: FileProcessingException) -> JSONResponse:
        logger.warning(f"⚠️ Spreadsheet processing failed: {request.url.path}: {exc}")
        return _error_response(status.HTTP_400_BAD_REQUEST, str(exc) or "Could not read spreadsheet")

    @app.exception_handler(MetadataStoreException)
    @app.exception_handler(BlobStorageException)
    @app.exception_handler(IdentityProviderException)
    async def collaborator_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            f"❌ {type(exc).__name__} on {request.method} {request.url.path}: {exc}",
            exc_info=exc
        )
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error: %s %s", request.method, request.url.path)
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")
