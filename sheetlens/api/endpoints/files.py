"""
File endpoints
Upload of spreadsheets and listing of the caller's files
"""
import logging

from fastapi import APIRouter, Depends, File, UploadFile

from sheetlens.api.dependencies import get_current_principal, get_services
from sheetlens.auth.base import Principal
from sheetlens.schemas import FileListResponse, FileUploadResponse
from sheetlens.services.container import Services

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/upload", response_model=FileUploadResponse)
async def upload_file(
        file: UploadFile = File(...),
        principal: Principal = Depends(get_current_principal),
        services: Services = Depends(get_services)
):
    """
    Upload a spreadsheet (.xls/.xlsx, at most MAX_FILESIZE_MB)

    Returns:
        FileUploadResponse: id and display name of the stored file
    """
    # Reject on the declared size before reading the body into memory
    services.ingestion.validate(file.filename, file.content_type, file.size)
    content = await file.read()

    record = await services.ingestion.ingest(
        principal,
        content,
        file_name=file.filename,
        content_type=file.content_type
    )
    return FileUploadResponse(file_id=record.id, file_name=record.file_name)


@router.get("/files", response_model=FileListResponse)
async def get_files(
        principal: Principal = Depends(get_current_principal),
        services: Services = Depends(get_services)
):
    """Get all files for current user"""
    files = await services.ingestion.list_files(principal)
    return FileListResponse(files=files)
