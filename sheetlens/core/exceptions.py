# sheetlens/core/exceptions.py
from typing import Any, Optional, Dict
from fastapi import HTTPException, status


class BaseAPIException(HTTPException):
    """Base exception for API"""
    kind: str = "Error"

    def __init__(
        self,
        status_code: int,
        detail: str,
        headers: Optional[Dict[str, Any]] = None
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)


class UnauthorizedException(BaseAPIException):
    """Missing, malformed or rejected bearer credential"""
    kind = "Unauthorized"

    def __init__(self, detail: str = "Unauthorized"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"}
        )


class AccessDeniedException(BaseAPIException):
    """Valid credential, but the resource belongs to another owner.

    Rendered as 404 so the existence of other users' files is not disclosed.
    """
    kind = "Forbidden"

    def __init__(self, detail: str = "File not found or access denied"):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail
        )


class NotFoundException(BaseAPIException):
    """Resource not found exception"""
    kind = "NotFound"

    def __init__(self, detail: str = "Resource not found"):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail
        )


class ValidationException(BaseAPIException):
    """Bad file type/size or malformed request"""
    kind = "ValidationError"

    def __init__(self, detail: str = "Bad request"):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail
        )


class InternalErrorException(BaseAPIException):
    """Store or provider failure"""
    kind = "InternalError"

    def __init__(self, detail: str = "Internal server error"):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=detail
        )


class MetadataStoreException(Exception):
    """Metadata store exception"""
    pass


class BlobStorageException(Exception):
    """Blob storage exception"""
    pass


class IdentityProviderException(Exception):
    """Identity provider transport/server exception"""
    pass


class FileProcessingException(Exception):
    """Spreadsheet could not be read"""
    pass
