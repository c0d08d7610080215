# sheetlens/api/dependencies.py
import hmac
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from sheetlens.auth.base import Principal
from sheetlens.core.exceptions import UnauthorizedException
from sheetlens.observability.context import user_id_ctx
from sheetlens.services.container import Services

# Security scheme
security_bearer = HTTPBearer(auto_error=False)


def get_services(request: Request) -> Services:
    return request.app.state.services


async def get_current_principal(
        credentials: Optional[HTTPAuthorizationCredentials] = Depends(security_bearer),
        services: Services = Depends(get_services)
) -> Principal:
    """
    Resolve the bearer token to a principal (required authentication).
    Runs before any user-scoped metadata access.
    """
    if not credentials:
        raise UnauthorizedException()

    principal = await services.identity.authenticate(credentials.credentials)
    user_id_ctx.set(principal.user_id)
    return principal


async def require_service_credential(
        credentials: Optional[HTTPAuthorizationCredentials] = Depends(security_bearer),
        services: Services = Depends(get_services)
) -> None:
    """
    Gate for service-level endpoints (signup); open when no key is configured
    """
    expected = services.settings.SIGNUP_SERVICE_KEY
    if not expected:
        return
    if not credentials or not hmac.compare_digest(credentials.credentials, expected):
        raise UnauthorizedException()
