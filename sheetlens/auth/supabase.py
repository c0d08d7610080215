"""
Supabase Auth identity provider
Token validation and admin signup over the GoTrue REST API
"""
import logging
from typing import Any, Dict, Optional

import httpx

from sheetlens.auth.base import IdentityProvider, Principal
from sheetlens.core.exceptions import (
    IdentityProviderException,
    UnauthorizedException,
    ValidationException,
)
from sheetlens.schemas.user import UserInfo

logger = logging.getLogger(__name__)


def _error_message(response: httpx.Response) -> str:
    try:
        body: Dict[str, Any] = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    for field in ("msg", "message", "error_description", "error"):
        if body.get(field):
            return str(body[field])
    return f"HTTP {response.status_code}"


class SupabaseIdentityProvider(IdentityProvider):

    def __init__(
            self,
            supabase_url: str,
            service_role_key: str,
            *,
            timeout: float = 10.0,
            password_min_length: int = 8,
            client: Optional[httpx.AsyncClient] = None
    ):
        if not supabase_url or not service_role_key:
            raise ValueError("SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY are required for supabase auth")
        self.service_role_key = service_role_key
        self.password_min_length = password_min_length
        self._client = client or httpx.AsyncClient(
            base_url=supabase_url.rstrip("/"),
            headers={"apikey": service_role_key},
            timeout=timeout,
        )

    async def authenticate(self, token: str) -> Principal:
        try:
            response = await self._client.get(
                "/auth/v1/user",
                headers={"Authorization": f"Bearer {token}"},
            )
        except httpx.HTTPError as e:
            logger.error(f"❌ Identity provider unreachable: {e}")
            raise IdentityProviderException(f"Token validation failed: {e}") from e

        if response.status_code >= 500:
            raise IdentityProviderException(f"Token validation failed: HTTP {response.status_code}")
        if response.status_code != 200:
            logger.warning(f"⚠️ Token rejected by identity provider: {_error_message(response)}")
            raise UnauthorizedException()

        user = response.json()
        if not user.get("id"):
            raise UnauthorizedException()
        return Principal(user_id=str(user["id"]), email=user.get("email"))

    async def create_user(self, email: str, password: str, name: str) -> UserInfo:
        self.check_password(password)
        try:
            response = await self._client.post(
                "/auth/v1/admin/users",
                headers={"Authorization": f"Bearer {self.service_role_key}"},
                json={
                    "email": email,
                    "password": password,
                    "user_metadata": {"name": name},
                    # No mail server is configured, accounts are confirmed on creation
                    "email_confirm": True,
                },
            )
        except httpx.HTTPError as e:
            raise IdentityProviderException(f"Signup failed: {e}") from e

        if response.status_code >= 500:
            raise IdentityProviderException(f"Signup failed: HTTP {response.status_code}")
        if response.status_code >= 400:
            message = _error_message(response)
            logger.warning(f"⚠️ Auth signup error: {message}")
            raise ValidationException(message)

        user = response.json()
        return UserInfo(
            id=str(user["id"]),
            email=user.get("email") or email,
            name=(user.get("user_metadata") or {}).get("name", name),
            created_at=user.get("created_at")
        )

    async def close(self) -> None:
        await self._client.aclose()
