import asyncio
from typing import Dict

import pytest
from fastapi.testclient import TestClient

from sheetlens.auth.base import IdentityProvider, Principal
from sheetlens.core.config import Settings
from sheetlens.core.exceptions import UnauthorizedException, ValidationException
from sheetlens.main import create_app
from sheetlens.schemas.user import UserInfo
from sheetlens.services.container import build_services
from sheetlens.storage.memory import MemoryBlobStore
from sheetlens.store.memory import MemoryMetadataStore

XLSX_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


class StaticIdentityProvider(IdentityProvider):
    """Token -> principal table, for tests that do not exercise signup."""

    def __init__(self, tokens: Dict[str, str]):
        self.tokens = dict(tokens)

    async def authenticate(self, token: str) -> Principal:
        if token not in self.tokens:
            raise UnauthorizedException()
        return Principal(user_id=self.tokens[token])

    async def create_user(self, email: str, password: str, name: str) -> UserInfo:
        raise ValidationException("Signup disabled")


def run(coro):
    return asyncio.run(coro)


@pytest.fixture
def test_settings():
    return Settings(
        METADATA_STORE="memory",
        BLOB_BACKEND="memory",
        IDENTITY_PROVIDER="local",
        JWT_SECRET_KEY="test-secret",
        LOG_LEVEL="WARNING",
        _env_file=None,
    )


@pytest.fixture
def store():
    return MemoryMetadataStore()


@pytest.fixture
def blobs():
    return MemoryBlobStore()


@pytest.fixture
def services(test_settings, store, blobs):
    return build_services(test_settings, store=store, blobs=blobs)


@pytest.fixture
def client(test_settings, services):
    app = create_app(test_settings, services=services)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def static_client(test_settings, store, blobs):
    identity = StaticIdentityProvider({"token-a": "user-a", "token-b": "user-b"})
    services = build_services(test_settings, store=store, blobs=blobs, identity=identity)
    app = create_app(test_settings, services=services)
    with TestClient(app) as test_client:
        yield test_client


def auth_headers(token: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
