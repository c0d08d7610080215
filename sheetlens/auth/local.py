"""
Local identity provider
Accounts live in the metadata store; Argon2 password hashes, HS256 access tokens
"""
import asyncio
import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

from sheetlens.auth.base import IdentityProvider, Principal
from sheetlens.core import security
from sheetlens.core.exceptions import MetadataStoreException, UnauthorizedException, ValidationException
from sheetlens.schemas.user import Token, UserInfo
from sheetlens.store import keys
from sheetlens.store.base import MetadataStore, Record

logger = logging.getLogger(__name__)


class LocalIdentityProvider(IdentityProvider):

    def __init__(
            self,
            store: MetadataStore,
            *,
            secret_key: str,
            algorithm: str = "HS256",
            token_expire_minutes: int = 10080,
            password_min_length: int = 8
    ):
        self.store = store
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.token_expire_minutes = token_expire_minutes
        self.password_min_length = password_min_length

    async def _get_by_email(self, email: str) -> Optional[Record]:
        pointer = await self.store.get(keys.user_email_key(email))
        if not pointer:
            return None
        return await self.store.get(keys.user_key(pointer["userId"]))

    @staticmethod
    def _to_info(record: Record) -> UserInfo:
        return UserInfo(
            id=record["id"],
            email=record["email"],
            name=record.get("name"),
            created_at=record.get("createdAt")
        )

    async def create_user(self, email: str, password: str, name: str) -> UserInfo:
        email = email.strip().lower()
        self.check_password(password)
        password_hash = await asyncio.to_thread(security.get_password_hash, password)

        record = {
            "id": str(uuid.uuid4()),
            "email": email,
            "name": name,
            "passwordHash": password_hash,
            "createdAt": datetime.now(timezone.utc).isoformat(),
        }
        email_key = keys.user_email_key(email)
        # Claiming the email pointer is the duplicate check; only one signup can win it
        if not await self.store.put_if_absent(email_key, {"userId": record["id"]}):
            raise ValidationException("A user with this email address has already been registered")

        try:
            await self.store.put(keys.user_key(record["id"]), record)
        except MetadataStoreException:
            # Release the email so the signup can be retried
            await self.store.delete(email_key)
            raise

        logger.info(f"✅ User created: {record['id']}")
        return self._to_info(record)

    async def issue_token(self, email: str, password: str) -> Token:
        record = await self._get_by_email(email)
        valid = record is not None and await asyncio.to_thread(
            security.verify_password, password, record["passwordHash"]
        )
        if not valid:
            raise UnauthorizedException("Incorrect email or password")

        access_token = security.create_access_token(
            subject=record["id"],
            expires_delta=timedelta(minutes=self.token_expire_minutes),
            secret_key=self.secret_key,
            algorithm=self.algorithm,
            claims={"email": record["email"]}
        )
        return Token(access_token=access_token)

    async def authenticate(self, token: str) -> Principal:
        payload = security.decode_access_token(
            token, secret_key=self.secret_key, algorithm=self.algorithm
        )
        if not payload or not payload.get("sub"):
            raise UnauthorizedException("Invalid authentication credentials")

        try:
            user_key = keys.user_key(payload["sub"])
        except ValueError:
            raise UnauthorizedException("Invalid authentication credentials")

        record = await self.store.get(user_key)
        if record is None:
            raise UnauthorizedException("User not found")
        return Principal(user_id=record["id"], email=record.get("email"))
