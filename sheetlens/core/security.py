# sheetlens/core/security.py
from datetime import datetime, timedelta, timezone
from typing import Any, Optional, Union

from argon2 import PasswordHasher
from argon2.exceptions import VerifyMismatchError, InvalidHash
from jose import JWTError, jwt

from sheetlens.core.config import settings

ph = PasswordHasher(
    time_cost=2,
    memory_cost=65536,  # 64 MB
    parallelism=1,
    hash_len=32,
    salt_len=16
)

TOKEN_AUDIENCE = "authenticated"


def create_access_token(
        subject: Union[str, Any],
        expires_delta: Optional[timedelta] = None,
        *,
        secret_key: Optional[str] = None,
        algorithm: Optional[str] = None,
        claims: Optional[dict] = None
) -> str:
    """
    Create a signed access token whose `sub` claim is the user id
    """
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES)
    expire = datetime.now(timezone.utc) + expires_delta

    to_encode = dict(claims or {})
    to_encode.update({"exp": expire, "sub": str(subject), "aud": TOKEN_AUDIENCE})
    return jwt.encode(
        to_encode,
        secret_key or settings.JWT_SECRET_KEY,
        algorithm=algorithm or settings.JWT_ALGORITHM
    )


def decode_access_token(
        token: str,
        *,
        secret_key: Optional[str] = None,
        algorithm: Optional[str] = None
) -> Optional[dict]:
    """
    Decode an access token; None when the signature, audience or expiry is invalid
    """
    try:
        return jwt.decode(
            token,
            secret_key or settings.JWT_SECRET_KEY,
            algorithms=[algorithm or settings.JWT_ALGORITHM],
            audience=TOKEN_AUDIENCE
        )
    except JWTError:
        return None


def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return ph.verify(hashed_password, plain_password)
    except (VerifyMismatchError, InvalidHash):
        return False


def get_password_hash(password: str) -> str:
    return ph.hash(password)
