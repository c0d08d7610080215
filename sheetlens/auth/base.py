"""
Identity provider interface
Resolves bearer tokens to principals and creates accounts
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from sheetlens.core.exceptions import ValidationException
from sheetlens.schemas.user import Token, UserInfo


@dataclass(frozen=True)
class Principal:
    """Authenticated identity resolved from a request credential"""
    user_id: str
    email: Optional[str] = None


class IdentityProvider(ABC):
    """Base class for identity providers"""

    password_min_length: int = 8

    @abstractmethod
    async def authenticate(self, token: str) -> Principal:
        """Validate a bearer token; raises UnauthorizedException when rejected"""
        pass

    @abstractmethod
    async def create_user(self, email: str, password: str, name: str) -> UserInfo:
        """Create a confirmed account; raises ValidationException when rejected"""
        pass

    async def issue_token(self, email: str, password: str) -> Token:
        """Password login, for providers that issue their own tokens"""
        raise ValidationException("Password login is handled by the identity provider")

    def check_password(self, password: str) -> None:
        if len(password) < self.password_min_length:
            raise ValidationException(
                f"Password must be at least {self.password_min_length} characters"
            )

    async def close(self) -> None:
        return None
