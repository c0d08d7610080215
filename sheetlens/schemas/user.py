# sheetlens/schemas/user.py
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator


class SignupRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., max_length=200)
    name: str = Field(..., max_length=100)

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Name must not be empty")
        return value


class UserInfo(BaseModel):
    id: str
    email: str
    name: Optional[str] = None
    created_at: Optional[datetime] = None


class UserResponse(BaseModel):
    user: UserInfo


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., max_length=200)


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
