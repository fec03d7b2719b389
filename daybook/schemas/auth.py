from __future__ import annotations

from typing import Optional

from pydantic import AliasChoices, BaseModel, Field, field_validator

from ..core.config import settings


class SignupRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=150)
    password: str = Field(..., min_length=1)
    email: Optional[str] = Field(default=None, max_length=254)
    name: Optional[str] = Field(default=None, max_length=200)

    model_config = {
        "json_schema_extra": {
            "example": {"username": "alice", "password": "secret1", "email": "alice@example.com"}
        },
    }

    @field_validator("username")
    @classmethod
    def strip_username(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("username is required")
        if "@" in value:
            # '@' marks an email at login
            raise ValueError("username must not contain '@'")
        return value

    @field_validator("password")
    @classmethod
    def check_password_length(cls, value: str) -> str:
        if len(value) < settings.PASSWORD_MIN_LENGTH:
            raise ValueError(f"password must be at least {settings.PASSWORD_MIN_LENGTH} characters")
        return value

    @field_validator("email")
    @classmethod
    def check_email(cls, value: Optional[str]) -> Optional[str]:
        if value is None or not value.strip():
            return None
        value = value.strip()
        local, sep, domain = value.partition("@")
        if not sep or not local or "." not in domain:
            raise ValueError("email is not valid")
        return value


class LoginRequest(BaseModel):
    identifier: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("identifier", "username", "email"),
    )
    password: str = Field(..., min_length=1)

    model_config = {
        "populate_by_name": True,
        "json_schema_extra": {"example": {"username": "alice", "password": "secret1"}},
    }


class UserOut(BaseModel):
    id: int
    username: str
    email: Optional[str] = None
    name: Optional[str] = None
    created_at: str

    model_config = {"from_attributes": True}


class UserResponse(BaseModel):
    user: UserOut


class OkResponse(BaseModel):
    ok: bool = True
