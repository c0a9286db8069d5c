from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

from newshub.domain.users.entities import AuthContext, User
from newshub.domain.users.rules import (check_email, check_name,
                                        check_password_strength,
                                        normalize_email)


def _enforce(errors: list[str], error_type: str) -> None:
    if errors:
        raise PydanticCustomError(error_type, errors[0], {"errors": errors})


def _validated_name(value: str) -> str:
    _enforce(check_name(value), "name_invalid")
    return value.strip()


def _validated_email(value: str) -> str:
    _enforce(check_email(value), "email_invalid")
    return normalize_email(value)


def _validated_password(value: str) -> str:
    _enforce(check_password_strength(value), "password_weak")
    return value


class RegisterRequestDTO(BaseModel):
    name: str
    email: str
    password: str

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        return _validated_name(value)

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: str) -> str:
        return _validated_email(value)

    @field_validator("password")
    @classmethod
    def validate_password_strength(cls, value: str) -> str:
        return _validated_password(value)


class LoginRequestDTO(BaseModel):
    email: str
    password: str = Field(min_length=1, max_length=128)  # No strength check on login

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: str) -> str:
        return _validated_email(value)


class UpdateProfileRequestDTO(BaseModel):
    name: str | None = None
    email: str | None = None
    current_password: str | None = Field(None, max_length=128)
    new_password: str | None = None

    model_config = ConfigDict(alias_generator=to_camel, validate_by_name=True, validate_by_alias=True)

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str | None) -> str | None:
        return None if value is None else _validated_name(value)

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: str | None) -> str | None:
        return None if value is None else _validated_email(value)

    @field_validator("new_password")
    @classmethod
    def validate_new_password(cls, value: str | None) -> str | None:
        return None if value is None else _validated_password(value)

    @model_validator(mode="after")
    def _check_combination(self) -> "UpdateProfileRequestDTO":
        if self.name is None and self.email is None and self.new_password is None:
            raise PydanticCustomError("missing", "Nothing to update", {})
        if self.new_password is not None and not self.current_password:
            raise PydanticCustomError(
                "missing", "Current password is required to set a new password", {}
            )
        return self


class UserDTO(BaseModel):
    id: str
    name: str
    email: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = ConfigDict(alias_generator=to_camel, validate_by_name=True)

    @classmethod
    def from_user(cls, user: User) -> UserDTO:
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )

    @classmethod
    def from_auth(cls, auth: AuthContext) -> UserDTO:
        return cls(id=auth.user_id, name=auth.name, email=auth.email)

    def to_json(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class AuthSuccessDTO(BaseModel):
    success: bool = True
    user: UserDTO

    def to_json(self) -> dict:
        return {"success": self.success, "user": self.user.to_json()}
