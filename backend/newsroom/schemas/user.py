"""User and authentication schemas"""

from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Optional
from datetime import datetime

from newsroom.core.clock import as_utc
from newsroom.utils.validation import (
    ValidationResult,
    validate_email,
    validate_password,
    validate_password_match,
    validate_username,
)

ACCOUNT_DELETE_CONFIRMATION = "DELETE"


def _check(result: ValidationResult, value):
    if not result.valid:
        raise ValueError(result.error)
    return value


def _require_full_name(value: str) -> str:
    if not value.strip():
        raise ValueError("Full name is required")
    return value


class UserLogin(BaseModel):
    """Login with either email or username"""
    identifier: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=1)


class UserRegister(BaseModel):
    """Registration form"""
    username: str = Field(..., max_length=255)
    email: str = Field(..., max_length=255)
    full_name: str = Field(..., min_length=1, max_length=255)
    password: str
    password_confirm: str

    @field_validator("username")
    @classmethod
    def username_format(cls, v):
        return _check(validate_username(v.strip()), v)

    @field_validator("email")
    @classmethod
    def email_format(cls, v):
        return _check(validate_email(v.strip()), v)

    @field_validator("full_name")
    @classmethod
    def full_name_not_blank(cls, v):
        return _require_full_name(v)

    @field_validator("password")
    @classmethod
    def password_strength(cls, v):
        return _check(validate_password(v), v)

    @model_validator(mode="after")
    def passwords_match(self):
        return _check(validate_password_match(self.password, self.password_confirm), self)


class ProfileUpdate(BaseModel):
    """Account settings form"""
    username: str = Field(..., max_length=255)
    email: str = Field(..., max_length=255)
    full_name: str = Field(..., min_length=1, max_length=255)
    about_me: Optional[str] = Field(None, max_length=500)
    profile_picture: Optional[str] = Field(None, max_length=1000)

    @field_validator("username")
    @classmethod
    def username_format(cls, v):
        return _check(validate_username(v.strip()), v)

    @field_validator("email")
    @classmethod
    def email_format(cls, v):
        return _check(validate_email(v.strip()), v)

    @field_validator("full_name")
    @classmethod
    def full_name_not_blank(cls, v):
        return _require_full_name(v)

    @field_validator("about_me", "profile_picture")
    @classmethod
    def blank_to_none(cls, v):
        if v is None or not v.strip():
            return None
        return v


class PasswordChange(BaseModel):
    """Change password form"""
    current_password: str = Field(..., min_length=1)
    new_password: str
    confirm_password: str

    @field_validator("new_password")
    @classmethod
    def password_strength(cls, v):
        return _check(validate_password(v), v)

    @model_validator(mode="after")
    def passwords_match(self):
        return _check(validate_password_match(self.new_password, self.confirm_password), self)


class AccountDelete(BaseModel):
    """Typed confirmation for account deletion"""
    confirm_text: str


class UserResponse(BaseModel):
    """User response schema"""
    id: str
    username: str
    email: str
    full_name: str
    about_me: Optional[str]
    profile_picture: Optional[str]
    created_at: Optional[datetime]

    class Config:
        from_attributes = True

    @field_validator("created_at")
    @classmethod
    def created_at_utc(cls, v):
        return as_utc(v)


class AuthResponse(BaseModel):
    """Session issued by register/login"""
    user: UserResponse
    expires_at: datetime
