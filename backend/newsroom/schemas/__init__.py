"""Pydantic schemas for API validation"""

from newsroom.schemas.user import (
    AccountDelete,
    AuthResponse,
    PasswordChange,
    ProfileUpdate,
    UserLogin,
    UserRegister,
    UserResponse,
)
from newsroom.schemas.response import APIResponse, ErrorResponse, HealthResponse

__all__ = [
    "UserLogin", "UserRegister", "ProfileUpdate", "PasswordChange", "AccountDelete",
    "UserResponse", "AuthResponse",
    "APIResponse", "ErrorResponse", "HealthResponse",
]
