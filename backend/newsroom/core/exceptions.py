"""Custom exception classes for the application"""

from typing import Optional, Dict, Any


class BaseAPIException(Exception):
    """Base exception for all API errors"""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


# Authentication Errors
class AuthenticationError(BaseAPIException):
    """Base authentication error"""
    def __init__(self, message: str = "Authentication failed"):
        super().__init__(message, status_code=401)


class InvalidCredentialsError(AuthenticationError):
    """Unknown identifier or wrong password"""
    def __init__(self, message: str = "Invalid username/email or password"):
        super().__init__(message)


class SessionRequiredError(AuthenticationError):
    """No valid session cookie on the request"""
    def __init__(self):
        super().__init__("You must be logged in")


# Resource Errors
class ResourceAlreadyExistsError(BaseAPIException):
    """Resource already exists"""
    def __init__(self, resource: str):
        super().__init__(f"{resource} already exists", status_code=409)


# Business Logic Errors
class BusinessLogicError(BaseAPIException):
    """Business logic error"""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status_code=400, details=details)


class DuplicateUsernameError(BusinessLogicError):
    """Username already taken"""
    def __init__(self, username: str):
        super().__init__(f"Username '{username}' is already taken", details={"field": "username"})


class DuplicateEmailError(BusinessLogicError):
    """Email already registered"""
    def __init__(self, email: str):
        super().__init__(f"Email '{email}' is already registered", details={"field": "email"})


class ConfirmationMismatchError(BusinessLogicError):
    """Destructive action was not confirmed"""
    def __init__(self, expected: str):
        super().__init__(f"Type {expected} to confirm", details={"expected": expected})


# System Errors
class RateLimitExceededError(BaseAPIException):
    """Rate limit exceeded"""
    def __init__(self, message: str = "Rate limit exceeded. Please try again later."):
        super().__init__(message, status_code=429)
