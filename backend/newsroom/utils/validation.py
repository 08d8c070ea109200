"""Validation rules shared by request schemas"""

import re
from dataclasses import dataclass
from typing import Optional

EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
USERNAME_PATTERN = re.compile(r"[a-zA-Z0-9_-]{3,20}")

PASSWORD_MIN_LENGTH = 6
TITLE_MIN_LENGTH = 5
CONTENT_MIN_LENGTH = 50

VALID_CATEGORIES = (
    "Olahraga",
    "Budaya",
    "Teknologi",
    "Kesehatan",
    "Bencana",
    "Lainnya",
)


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    error: Optional[str] = None


_OK = ValidationResult(valid=True)


def _is_blank(value: Optional[str]) -> bool:
    return not value or not value.strip()


def validate_email(email: str) -> ValidationResult:
    if _is_blank(email):
        return ValidationResult(False, "Email is required")
    if not EMAIL_PATTERN.fullmatch(email):
        return ValidationResult(False, "Invalid email format")
    return _OK


def validate_username(username: str) -> ValidationResult:
    """3-20 characters: letters, digits, underscore and dash."""
    if _is_blank(username):
        return ValidationResult(False, "Username is required")
    if not USERNAME_PATTERN.fullmatch(username):
        return ValidationResult(
            False,
            "Username must be 3-20 characters and contain only letters, numbers, underscore (_) or dash (-)",
        )
    return _OK


def validate_password(password: str) -> ValidationResult:
    # Length is measured on the raw value; whitespace counts.
    if not password:
        return ValidationResult(False, "Password is required")
    if len(password) < PASSWORD_MIN_LENGTH:
        return ValidationResult(False, f"Password must be at least {PASSWORD_MIN_LENGTH} characters")
    return _OK


def validate_password_match(password: str, confirm_password: str) -> ValidationResult:
    if password != confirm_password:
        return ValidationResult(False, "Passwords do not match")
    return _OK


def validate_article_title(title: str) -> ValidationResult:
    """Article rules are shared with the editorial frontend; no route here consumes them yet."""
    if _is_blank(title):
        return ValidationResult(False, "Title is required")
    if len(title) < TITLE_MIN_LENGTH:
        return ValidationResult(False, f"Title must be at least {TITLE_MIN_LENGTH} characters")
    return _OK


def validate_article_content(content: str) -> ValidationResult:
    """Shared article rule, see ``validate_article_title``."""
    if _is_blank(content):
        return ValidationResult(False, "Content is required")
    if len(content) < CONTENT_MIN_LENGTH:
        return ValidationResult(False, f"Content must be at least {CONTENT_MIN_LENGTH} characters")
    return _OK


def validate_category(category: str) -> ValidationResult:
    """Shared article rule, see ``validate_article_title``."""
    if _is_blank(category):
        return ValidationResult(False, "Category is required")
    if category not in VALID_CATEGORIES:
        return ValidationResult(False, "Invalid category")
    return _OK
