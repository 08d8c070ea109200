"""Random URL-safe tokens for sessions and entity identifiers"""

import secrets

from newsroom.config import settings

ID_BYTES = 18


def generate_token(num_bytes: int = ID_BYTES) -> str:
    """
    Draw ``num_bytes`` from the OS CSPRNG and encode them as unpadded base64url.

    Args:
        num_bytes: Amount of entropy in bytes

    Returns:
        str: Token over ``[A-Za-z0-9_-]``, ``ceil(num_bytes * 4 / 3)`` chars long
    """
    return secrets.token_urlsafe(num_bytes)


def generate_session_token() -> str:
    """Opaque token handed to the client; only its digest is persisted."""
    return generate_token(settings.SESSION_TOKEN_BYTES)


def generate_id() -> str:
    """Primary key for users and other entities"""
    return generate_token(ID_BYTES)
