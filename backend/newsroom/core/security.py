"""Security utilities - password hashing and session token digests"""

import hashlib
import secrets

SALT_BYTES = 16


def _digest_hex(value: str) -> str:
    # surrogatepass keeps lone surrogates hashable instead of raising
    return hashlib.sha256(value.encode("utf-8", "surrogatepass")).hexdigest()


def hash_password(password: str) -> str:
    """
    Hash a password with a fresh random salt

    Args:
        password: Plain text password, any string including empty

    Returns:
        str: ``<salt hex, 32 chars>:<sha256 hex of password + salt hex, 64 chars>``
    """
    salt_hex = secrets.token_hex(SALT_BYTES)
    return f"{salt_hex}:{_digest_hex(password + salt_hex)}"


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a password against its stored ``salt:hash`` credential

    Malformed credentials (no colon, several colons, an empty part, not a
    string) verify as False; this function never raises.

    Args:
        plain_password: Plain text password
        hashed_password: Stored credential

    Returns:
        bool: True if password matches
    """
    if not isinstance(hashed_password, str) or not isinstance(plain_password, str):
        return False

    parts = hashed_password.split(":")
    if len(parts) != 2:
        return False
    salt_hex, hash_hex = parts
    if not salt_hex or not hash_hex:
        return False

    return _digest_hex(plain_password + salt_hex) == hash_hex


def hash_session_token(token: str) -> str:
    """
    Derive the persisted session id from the client-held token

    Args:
        token: Raw session token

    Returns:
        str: Lowercase hex SHA-256 of the token
    """
    return _digest_hex(token)
