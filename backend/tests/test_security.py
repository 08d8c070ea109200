import hashlib
import re

import pytest

from newsroom.core.security import hash_password, hash_session_token, verify_password


CREDENTIAL_RE = re.compile(r"[0-9a-f]{32}:[0-9a-f]{64}")


def test_hash_has_salt_and_digest_parts():
    hashed = hash_password("hunter22")
    assert len(hashed) == 97
    assert CREDENTIAL_RE.fullmatch(hashed)


@pytest.mark.parametrize(
    "password",
    ["secret123", "", "   ", "pässwörd-ünïcode", "x" * 1000, "with:colon"],
)
def test_hash_verifies_round_trip(password):
    assert verify_password(password, hash_password(password)) is True


def test_same_password_gets_fresh_salt():
    first = hash_password("secret123")
    second = hash_password("secret123")
    assert first != second
    assert first.split(":")[0] != second.split(":")[0]


def test_wrong_password_rejected():
    hashed = hash_password("secret123")
    assert verify_password("secret124", hashed) is False
    assert verify_password("Secret123", hashed) is False
    assert verify_password("", hashed) is False


def test_digest_covers_password_then_salt_hex():
    salt = "00112233445566778899aabbccddeeff"
    digest = hashlib.sha256(("secret123" + salt).encode("utf-8")).hexdigest()
    assert verify_password("secret123", f"{salt}:{digest}") is True


@pytest.mark.parametrize(
    "stored",
    [
        "",
        "nocolonhere",
        ":abcdef",
        "abcdef:",
        ":",
        "a:b:c",
        None,
        12345,
    ],
)
def test_malformed_credentials_never_verify(stored):
    assert verify_password("secret123", stored) is False


def test_session_token_digest_is_sha256_hex():
    token = "AbCdEfGhIjKlMnOpQrStUvWx"
    assert hash_session_token(token) == hashlib.sha256(token.encode("utf-8")).hexdigest()
    assert hash_session_token("") == "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"


def test_session_token_digest_is_deterministic():
    assert hash_session_token("token-a") == hash_session_token("token-a")
    assert hash_session_token("token-a") != hash_session_token("token-b")
