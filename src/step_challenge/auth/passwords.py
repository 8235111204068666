"""Salted password hashing and opaque token minting.

Hashes are PBKDF2-HMAC-SHA512 over the hex salt text, stored hex-encoded next
to the salt so existing rows stay verifiable across deployments.
"""

from __future__ import annotations

import hashlib
import hmac
import secrets

from ..core.constants import PBKDF2_ITERATIONS, PBKDF2_KEY_LENGTH, SALT_BYTES, TOKEN_BYTES


def generate_salt() -> str:
    return secrets.token_hex(SALT_BYTES)


def hash_password(password: str, salt: str) -> str:
    derived = hashlib.pbkdf2_hmac(
        "sha512",
        password.encode("utf-8"),
        salt.encode("utf-8"),
        PBKDF2_ITERATIONS,
        dklen=PBKDF2_KEY_LENGTH,
    )
    return derived.hex()


def verify_password(password: str, salt: str, expected_hash: str) -> bool:
    candidate = hash_password(password, salt)
    return hmac.compare_digest(candidate, expected_hash or "")


def generate_token() -> str:
    return secrets.token_hex(TOKEN_BYTES)
