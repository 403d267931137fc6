"""Credential Primitives — bcrypt password hashing and opaque bearer tokens.

Invariants:
    - Plaintext passwords are never stored or logged; only bcrypt hashes persist
    - Bearer tokens are random URL-safe strings; only their SHA-256 digest is stored
    - verify_password never raises on a malformed hash (returns False)
"""

import hashlib
import secrets

import bcrypt

from catalog.config import get_settings

TOKEN_PREFIX = "lc_"


def hash_password(password: str) -> str:
    rounds = get_settings().bcrypt_rounds
    hashed = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=rounds))
    return hashed.decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        return False


def generate_token() -> str:
    """Generate a new plaintext bearer token."""
    return f"{TOKEN_PREFIX}{secrets.token_urlsafe(40)}"


def digest_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()
