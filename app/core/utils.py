"""
Core Utilities

Shared helpers used across the application.
"""
import secrets
import string
import uuid
from datetime import datetime, timezone

_TOKEN_ALPHABET = string.ascii_letters + string.digits


def utcnow() -> datetime:
    """
    Return timezone-aware UTC datetime.

    Use this instead of datetime.utcnow() which returns naive datetime.
    """
    return datetime.now(timezone.utc)


def uuid_hex() -> str:
    """New entity id: 32 lowercase hex characters, no dashes."""
    return uuid.uuid4().hex


def random_token(length: int = 32) -> str:
    """Alphanumeric token for sales channel contexts."""
    return "".join(secrets.choice(_TOKEN_ALPHABET) for _ in range(length))
