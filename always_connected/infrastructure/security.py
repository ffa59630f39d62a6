"""Hashing helpers for the shared secret."""

import logging

from passlib.context import CryptContext

from always_connected.config import Settings, get_settings

logger = logging.getLogger(__name__)

pwd_context = CryptContext(
    schemes=["pbkdf2_sha256"],
    deprecated="auto",
    pbkdf2_sha256__rounds=310_000,
)


def get_secret_hash(secret: str) -> str:
    return pwd_context.hash(secret)


def verify_shared_secret(secret: str, *, settings: Settings | None = None) -> bool:
    """Return ``True`` when ``secret`` matches the configured shared secret."""

    hashed = (settings or get_settings()).shared_secret_hash
    if not hashed:
        logger.warning("SHARED_SECRET_HASH is not configured; rejecting login")
        return False
    try:
        return pwd_context.verify(secret, hashed)
    except ValueError:
        logger.error("SHARED_SECRET_HASH is not a valid passlib hash")
        return False
