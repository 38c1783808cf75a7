"""
Master key management for super-env.

The master key is 32 random bytes stored raw in a file (MASTER_KEY.key by
default). It is read back from disk on every operation and never cached.

Security Note:
    Never log key material. Only log paths and lengths.
"""

from __future__ import annotations

import logging
import secrets
from pathlib import Path

from .errors import InvalidKeyError, KeyNotFoundError
from .files import write_atomic

logger = logging.getLogger("super_env.keys")

MASTER_KEY_FILENAME = "MASTER_KEY.key"
KEY_LENGTH = 32  # AES-256


def generate_key() -> bytes:
    """Generate a fresh random 32-byte master key."""
    return secrets.token_bytes(KEY_LENGTH)


def save_key(key: bytes, path: str | Path = MASTER_KEY_FILENAME) -> None:
    """
    Write the raw master key to `path`, replacing any existing file.

    The file is readable by its owner only.
    """
    write_atomic(path, key, mode=0o600)
    logger.info("Saved %d-byte master key to %s", len(key), path)


def load_key(path: str | Path = MASTER_KEY_FILENAME) -> bytes:
    """
    Read the raw master key from `path`.

    Raises:
        KeyNotFoundError: If the key file does not exist.
        InvalidKeyError: If the file does not hold exactly 32 bytes.
    """
    try:
        key = Path(path).read_bytes()
    except FileNotFoundError as exc:
        raise KeyNotFoundError(str(path)) from exc

    if len(key) != KEY_LENGTH:
        raise InvalidKeyError(
            f"Master key file {path} must contain exactly {KEY_LENGTH} bytes, "
            f"got {len(key)}"
        )

    logger.debug("Loaded master key from %s", path)
    return key
