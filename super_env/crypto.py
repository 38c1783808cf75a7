"""
Cipher core: key derivation and encryption of .env content.

An encrypted record is a single line of text:

    <base64 iv>:<base64 ciphertext>

- Key derivation: scrypt(master_key, salt="salt", n=2**14, r=8, p=1) -> 32 bytes
- Cipher: AES-256-CBC with PKCS7 padding and a random 16-byte IV per call

The record carries no version tag, so changing the salt, the IV size or the
cipher would make existing files unreadable. Such a change needs a new
record format with an explicit version prefix.

Security Note:
    CBC provides confidentiality only. Every decryption failure is reported
    as the same DecryptionError so callers cannot tell a wrong key from a
    corrupted payload.
    Never log plaintext, ciphertext or key material.
"""

from __future__ import annotations

import base64
import binascii
import logging
import os
from pathlib import Path

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.primitives.kdf.scrypt import Scrypt

from .errors import DecryptionError, InvalidKeyError, MalformedRecordError
from .files import read_text, write_atomic
from .keys import KEY_LENGTH, MASTER_KEY_FILENAME, load_key

logger = logging.getLogger("super_env.crypto")

IV_SIZE = 16  # AES block size
SEPARATOR = ":"

# Fixed salt shared by every installation; part of the on-disk format.
KDF_SALT = b"salt"
SCRYPT_N = 2**14
SCRYPT_R = 8
SCRYPT_P = 1

DEFAULT_ENV_FILE = ".env"
DEFAULT_ENCRYPTED_FILE = ".env.enc"

_DECRYPTION_FAILED = "Unable to decrypt: wrong master key or corrupted data"


def derive_key(master_key: bytes) -> bytes:
    """Stretch a master key of any length into a 32-byte AES key."""
    if not master_key:
        raise InvalidKeyError("Master key must not be empty")

    kdf = Scrypt(salt=KDF_SALT, length=KEY_LENGTH, n=SCRYPT_N, r=SCRYPT_R, p=SCRYPT_P)
    return kdf.derive(master_key)


def encrypt(plaintext: str, master_key: bytes) -> str:
    """
    Encrypt text with the master key.

    Every call uses a fresh IV, so encrypting the same text twice gives two
    different records.

    Args:
        plaintext: Text to encrypt.
        master_key: Raw master key bytes.

    Returns:
        The encrypted record, `<base64 iv>:<base64 ciphertext>`.
    """
    iv = os.urandom(IV_SIZE)
    key = derive_key(master_key)

    padder = padding.PKCS7(algorithms.AES.block_size).padder()
    padded = padder.update(plaintext.encode("utf-8")) + padder.finalize()

    encryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).encryptor()
    ciphertext = encryptor.update(padded) + encryptor.finalize()

    return SEPARATOR.join(
        (
            base64.b64encode(iv).decode("ascii"),
            base64.b64encode(ciphertext).decode("ascii"),
        )
    )


def _parse_record(record: str) -> tuple[bytes, bytes]:
    """Split a record into (iv, ciphertext) bytes."""
    iv_part, sep, ct_part = record.strip().partition(SEPARATOR)
    if not sep or not iv_part or not ct_part:
        raise MalformedRecordError(
            "Invalid encrypted text format: expected <base64 iv>:<base64 ciphertext>"
        )

    try:
        iv = base64.b64decode(iv_part, validate=True)
        ciphertext = base64.b64decode(ct_part, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise MalformedRecordError("Invalid encrypted text format: bad base64 data", exc) from exc

    if len(iv) != IV_SIZE:
        raise MalformedRecordError(
            f"Invalid encrypted text format: IV must be {IV_SIZE} bytes, got {len(iv)}"
        )

    return iv, ciphertext


def decrypt(record: str, master_key: bytes) -> str:
    """
    Decrypt a record produced by `encrypt`.

    Args:
        record: The encrypted record.
        master_key: Raw master key bytes.

    Returns:
        The original text.

    Raises:
        MalformedRecordError: If the record is not two base64 fields joined by ':'.
        DecryptionError: If the key is wrong or the data is corrupted or truncated.
    """
    iv, ciphertext = _parse_record(record)
    key = derive_key(master_key)

    try:
        decryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).decryptor()
        padded = decryptor.update(ciphertext) + decryptor.finalize()

        unpadder = padding.PKCS7(algorithms.AES.block_size).unpadder()
        data = unpadder.update(padded) + unpadder.finalize()

        return data.decode("utf-8")
    except ValueError as exc:
        # UnicodeDecodeError is a ValueError too.
        raise DecryptionError(_DECRYPTION_FAILED) from exc


def encrypt_file(
    input_path: str | Path = DEFAULT_ENV_FILE,
    output_path: str | Path = DEFAULT_ENCRYPTED_FILE,
    key_path: str | Path = MASTER_KEY_FILENAME,
) -> None:
    """
    Encrypt a plaintext .env file into an encrypted record file.

    Raises:
        KeyNotFoundError: If the key file does not exist.
        FileNotFoundError: If the input file does not exist.
    """
    master_key = load_key(key_path)
    content = read_text(input_path)

    record = encrypt(content, master_key)
    write_atomic(output_path, record.encode("utf-8"))

    logger.info("Encrypted %s -> %s (%d bytes)", input_path, output_path, len(record))


def decrypt_file(
    input_path: str | Path = DEFAULT_ENCRYPTED_FILE,
    output_path: str | Path = DEFAULT_ENV_FILE,
    key_path: str | Path = MASTER_KEY_FILENAME,
) -> None:
    """
    Decrypt an encrypted record file back into a plaintext .env file.

    The plaintext file is created readable by its owner only.

    Raises:
        KeyNotFoundError: If the key file does not exist.
        FileNotFoundError: If the input file does not exist.
        MalformedRecordError: If the file is not a valid record.
        DecryptionError: If the record cannot be decrypted with the key.
    """
    master_key = load_key(key_path)
    record = read_text(input_path)

    content = decrypt(record, master_key)
    write_atomic(output_path, content.encode("utf-8"), mode=0o600)

    logger.info("Decrypted %s -> %s", input_path, output_path)
