"""
super-env: Secure .env file management with type-safety.

Keeps a project's .env file encrypted at rest (.env.enc) so it can be
committed, and validates environment variables against a pydantic schema.

Basic Usage:
    super-env init
    super-env encrypt
    super-env decrypt
"""

__version__ = "0.1.4"

from .config import ConfigurationError, SuperEnvConfig
from .crypto import decrypt, decrypt_file, derive_key, encrypt, encrypt_file
from .env import (
    Env,
    EnvOptions,
    ValidationResult,
    create_env,
    create_split_env,
    ensure_decrypted,
    filter_client_env,
    load_encrypted_env,
    load_env_file,
    parse_env,
    validate_env,
)
from .errors import (
    DecryptionError,
    EditLockedError,
    EditorError,
    EnvValidationError,
    FieldError,
    InvalidKeyError,
    KeyNotFoundError,
    MalformedRecordError,
    SuperEnvError,
)
from .keys import MASTER_KEY_FILENAME, generate_key, load_key, save_key

__all__ = [
    "MASTER_KEY_FILENAME",
    "generate_key",
    "save_key",
    "load_key",
    "derive_key",
    "encrypt",
    "decrypt",
    "encrypt_file",
    "decrypt_file",
    "SuperEnvConfig",
    "Env",
    "EnvOptions",
    "ValidationResult",
    "create_env",
    "create_split_env",
    "ensure_decrypted",
    "filter_client_env",
    "load_encrypted_env",
    "load_env_file",
    "parse_env",
    "validate_env",
    "SuperEnvError",
    "KeyNotFoundError",
    "InvalidKeyError",
    "MalformedRecordError",
    "DecryptionError",
    "EditLockedError",
    "EditorError",
    "EnvValidationError",
    "ConfigurationError",
    "FieldError",
]
