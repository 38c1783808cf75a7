"""
Exceptions raised by super-env.

Every error derives from SuperEnvError so callers (and the CLI) can catch
the whole family at once. Some also derive from a builtin exception so that
code written against plain Python errors keeps working, e.g. a missing key
file is still a FileNotFoundError.
"""

from __future__ import annotations

from dataclasses import dataclass


class SuperEnvError(Exception):
    """Base exception for super-env errors."""

    def __init__(self, message: str, from_exception: Exception | None = None) -> None:
        self.message = message
        self.from_exception = from_exception
        super().__init__(message)
        if from_exception:
            self.__cause__ = from_exception


class KeyNotFoundError(SuperEnvError, FileNotFoundError):
    """Raised when the master key file does not exist."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"Master key file not found: {path}")


class InvalidKeyError(SuperEnvError, ValueError):
    """Raised when a master key is empty or has the wrong length."""


class MalformedRecordError(SuperEnvError, ValueError):
    """Raised when an encrypted record is not `<base64 iv>:<base64 ciphertext>`."""


class DecryptionError(SuperEnvError):
    """
    Raised when a well-formed record cannot be decrypted.

    Wrong key, corrupted ciphertext, truncated data and bad padding all end
    up here with the same message.
    """


class EditLockedError(SuperEnvError):
    """Raised when another edit session holds the lock on an encrypted file."""

    def __init__(self, lock_path: str) -> None:
        self.lock_path = lock_path
        super().__init__(
            f"Another edit session is in progress (lock file: {lock_path}). "
            "Remove the lock file if no editor is running."
        )


class EditorError(SuperEnvError):
    """Raised when the editor cannot be started or exits with a failure."""


@dataclass
class FieldError:
    """A single field-level validation failure."""

    field: str
    message: str

    def __str__(self) -> str:
        return f"{self.field}: {self.message}"


class EnvValidationError(SuperEnvError):
    """Raised when environment variables do not satisfy a schema."""

    def __init__(self, errors: list[FieldError]) -> None:
        self.errors = errors
        details = "; ".join(str(error) for error in errors)
        super().__init__(f"Environment variables validation failed: {details}")
