"""
Environment loading and schema validation for super-env.

This module parses .env files, loads them into the process environment
(directly or from an encrypted file), and validates the result against a
pydantic model.

Example:
    from pydantic import BaseModel
    from super_env import Env

    class Settings(BaseModel):
        DATABASE_URL: str
        PORT: int = 8000

    env = Env(Settings)
    env.get().PORT
"""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from functools import cached_property
from pathlib import Path
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ValidationError

from .crypto import DEFAULT_ENCRYPTED_FILE, DEFAULT_ENV_FILE, decrypt, decrypt_file
from .errors import EnvValidationError, FieldError
from .files import read_text
from .keys import MASTER_KEY_FILENAME, load_key

logger = logging.getLogger("super_env.env")

SchemaT = TypeVar("SchemaT", bound=BaseModel)


@dataclass
class EnvVariable:
    """Represents a single environment variable from an env file."""

    key: str
    value: str
    line_number: int


_INLINE_COMMENT = re.compile(r"\s#")


def _parse_value(raw_value: str) -> str:
    """Unquote a value, or drop a trailing ` # comment` from an unquoted one."""
    if raw_value[:1] in ('"', "'"):
        end = raw_value.find(raw_value[0], 1)
        if end != -1:
            return raw_value[1:end]
        return raw_value

    match = _INLINE_COMMENT.search(raw_value)
    if match:
        raw_value = raw_value[: match.start()]
    return raw_value.rstrip()


def parse_lines(lines: list[str]) -> list[EnvVariable]:
    """Parse lines into EnvVariable objects."""
    variables = []

    for line_num, line in enumerate(lines, 1):
        stripped_line = line.strip()

        if not stripped_line or stripped_line.startswith("#"):
            continue

        key, sep, raw_value = stripped_line.partition("=")
        key = key.strip()
        if key.startswith("export "):
            key = key[len("export "):].strip()

        if not sep or not key:
            logger.debug("Skipping line %d: not a KEY=value assignment", line_num)
            continue

        variables.append(
            EnvVariable(
                key=key,
                value=_parse_value(raw_value.strip()),
                line_number=line_num,
            )
        )

    return variables


def parse_env(content: str) -> dict[str, str]:
    """Parse .env content into a mapping. Later assignments win."""
    values: dict[str, str] = {}
    for var in parse_lines(content.splitlines()):
        if var.key in values:
            logger.debug("%s redefined on line %d", var.key, var.line_number)
        values[var.key] = var.value
    return values


def load_env_file(path: str | Path = DEFAULT_ENV_FILE, override: bool = False) -> dict[str, str]:
    """
    Load a plaintext .env file into os.environ.

    Variables already present in the environment are left alone unless
    `override` is set.

    Returns:
        The variables parsed from the file.
    """
    values = parse_env(read_text(path))
    _apply_to_environ(values, override)
    logger.debug("Loaded %d variable(s) from %s", len(values), path)
    return values


def load_encrypted_env(
    encrypted_path: str | Path = DEFAULT_ENCRYPTED_FILE,
    key_path: str | Path = MASTER_KEY_FILENAME,
    apply: bool = False,
    override: bool = False,
) -> dict[str, str]:
    """
    Decrypt an encrypted .env file in memory and parse it.

    Nothing is written to disk. With `apply`, the variables are also loaded
    into os.environ.
    """
    master_key = load_key(key_path)
    values = parse_env(decrypt(read_text(encrypted_path), master_key))
    if apply:
        _apply_to_environ(values, override)
    logger.debug("Loaded %d encrypted variable(s) from %s", len(values), encrypted_path)
    return values


def _apply_to_environ(values: Mapping[str, str], override: bool) -> None:
    for key, value in values.items():
        if override or key not in os.environ:
            os.environ[key] = value


def ensure_decrypted(
    encrypted_path: str | Path = DEFAULT_ENCRYPTED_FILE,
    output_path: str | Path = DEFAULT_ENV_FILE,
    key_path: str | Path = MASTER_KEY_FILENAME,
    skip_if_output_exists: bool = True,
) -> bool:
    """
    Decrypt the encrypted .env file before the application starts.

    Missing encrypted or key files only produce a warning so that
    environments which inject variables another way keep working.

    Returns:
        True if the file was decrypted, False if the step was skipped.
    """
    if not Path(encrypted_path).exists():
        logger.warning("Encrypted file %s not found", encrypted_path)
        return False

    if not Path(key_path).exists():
        logger.warning("Key file %s not found", key_path)
        return False

    if skip_if_output_exists and Path(output_path).exists():
        logger.debug("%s already exists, skipping decryption", output_path)
        return False

    decrypt_file(encrypted_path, output_path, key_path)
    return True


@dataclass
class ValidationResult(Generic[SchemaT]):
    """Result of validating raw environment values against a schema."""

    success: bool
    data: SchemaT | None = None
    errors: list[FieldError] = field(default_factory=list)


def validate_env(schema: type[SchemaT], raw: Mapping[str, str]) -> ValidationResult[SchemaT]:
    """
    Validate a mapping of raw string values against a pydantic model.

    Never raises for invalid input; field-level problems are returned in
    the result instead.
    """
    try:
        data = schema.model_validate(dict(raw))
    except ValidationError as exc:
        errors = [
            FieldError(
                field=".".join(str(part) for part in error["loc"]) or "<root>",
                message=error["msg"],
            )
            for error in exc.errors()
        ]
        return ValidationResult(success=False, errors=errors)

    return ValidationResult(success=True, data=data)


@dataclass
class EnvOptions:
    """Options for creating a validated environment."""

    env_file_path: str | None = DEFAULT_ENV_FILE
    log_validation_errors: bool = True
    throw_on_validation_failure: bool = True
    skip_env_load: bool = False
    client_prefix: str = "PUBLIC_"


def create_env(schema: type[SchemaT], options: EnvOptions | None = None) -> SchemaT | None:
    """
    Build a validated settings object from the process environment.

    The .env file named in the options is loaded first (without overriding
    variables that are already set), then os.environ is validated.

    Returns:
        The validated model, or None when validation fails and
        `throw_on_validation_failure` is off.

    Raises:
        EnvValidationError: If validation fails and throwing is enabled.
    """
    options = options or EnvOptions()

    if (
        not options.skip_env_load
        and options.env_file_path
        and Path(options.env_file_path).exists()
    ):
        load_env_file(options.env_file_path)

    result = validate_env(schema, os.environ)
    if result.success:
        return result.data

    if options.log_validation_errors:
        logger.error("Invalid environment variables:")
        for error in result.errors:
            logger.error("- %s", error)

    if options.throw_on_validation_failure:
        raise EnvValidationError(result.errors)

    return None


def create_split_env(
    server: type[BaseModel],
    client: type[BaseModel],
    options: EnvOptions | None = None,
) -> dict[str, Any]:
    """
    Validate separate server and client schemas and merge the results.

    Server variables are required: a failure there follows the usual
    options. Client validation never raises, so a missing client variable
    only drops the client half.
    """
    options = options or EnvOptions()

    server_settings = create_env(server, options)
    client_settings = create_env(
        client, replace(options, throw_on_validation_failure=False, skip_env_load=True)
    )

    merged: dict[str, Any] = {}
    if server_settings is not None:
        merged.update(server_settings.model_dump())
    if client_settings is not None:
        merged.update(client_settings.model_dump())
    return merged


def filter_client_env(env: Mapping[str, Any], prefix: str) -> dict[str, Any]:
    """Return only the variables whose name starts with `prefix`."""
    return {key: value for key, value in env.items() if key.startswith(prefix)}


class Env(Generic[SchemaT]):
    """
    Validated environment bound to a schema.

    Validation runs on first access and the result is kept for the lifetime
    of the instance.
    """

    def __init__(self, schema: type[SchemaT], options: EnvOptions | None = None) -> None:
        self.schema = schema
        self.options = options or EnvOptions()

    @cached_property
    def _settings(self) -> SchemaT | None:
        return create_env(self.schema, self.options)

    def get(self) -> SchemaT | None:
        """Get the validated environment."""
        return self._settings

    def get_value(self, key: str) -> Any:
        """Get a single validated variable."""
        settings = self.get()
        if settings is None:
            raise KeyError(key)
        return getattr(settings, key)

    def get_client_env(self, prefix: str | None = None) -> dict[str, Any]:
        """Get the variables meant for client-side code."""
        settings = self.get()
        if settings is None:
            return {}
        return filter_client_env(settings.model_dump(), prefix or self.options.client_prefix)
