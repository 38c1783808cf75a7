"""
Decrypt-edit-reencrypt session for an encrypted .env file.

Only one session per encrypted file may run at a time. The session holds an
advisory lock file `<encrypted file>.lock`, created exclusively, for its
whole duration. The plaintext lives in a private temporary file next to the
encrypted one and is removed when the session ends, whatever the outcome.
"""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from .crypto import DEFAULT_ENCRYPTED_FILE, decrypt, encrypt
from .errors import EditLockedError, EditorError
from .files import read_text, write_atomic
from .keys import MASTER_KEY_FILENAME, load_key

logger = logging.getLogger("super_env.edit")

DEFAULT_EDITOR = "vi"


def resolve_editor(editor: str | None = None) -> str:
    """Pick the editor command: explicit value, then $VISUAL, then $EDITOR."""
    return editor or os.environ.get("VISUAL") or os.environ.get("EDITOR") or DEFAULT_EDITOR


@contextmanager
def edit_lock(path: str | Path) -> Iterator[Path]:
    """Hold the advisory lock for an encrypted file."""
    lock_path = Path(f"{path}.lock")
    try:
        fd = os.open(lock_path, os.O_CREAT | os.O_EXCL | os.O_WRONLY, 0o600)
    except FileExistsError as exc:
        raise EditLockedError(str(lock_path)) from exc

    try:
        with os.fdopen(fd, "w") as handle:
            handle.write(f"{os.getpid()}\n")
        yield lock_path
    finally:
        lock_path.unlink(missing_ok=True)


def run_editor(editor: str, file_path: str | Path) -> None:
    """Run the editor on a file and wait for it to exit."""
    command = shlex.split(editor) + [str(file_path)]
    logger.debug("Running editor: %s", command[0])

    try:
        completed = subprocess.run(command, check=False)
    except OSError as exc:
        raise EditorError(f"Could not start editor '{editor}': {exc}", exc) from exc

    if completed.returncode != 0:
        raise EditorError(
            f"Editor exited with code {completed.returncode}; "
            "the encrypted file was left unchanged"
        )


def edit_encrypted_file(
    encrypted_path: str | Path = DEFAULT_ENCRYPTED_FILE,
    key_path: str | Path = MASTER_KEY_FILENAME,
    editor: str | None = None,
) -> bool:
    """
    Open the decrypted content of an encrypted file in an editor.

    The edited text is re-encrypted only when it changed, since a fresh IV
    would otherwise rewrite the file for nothing.

    Returns:
        True if the encrypted file was updated.

    Raises:
        EditLockedError: If another session is editing the same file.
        EditorError: If the editor fails; the encrypted file is not touched.
        KeyNotFoundError, FileNotFoundError, MalformedRecordError,
        DecryptionError: From loading and decrypting the file.
    """
    encrypted_path = Path(encrypted_path)
    command = resolve_editor(editor)

    with edit_lock(encrypted_path):
        master_key = load_key(key_path)
        original = decrypt(read_text(encrypted_path), master_key)

        directory = encrypted_path.parent
        fd, tmp_name = tempfile.mkstemp(dir=directory, prefix=".env.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="") as handle:
                handle.write(original)

            run_editor(command, tmp_name)
            edited = read_text(tmp_name)
        finally:
            Path(tmp_name).unlink(missing_ok=True)

        if edited == original:
            logger.info("No changes made to %s", encrypted_path)
            return False

        record = encrypt(edited, master_key)
        write_atomic(encrypted_path, record.encode("utf-8"))

    logger.info("Re-encrypted %s", encrypted_path)
    return True
