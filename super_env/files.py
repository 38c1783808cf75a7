"""Filesystem helpers shared by the key manager, the cipher and the editor."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path


def write_atomic(path: str | Path, data: bytes, mode: int | None = None) -> None:
    """
    Write bytes to a file without ever leaving it half-written.

    The data goes to a temporary file in the target directory which is then
    renamed over the destination. If `mode` is given, the file gets those
    permissions before the rename; otherwise an existing file's permissions
    are kept and a new file gets 0o666 filtered through the umask,
    like a plain open() would create it.
    """
    path = Path(path)
    directory = path.parent

    if mode is None:
        try:
            mode = path.stat().st_mode & 0o777
        except FileNotFoundError:
            mode = 0o666 & ~_current_umask()

    fd, tmp_name = tempfile.mkstemp(dir=directory, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "wb") as handle:
            handle.write(data)
            handle.flush()
            os.fsync(handle.fileno())
        os.chmod(tmp_name, mode)
        os.replace(tmp_name, path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise


def read_text(path: str | Path) -> str:
    """Read a UTF-8 text file without newline translation."""
    with open(path, encoding="utf-8", newline="") as handle:
        return handle.read()


def _current_umask() -> int:
    umask = os.umask(0)
    os.umask(umask)
    return umask
