"""Helpers for keeping secrets out of version control via .gitignore."""

from __future__ import annotations

import logging
from pathlib import Path

logger = logging.getLogger("super_env.gitignore")


def add_to_gitignore(entries: list[str], gitignore_path: str | Path = ".gitignore") -> bool:
    """
    Append entries to a .gitignore file, skipping ones already listed.

    Returns:
        True if the file was modified, False if every entry was present.
    """
    path = Path(gitignore_path)
    content = path.read_text(encoding="utf-8") if path.exists() else ""

    existing = {line.strip() for line in content.splitlines()}
    missing = []
    for entry in entries:
        if entry not in existing:
            missing.append(entry)
            existing.add(entry)

    if not missing:
        return False

    if content and not content.endswith("\n"):
        content += "\n"
    content += "\n".join(missing) + "\n"
    path.write_text(content, encoding="utf-8")

    logger.info("Added %s to %s", ", ".join(missing), path)
    return True


def create_gitignore_if_not_exists(
    entries: list[str], gitignore_path: str | Path = ".gitignore"
) -> bool:
    """
    Create a .gitignore with the given entries, or extend an existing one.

    Returns:
        True if a file was created or modified.
    """
    path = Path(gitignore_path)
    if path.exists():
        return add_to_gitignore(entries, path)

    path.write_text("\n".join(entries) + "\n", encoding="utf-8")
    logger.info("Created %s with entries: %s", path, ", ".join(entries))
    return True
