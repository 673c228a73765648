"""Filesystem access for the tries root.

Lists candidate directories, resolves the "fast create" shortcut, measures
directory trees for the delete prompt, and performs confirmed deletion.
"""

from __future__ import annotations

import os
import shutil
from pathlib import Path

from loguru import logger

from .entry import Entry
from .text import dated_name, sanitize_query, split_date_prefixed, today_prefix

TRASH_DIR_NAME = ".try_trash"


def _created_at(stat_result: os.stat_result) -> float | None:
    birth = getattr(stat_result, "st_birthtime", None)
    if birth is not None:
        return float(birth)
    return float(stat_result.st_ctime)


def scan_entries(root: Path) -> list[Entry]:
    """Return one ``Entry`` per child directory of ``root``.

    Failure to list ``root`` itself propagates. Children whose metadata
    cannot be read are skipped, as is the reserved trash directory.
    """
    entries: list[Entry] = []
    with os.scandir(root) as it:
        for dirent in it:
            if dirent.name == TRASH_DIR_NAME:
                continue
            try:
                if not dirent.is_dir():
                    continue
                info = dirent.stat()
            except OSError as exc:
                logger.debug("skipping unreadable entry {}: {}", dirent.path, exc)
                continue
            entries.append(
                Entry(
                    name=dirent.name,
                    location=Path(dirent.path).absolute(),
                    created_at=_created_at(info),
                    modified_at=float(info.st_mtime),
                )
            )
    logger.debug("scanned {} entries under {}", len(entries), root)
    return entries


def normalize_query_for_match(query: str) -> str:
    """Sanitize ``query`` and collapse each whitespace run into a single ``-``."""
    out: list[str] = []
    last_dash = False
    for ch in sanitize_query(query):
        if ch.isspace():
            if not last_dash:
                out.append("-")
                last_dash = True
        else:
            out.append(ch)
            last_dash = False
    return "".join(out)


def fast_create_target_if_no_exact(root: Path, query: str, now: float | None = None) -> Path | None:
    """Return today's path for ``query`` unless an existing entry already matches it.

    Existing names are compared with any date prefix stripped. A missing or
    unreadable root counts as having no matches.
    """
    normalized = normalize_query_for_match(query)
    try:
        children = list(os.scandir(root))
    except OSError:
        children = []
    for dirent in children:
        if dirent.name == TRASH_DIR_NAME:
            continue
        try:
            if not dirent.is_dir():
                continue
        except OSError:
            continue
        split = split_date_prefixed(dirent.name)
        stripped = split[1] if split is not None else dirent.name
        if stripped == normalized:
            return None
    return root / dated_name(today_prefix(now), normalized)


def directory_stats(path: Path) -> tuple[int, int]:
    """Return ``(file_count, total_bytes)`` for regular files under ``path``.

    Symlinks are not followed and unreadable children are ignored.
    """
    files = 0
    total = 0
    stack = [path]
    while stack:
        current = stack.pop()
        try:
            info = current.lstat()
        except OSError:
            continue
        if current.is_symlink():
            continue
        if current.is_file():
            files += 1
            total += info.st_size
        elif current.is_dir():
            try:
                stack.extend(current.iterdir())
            except OSError:
                continue
    return files, total


def delete_entry(path: Path) -> None:
    """Remove the directory tree at ``path``."""
    logger.debug("deleting {}", path)
    shutil.rmtree(path)
