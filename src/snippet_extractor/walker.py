"""Enumerate candidate source files under the extraction root."""

from __future__ import annotations

import os
from collections.abc import Iterable
from dataclasses import dataclass
from fnmatch import fnmatchcase
from pathlib import Path

from snippet_extractor.errors import UnreadableFileError
from snippet_extractor.logging import get_logger

logger = get_logger("walker")

_EXCLUDED_DIRS = {
    ".git",
    ".hg",
    ".svn",
    "node_modules",
    "__pycache__",
}


@dataclass(frozen=True)
class SourceFile:
    path: Path
    relative_path: str
    text: str


def normalize_extensions(extensions: Iterable[str]) -> set[str]:
    """Lower-case extensions and make sure each one starts with a dot."""
    normalized: set[str] = set()
    for ext in extensions:
        ext = ext.strip().lower()
        if not ext:
            continue
        normalized.add(ext if ext.startswith(".") else f".{ext}")
    return normalized


def is_excluded(relative_path: str, patterns: Iterable[str]) -> bool:
    """Return ``True`` when the POSIX path or any of its components matches a glob."""
    parts = relative_path.split("/")
    for pattern in patterns:
        pattern = pattern.strip().rstrip("/")
        if not pattern:
            continue
        if fnmatchcase(relative_path, pattern):
            return True
        if any(fnmatchcase(part, pattern) for part in parts):
            return True
    return False


def collect_source_files(
    root: Path,
    extensions: Iterable[str],
    exclude: Iterable[str] = (),
    skip_dirs: Iterable[Path] = (),
) -> tuple[list[SourceFile], list[UnreadableFileError]]:
    """Read every matching file below ``root`` in a stable, sorted order.

    Files that cannot be read or decoded are reported instead of raised, so
    one bad file never aborts a run.

    Returns:
        A tuple of ``(source_files, unreadable)``.
    """
    root = root.resolve()
    if not root.is_dir():
        raise FileNotFoundError(f"Root directory does not exist: {root}")

    allowed = normalize_extensions(extensions)
    patterns = list(exclude)
    skipped_dirs = {Path(path).resolve() for path in skip_dirs}

    files: list[SourceFile] = []
    unreadable: list[UnreadableFileError] = []

    for dirpath, dirnames, filenames in os.walk(root):
        current = Path(dirpath)
        kept_dirs = []
        for name in sorted(dirnames):
            child = current / name
            rel_dir = child.relative_to(root).as_posix()
            if name in _EXCLUDED_DIRS or child.resolve() in skipped_dirs or is_excluded(rel_dir, patterns):
                continue
            kept_dirs.append(name)
        dirnames[:] = kept_dirs

        for name in sorted(filenames):
            path = current / name
            if path.suffix.lower() not in allowed:
                continue
            rel_path = path.relative_to(root).as_posix()
            if is_excluded(rel_path, patterns):
                continue
            try:
                text = path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as exc:
                error = UnreadableFileError(rel_path, str(exc))
                logger.warning("%s; skipping", error)
                unreadable.append(error)
                continue
            files.append(SourceFile(path=path, relative_path=rel_path, text=text))

    return files, unreadable
