"""Deterministic file scanner using scandir and a generator."""

import fnmatch
import logging
import os
from pathlib import Path
from typing import Generator, Iterable, List, Optional

logger = logging.getLogger("rnconfig.utils.scanner")

# Always skipped, in addition to caller-provided patterns.
_ALWAYS_IGNORED = [".git", ".svn", ".hg", "__pycache__"]


def _is_ignored(path: Path, root_path: Path, ignore_patterns: Iterable[str]) -> bool:
    """Check a path against ignore patterns.

    A pattern matches either the entry name (``build``) or the path
    relative to the scan root (``src/test/*``).
    """
    str_path = str(path.relative_to(root_path)).replace(os.sep, "/")
    for pattern in ignore_patterns:
        pattern = pattern.rstrip("/")
        if fnmatch.fnmatch(path.name, pattern) or fnmatch.fnmatch(str_path, pattern):
            return True
    return False


def scan_files(
    root_path: Path,
    patterns: List[str],
    ignore_patterns: Optional[List[str]] = None,
    recursive: bool = True,
) -> Generator[Path, None, None]:
    """Scan files matching patterns, respecting ignores.

    Entries are visited in sorted order so repeated scans over the same
    tree yield the same sequence.

    Args:
        root_path: Root directory to scan.
        patterns: Glob patterns to include (e.g. ['*.java', 'AndroidManifest.xml']).
        ignore_patterns: Directory or file patterns to skip.
        recursive: Whether to descend into subdirectories.

    Yields:
        Path objects for matching files.
    """
    root_path = Path(root_path)
    if not root_path.is_dir():
        return
    ignores = list(ignore_patterns or []) + _ALWAYS_IGNORED

    stack = [root_path]
    while stack:
        current_dir = stack.pop()

        try:
            entries = sorted(os.scandir(current_dir), key=lambda e: e.name)
        except OSError as exc:
            logger.debug("Cannot list %s: %s", current_dir, exc)
            continue

        dirs = []
        for entry in entries:
            path = Path(entry.path)
            if _is_ignored(path, root_path, ignores):
                continue

            if entry.is_dir():
                if recursive:
                    dirs.append(path)
                continue

            str_path = str(path.relative_to(root_path)).replace(os.sep, "/")
            if any(
                fnmatch.fnmatch(path.name, pattern) or fnmatch.fnmatch(str_path, pattern)
                for pattern in patterns
            ):
                yield path

        # Reversed so popping keeps alphabetical order
        stack.extend(reversed(dirs))
