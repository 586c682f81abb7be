"""Node-style module directory resolution."""

import logging
from pathlib import Path
from typing import List, Union

from rnconfig.utils.manifest import MANIFEST_NAME

logger = logging.getLogger("rnconfig.resolution.node_modules")


def find_node_module_dirs(start: Union[str, Path], name: str) -> List[Path]:
    """Return every installed root of package ``name`` visible from ``start``.

    Mirrors Node's lookup: ``<dir>/node_modules/<name>`` for ``start`` and
    each of its ancestors, nearest first. Directories named
    ``node_modules`` are not searched for a nested ``node_modules``.

    Args:
        start: Directory the lookup starts from (usually the project root).
        name: Package name, possibly scoped (``@scope/pkg``).

    Returns:
        Candidate package roots holding a package.json, nearest first.
    """
    start = Path(start).absolute()
    candidates: List[Path] = []
    for directory in (start, *start.parents):
        if directory.name == "node_modules":
            continue
        candidate = directory / "node_modules" / name
        if (candidate / MANIFEST_NAME).is_file():
            candidates.append(candidate)
    logger.debug("Resolved %s from %s to %d candidate(s)", name, start, len(candidates))
    return candidates


def resolve_node_module_dir(start: Union[str, Path], name: str) -> Path:
    """Return the nearest installed root of ``name``.

    Raises:
        FileNotFoundError: If the package is not installed.
    """
    candidates = find_node_module_dirs(start, name)
    if not candidates:
        raise FileNotFoundError(f"Cannot find module {name!r} from {start}")
    return candidates[0]


__all__ = ["find_node_module_dirs", "resolve_node_module_dir"]
