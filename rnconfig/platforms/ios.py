"""iOS inference helpers and dependency config builder."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any, Dict, Optional, Union

from rnconfig.config.schema import PODSPEC_EXTENSION, with_podspec_extension
from rnconfig.config.settings import ResolverSettings

logger = logging.getLogger("rnconfig.platforms.ios")

PathLike = Union[str, Path]

# Matches `s.name = "Foo"` / `spec.name = 'Foo'` in a Ruby podspec
PODSPEC_NAME_RE = re.compile(r"""\.name\s*=\s*(['"])(?P<name>[^'"]+)\1""")


def find_ios_podspec_name(folder: PathLike) -> Optional[str]:
    """Return the base name of the single podspec in a package root.

    Zero or several candidates give None.
    """
    podspecs = sorted(p for p in Path(folder).glob(f"*{PODSPEC_EXTENSION}") if p.is_file())
    if len(podspecs) != 1:
        if podspecs:
            logger.debug(
                "Several podspecs in %s, not guessing: %s",
                folder,
                ", ".join(p.name for p in podspecs),
            )
        return None
    return podspecs[0].name[: -len(PODSPEC_EXTENSION)]


def read_podspec_name(podspec_path: PathLike) -> str:
    """Return the pod name a podspec declares.

    Falls back to the file's base name when no ``.name =`` assignment is
    found, which is what CocoaPods expects for conventional podspecs.
    """
    podspec_path = Path(podspec_path)
    match = PODSPEC_NAME_RE.search(podspec_path.read_text(encoding="utf-8", errors="ignore"))
    if match:
        return match.group("name")
    name = podspec_path.name
    return name[: -len(PODSPEC_EXTENSION)] if name.endswith(PODSPEC_EXTENSION) else name


def dependency_config(
    folder: PathLike,
    user_config: Optional[Dict[str, Any]] = None,
    settings: Optional[ResolverSettings] = None,
) -> Optional[Dict[str, Any]]:
    """Build the iOS variant of a dependency's config.

    The podspec name discovery step returns bare names (an older linking
    tool still relies on that); the extension is added back here so the
    stored value is always a file name.

    Returns:
        iOS config mapping (camelCase keys) or None without a podspec.
    """
    config = dict(user_config or {})
    podspec = config.get("podspec") or find_ios_podspec_name(folder)
    if not podspec:
        return None

    config["podspec"] = with_podspec_extension(podspec)
    return config


def project_config(
    folder: PathLike,
    user_config: Optional[Dict[str, Any]] = None,
    settings: Optional[ResolverSettings] = None,
) -> Optional[Dict[str, Any]]:
    """Infer the consuming app's iOS settings.

    Returns:
        ``{sourceDir, podfile, xcodeProject}`` or None without an ``ios``
        folder.
    """
    folder = Path(folder)
    config = dict(user_config or {})

    source_dir = folder / config.get("sourceDir", "ios")
    if not source_dir.is_dir():
        return None

    podfile = source_dir / "Podfile"
    projects = sorted(
        p for p in source_dir.glob("*.xcodeproj") if p.is_dir() and p.name != "Pods.xcodeproj"
    )
    config["sourceDir"] = str(source_dir)
    config.setdefault("podfile", str(podfile) if podfile.is_file() else None)
    config.setdefault("xcodeProject", str(projects[0]) if projects else None)
    return config


__all__ = [
    "find_ios_podspec_name",
    "read_podspec_name",
    "dependency_config",
    "project_config",
]
