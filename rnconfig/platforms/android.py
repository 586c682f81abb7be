"""Android inference helpers and dependency config builder.

Locates the Android source folder, the ``AndroidManifest.xml`` and the
class implementing ``ReactPackage`` inside an installed package. Java
sources are parsed with tree-sitter; Kotlin sources are matched with a
regular expression.

Every helper fails soft: absence of Android code yields ``None``. The
only hard error is a malformed manifest (``ParseError``).
"""

from __future__ import annotations

import logging
import re
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

import tree_sitter_java as tsj
from tree_sitter import Language, Parser

from rnconfig.config.settings import DEFAULT_SOURCE_IGNORE_PATTERNS, ResolverSettings
from rnconfig.errors import ParseError
from rnconfig.utils.scanner import scan_files

logger = logging.getLogger("rnconfig.platforms.android")

JAVA_LANGUAGE = Language(tsj.language())

PathLike = Union[str, Path]

MANIFEST_NAME = "AndroidManifest.xml"

# Superclass or interface names that mark a native module package
# (ReactPackage, TurboReactPackage, BaseReactPackage, ...)
REACT_PACKAGE_RE = re.compile(r"\b\w*ReactPackage\b")

# Heritage character: stops at the class body or at the next declaration
_KOTLIN_HERITAGE_CHAR = r"(?:(?!\b(?:class|object|interface|fun|val|var)\b)[^{])"

# `[modifiers] class Name[<T>] [ctor modifiers](params) : ...ReactPackage`
KOTLIN_CLASS_RE = re.compile(
    r"^[ \t]*(?:[\w@]+[ \t]+)*class[ \t]+(\w+)\s*(?:<[^>{]*>)?"
    r"\s*(?:[\w@ \t]*\((?:[^()]|\([^()]*\))*\))?\s*:"
    + _KOTLIN_HERITAGE_CHAR
    + r"*?\b\w*ReactPackage\b",
    flags=re.MULTILINE,
)

KOTLIN_COMMENT_RE = re.compile(r"/\*.*?\*/|//[^\n]*", flags=re.DOTALL)

KOTLIN_PACKAGE_RE = re.compile(r"^\s*package\s+([A-Za-z_][\w.]*)", flags=re.MULTILINE)


# ---------------------------------------------------------------------------
# Inference helpers
# ---------------------------------------------------------------------------


def find_android_source_dir(folder: PathLike) -> Optional[Path]:
    """Return the Android source folder of a package or app.

    The nested ``android/app`` layout wins over the flat ``android`` one.
    """
    folder = Path(folder)
    for candidate in (folder / "android" / "app", folder / "android"):
        if candidate.is_dir():
            return candidate
    return None


def find_android_manifest(
    android_dir: PathLike, ignore_patterns: Optional[Sequence[str]] = None
) -> Optional[Path]:
    """Return the path to the manifest inside an Android source tree."""
    android_dir = Path(android_dir)
    conventional = android_dir / "src" / "main" / MANIFEST_NAME
    if conventional.is_file():
        return conventional

    ignores = list(ignore_patterns if ignore_patterns is not None else DEFAULT_SOURCE_IGNORE_PATTERNS)
    for path in scan_files(android_dir, [MANIFEST_NAME], ignore_patterns=ignores):
        return path
    return None


def read_android_manifest(manifest_path: PathLike) -> Optional[str]:
    """Return the ``package`` attribute declared by a manifest.

    Raises:
        ParseError: If the file is not well-formed XML.
    """
    try:
        tree = ET.parse(manifest_path)
    except ET.ParseError as exc:
        raise ParseError(f"Malformed Android manifest: {exc}", path=manifest_path) from exc

    package = tree.getroot().get("package")
    if not package:
        logger.debug("Manifest %s declares no package attribute", manifest_path)
        return None
    return package


def _node_text(content: bytes, node) -> str:
    return content[node.start_byte : node.end_byte].decode("utf8", errors="ignore").strip()


def _java_package_classes(content: bytes) -> List[str]:
    """Return qualified names of top-level Java classes extending *ReactPackage."""
    tree = Parser(JAVA_LANGUAGE).parse(content)

    package_name: Optional[str] = None
    class_names: List[str] = []
    for node in tree.root_node.named_children:
        if node.type == "package_declaration":
            for child in node.named_children:
                if child.type in ("scoped_identifier", "identifier"):
                    package_name = _node_text(content, child)
        elif node.type == "class_declaration":
            heritage = " ".join(
                _node_text(content, child)
                for child in node.children
                if child.type in ("superclass", "super_interfaces")
            )
            name_node = node.child_by_field_name("name")
            if name_node is not None and REACT_PACKAGE_RE.search(heritage):
                class_names.append(_node_text(content, name_node))

    return [_qualify(package_name, name) for name in class_names]


def _kotlin_package_classes(text: str) -> List[str]:
    text = KOTLIN_COMMENT_RE.sub(" ", text)
    package_match = KOTLIN_PACKAGE_RE.search(text)
    package_name = package_match.group(1) if package_match else None
    return [_qualify(package_name, m.group(1)) for m in KOTLIN_CLASS_RE.finditer(text)]


def _qualify(package_name: Optional[str], class_name: str) -> str:
    return f"{package_name}.{class_name}" if package_name else class_name


def find_android_package_class_name(
    android_dir: PathLike, ignore_patterns: Optional[Sequence[str]] = None
) -> Optional[str]:
    """Find the class implementing the native module package contract.

    Returns:
        The fully qualified class name, or None when no class or more than
        one distinct class qualifies.
    """
    ignores = list(ignore_patterns if ignore_patterns is not None else DEFAULT_SOURCE_IGNORE_PATTERNS)
    candidates: List[str] = []

    for path in scan_files(Path(android_dir), ["*.java", "*.kt"], ignore_patterns=ignores):
        try:
            content = path.read_bytes()
        except OSError as exc:
            logger.debug("Cannot read %s: %s", path, exc)
            continue

        if path.suffix == ".java":
            found = _java_package_classes(content)
        else:
            found = _kotlin_package_classes(content.decode("utf8", errors="ignore"))

        for name in found:
            if name not in candidates:
                candidates.append(name)

    if not candidates:
        return None
    if len(candidates) > 1:
        logger.debug(
            "Ambiguous ReactPackage candidates in %s: %s", android_dir, ", ".join(candidates)
        )
        return None
    return candidates[0]


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------


def _ignore_patterns(settings: Optional[ResolverSettings]) -> Optional[List[str]]:
    return settings.source_ignore_patterns if settings is not None else None


def dependency_config(
    folder: PathLike,
    user_config: Optional[Dict[str, Any]] = None,
    settings: Optional[ResolverSettings] = None,
) -> Optional[Dict[str, Any]]:
    """Build the Android variant of a dependency's config.

    Declared ``packageInstance`` and ``packageImportPath`` are used
    verbatim; missing ones are inferred. If either remains unknown the
    package is not Android-linkable and None is returned.

    Args:
        folder: Package root.
        user_config: Declared Android block (package author or legacy).
        settings: Resolver settings (scan ignore patterns).

    Returns:
        Android config mapping (camelCase keys) or None.
    """
    folder = Path(folder)
    config = dict(user_config or {})
    ignores = _ignore_patterns(settings)

    declared_source = config.get("sourceDir")
    source_dir = folder / declared_source if declared_source else find_android_source_dir(folder)
    if source_dir is not None and not source_dir.is_dir():
        source_dir = None

    class_name: Optional[str] = None
    if source_dir is not None and not (
        config.get("packageInstance") and config.get("packageImportPath")
    ):
        qualified = find_android_package_class_name(source_dir, ignores)
        class_name = qualified.rsplit(".", 1)[-1] if qualified else None

    package_instance = config.get("packageInstance")
    if not package_instance and class_name:
        package_instance = f"new {class_name}()"

    package_import_path = config.get("packageImportPath")
    manifest_path: Optional[Path] = None
    package_name = config.get("packageName")
    if not package_import_path and source_dir is not None and class_name:
        declared_manifest = config.get("manifestPath")
        manifest_path = (
            source_dir / declared_manifest
            if declared_manifest
            else find_android_manifest(source_dir, settings.manifest_ignore_patterns if settings else None)
        )
        if not package_name and manifest_path is not None and manifest_path.is_file():
            package_name = read_android_manifest(manifest_path)
        if package_name:
            package_import_path = f"import {package_name}.{class_name};"

    if not package_instance or not package_import_path:
        logger.debug(
            "No Android linking info for %s (instance=%s, import=%s)",
            folder,
            package_instance,
            package_import_path,
        )
        return None

    config.update(
        {
            "sourceDir": str(source_dir) if source_dir is not None else None,
            "packageImportPath": package_import_path,
            "packageInstance": package_instance,
        }
    )
    if manifest_path is not None:
        config["manifestPath"] = str(manifest_path)
    if package_name:
        config["packageName"] = package_name
    return config


def project_config(
    folder: PathLike,
    user_config: Optional[Dict[str, Any]] = None,
    settings: Optional[ResolverSettings] = None,
) -> Optional[Dict[str, Any]]:
    """Infer the consuming app's Android settings.

    Returns:
        ``{sourceDir, manifestPath, packageName}`` or None without an
        ``android`` folder.
    """
    folder = Path(folder)
    config = dict(user_config or {})

    declared_source = config.get("sourceDir")
    source_dir = folder / declared_source if declared_source else find_android_source_dir(folder)
    if source_dir is None or not source_dir.is_dir():
        return None

    manifest_path = find_android_manifest(
        source_dir, settings.manifest_ignore_patterns if settings else None
    )
    config["sourceDir"] = str(source_dir)
    config.setdefault("manifestPath", str(manifest_path) if manifest_path else None)
    if "packageName" not in config:
        config["packageName"] = read_android_manifest(manifest_path) if manifest_path else None
    return config


__all__ = [
    "find_android_source_dir",
    "find_android_manifest",
    "read_android_manifest",
    "find_android_package_class_name",
    "dependency_config",
    "project_config",
]
