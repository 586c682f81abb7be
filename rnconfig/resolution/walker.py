"""Package graph walker.

Visits every dependency the project manifest declares, resolves it to an
installed root, loads the package's declared configuration (current or
legacy schema) and computes its per-platform linking descriptors.

Per-package work is independent and fans out over a thread pool; results
are consumed in submission order so the package order always matches the
manifest order.
"""

from __future__ import annotations

import copy
import logging
import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple, Union

import networkx as nx

from rnconfig.config.schema import HasteConfig, PackageDeclaredConfig, parse_model
from rnconfig.config.settings import ResolverSettings
from rnconfig.errors import ConfigurationError, RecoverableError
from rnconfig.platforms import BUILTIN_PLATFORMS
from rnconfig.resolution.legacy import LEGACY_KEY, transform_legacy_config
from rnconfig.resolution.node_modules import find_node_module_dirs
from rnconfig.utils.manifest import MANIFEST_NAME, read_package_manifest

logger = logging.getLogger("rnconfig.resolution.walker")

CONFIG_KEY = "react-native"
PROJECT_NODE = "project"

_DEPENDENCY_BLOCK_KEYS = ("platforms", "assets", "hooks", "params")


@dataclass(frozen=True)
class PackageDescriptor:
    """One installed package and everything it contributes.

    Attributes:
        name: Manifest-declared package name.
        root: Real (symlink-resolved) package root.
        manifest: Parsed package.json.
        dependency: Computed dependency config, camelCase mapping with
            ``name``, ``root``, ``platforms``, ``assets``, ``hooks``,
            ``params``.
        commands: Absolute command module paths.
        platforms: Absolute platform handler paths by platform name.
        haste: Haste additions.
        legacy: True when the config came from the ``rnpm`` block.
        requested_as: Names under which the project asked for the package.
    """

    name: str
    root: Path
    manifest: Mapping[str, Any]
    dependency: Mapping[str, Any]
    commands: Tuple[str, ...] = ()
    platforms: Mapping[str, str] = field(default_factory=dict)
    haste: HasteConfig = field(default_factory=HasteConfig)
    legacy: bool = False
    requested_as: Tuple[str, ...] = ()


class PackageGraph:
    """Ordered collection of visited packages backed by a DiGraph.

    The graph holds one ``project`` node and one node per package; the
    project -> package edge records every name the package was requested
    under.
    """

    def __init__(self, project_root: Path) -> None:
        self.project_root = project_root
        self.graph = nx.DiGraph()
        self.graph.add_node(PROJECT_NODE, kind="project", root=str(project_root))
        self._packages: Dict[str, PackageDescriptor] = {}

    @staticmethod
    def node_id(name: str) -> str:
        return f"package:{name}"

    def add_package(self, descriptor: PackageDescriptor) -> None:
        node_id = self.node_id(descriptor.name)
        self.graph.add_node(
            node_id,
            kind="package",
            name=descriptor.name,
            root=str(descriptor.root),
            legacy=descriptor.legacy,
        )
        self.graph.add_edge(PROJECT_NODE, node_id, requested=list(descriptor.requested_as))
        self._packages[descriptor.name] = descriptor

    def add_alias(self, name: str, requested: str) -> None:
        """Record another requested name for an already visited package."""
        descriptor = self._packages[name]
        self._packages[name] = replace(
            descriptor, requested_as=descriptor.requested_as + (requested,)
        )
        self.graph.edges[PROJECT_NODE, self.node_id(name)]["requested"].append(requested)

    def packages(self) -> List[PackageDescriptor]:
        """Packages in traversal order."""
        return list(self._packages.values())

    def names(self) -> List[str]:
        return list(self._packages)

    def __getitem__(self, name: str) -> PackageDescriptor:
        return self._packages[name]

    def __contains__(self, name: object) -> bool:
        return name in self._packages

    def __iter__(self) -> Iterator[str]:
        return iter(self._packages)

    def __len__(self) -> int:
        return len(self._packages)


def _absolute(root: Path, relative: Union[str, Path]) -> str:
    return os.path.normpath(root / relative)


class PackageGraphWalker:
    """Walk the project's declared dependencies.

    Args:
        project_root: Root of the consuming app.
        settings: Resolver settings.
        project_manifest: Already parsed project package.json; read from
            disk when omitted.
    """

    def __init__(
        self,
        project_root: Union[str, Path],
        settings: Optional[ResolverSettings] = None,
        project_manifest: Optional[Mapping[str, Any]] = None,
    ) -> None:
        self.project_root = Path(project_root)
        self.settings = settings or ResolverSettings.default()
        self._project_manifest = project_manifest

    def dependency_names(self, manifest: Mapping[str, Any]) -> List[str]:
        """Declared dependency names in manifest order, without duplicates."""
        fields = ["dependencies"]
        if self.settings.include_dev_dependencies:
            fields.append("devDependencies")

        names: List[str] = []
        for dep_field in fields:
            deps = manifest.get(dep_field) or {}
            if not isinstance(deps, Mapping):
                raise ConfigurationError(
                    f"'{dep_field}' must be an object",
                    path=self.project_root / MANIFEST_NAME,
                )
            for name in deps:
                if name not in names:
                    names.append(name)
        return names

    def walk(self) -> PackageGraph:
        """Visit every declared dependency.

        Returns:
            PackageGraph with one descriptor per installed package root.

        Raises:
            ConfigurationError: For a malformed project manifest, or a
                malformed dependency manifest in strict mode.
            ParseError: For a malformed dependency Android manifest in
                strict mode.
        """
        manifest = self._project_manifest
        if manifest is None:
            manifest = read_package_manifest(self.project_root / MANIFEST_NAME)
        names = self.dependency_names(manifest)
        logger.info("Walking %d declared dependencies of %s", len(names), self.project_root)

        graph = PackageGraph(self.project_root)
        workers = min(self.settings.max_workers, max(len(names), 1))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="rnconfig") as pool:
            visits = list(pool.map(self._visit_safely, names))

        roots: Dict[Path, str] = {}
        for requested, descriptor in zip(names, visits):
            if descriptor is None:
                continue
            if descriptor.root in roots:
                logger.debug(
                    "%s resolves to already visited %s", requested, roots[descriptor.root]
                )
                graph.add_alias(roots[descriptor.root], requested)
                continue
            if descriptor.name in graph:
                logger.warning(
                    "Package name %s is provided by both %s and %s; keeping the first",
                    descriptor.name,
                    graph[descriptor.name].root,
                    descriptor.root,
                )
                continue
            roots[descriptor.root] = descriptor.name
            graph.add_package(descriptor)

        logger.info("Visited %d package(s)", len(graph))
        return graph

    def _visit_safely(self, name: str) -> Optional[PackageDescriptor]:
        try:
            return self.visit(name)
        except RecoverableError as exc:
            if self.settings.strict_manifests:
                raise
            logger.warning("Skipping dependency %s: %s", name, exc)
        except OSError as exc:
            logger.warning("Skipping dependency %s: cannot read package: %s", name, exc)
        return None

    def visit(self, name: str) -> Optional[PackageDescriptor]:
        """Resolve and load a single dependency.

        Returns:
            The descriptor, or None if the package is not installed.
        """
        candidates = find_node_module_dirs(self.project_root, name)
        if not candidates:
            logger.warning(
                "Unable to resolve dependency %s from %s; skipping", name, self.project_root
            )
            return None
        if len(candidates) > 1:
            logger.warning(
                "Dependency %s resolves to %d roots (%s); using %s",
                name,
                len(candidates),
                ", ".join(str(c) for c in candidates),
                candidates[0],
            )

        root = candidates[0].resolve()
        manifest = read_package_manifest(root / MANIFEST_NAME)
        package_name = manifest.get("name") or name
        if not isinstance(package_name, str):
            raise ConfigurationError("'name' must be a string", path=root / MANIFEST_NAME)

        declared, legacy = self._declared_config(manifest, package_name, root)
        dependency = self._compute_dependency(package_name, root, declared)

        return PackageDescriptor(
            name=package_name,
            root=root,
            manifest=manifest,
            dependency=dependency,
            commands=tuple(_absolute(root, c) for c in declared.commands),
            platforms={k: _absolute(root, v) for k, v in declared.platforms.items()},
            haste=declared.haste,
            legacy=legacy,
            requested_as=(name,),
        )

    def _declared_config(
        self, manifest: Mapping[str, Any], package_name: str, root: Path
    ) -> Tuple[PackageDeclaredConfig, bool]:
        current = manifest.get(CONFIG_KEY)
        legacy_block = manifest.get(LEGACY_KEY)
        manifest_path = root / MANIFEST_NAME

        # "react-native" is also used as a bundler entry point string
        if isinstance(current, Mapping):
            if legacy_block is not None:
                logger.debug("%s declares both %s and %s; using %s", package_name, CONFIG_KEY, LEGACY_KEY, CONFIG_KEY)
            return parse_model(PackageDeclaredConfig, current, path=manifest_path), False

        if legacy_block is not None:
            if not isinstance(legacy_block, Mapping):
                raise ConfigurationError(f"'{LEGACY_KEY}' must be an object", path=manifest_path)
            transformed = transform_legacy_config(legacy_block, package_name)
            return parse_model(PackageDeclaredConfig, transformed, path=manifest_path), True

        return PackageDeclaredConfig(), False

    def _compute_dependency(
        self, package_name: str, root: Path, declared: PackageDeclaredConfig
    ) -> Dict[str, Any]:
        block = copy.deepcopy(declared.dependency)
        declared_platforms = block.get("platforms") or {}
        if not isinstance(declared_platforms, Mapping):
            raise ConfigurationError(
                f"dependency.platforms of {package_name} must be an object",
                path=root / MANIFEST_NAME,
            )

        platforms: Dict[str, Any] = {}
        for platform_name, handler in BUILTIN_PLATFORMS.items():
            platform_block = declared_platforms.get(platform_name, {})
            if platform_block is None:
                platforms[platform_name] = None  # disabled by the package author
                continue
            if not isinstance(platform_block, Mapping):
                raise ConfigurationError(
                    f"dependency.platforms.{platform_name} of {package_name} must be an object",
                    path=root / MANIFEST_NAME,
                )
            platforms[platform_name] = handler.dependency_config(
                root, dict(platform_block), self.settings
            )
        for platform_name, platform_block in declared_platforms.items():
            if platform_name not in BUILTIN_PLATFORMS:
                platforms[platform_name] = platform_block

        dependency: Dict[str, Any] = {
            "name": package_name,
            "root": str(root),
            "platforms": platforms,
            "assets": block.get("assets", []),
            "hooks": block.get("hooks", {}),
            "params": block.get("params", []),
        }
        for key, value in block.items():
            if key not in _DEPENDENCY_BLOCK_KEYS:
                dependency.setdefault(key, value)
        return dependency


__all__ = ["CONFIG_KEY", "PackageDescriptor", "PackageGraph", "PackageGraphWalker"]
