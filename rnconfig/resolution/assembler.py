"""Top-level config assembler.

`load_config` is the single entry point turning a project root into a
`ResolvedProjectConfig`:

    project package.json -> PackageGraphWalker -> defaults -> merge engine
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

from rnconfig.config.loader import SettingsSource, load_resolver_settings
from rnconfig.config.merge import merge_project_config
from rnconfig.config.schema import ProjectUserConfig, ResolvedProjectConfig, parse_model
from rnconfig.config.settings import ResolverSettings
from rnconfig.errors import ConfigurationError, ResolutionError
from rnconfig.platforms import BUILTIN_PLATFORMS, builtin_platform_paths
from rnconfig.resolution.node_modules import find_node_module_dirs
from rnconfig.resolution.walker import CONFIG_KEY, PackageGraphWalker
from rnconfig.utils.manifest import MANIFEST_NAME, read_package_manifest

logger = logging.getLogger("rnconfig.resolution.assembler")

REACT_NATIVE_PACKAGE = "react-native"


def read_project_user_config(
    manifest: Mapping[str, Any], manifest_path: Path
) -> ProjectUserConfig:
    """Extract the project's own ``react-native`` block."""
    block = manifest.get(CONFIG_KEY)
    if block is not None and not isinstance(block, Mapping):
        logger.debug("%s of the project is not an object; ignoring it", CONFIG_KEY)
        block = None
    return parse_model(ProjectUserConfig, block, path=manifest_path)


def build_defaults(
    root: Path, user_config: ProjectUserConfig, settings: ResolverSettings
) -> Dict[str, Any]:
    """Built-in values for the lowest merge level.

    Project-level platform settings are inferred here, seeded with the
    user's project block so a custom ``sourceDir`` steers inference.
    """
    react_native_path: Optional[str] = None
    candidates = find_node_module_dirs(root, REACT_NATIVE_PACKAGE)
    if candidates:
        react_native_path = str(candidates[0].resolve())
    else:
        logger.debug("react-native is not installed under %s", root)

    project: Dict[str, Any] = {}
    for name, handler in BUILTIN_PLATFORMS.items():
        if name in user_config.project and user_config.project[name] is None:
            project[name] = None
            continue
        project[name] = handler.project_config(root, user_config.project.get(name), settings)

    return {
        "root": str(root),
        "reactNativePath": react_native_path,
        "commands": [],
        "platforms": builtin_platform_paths(),
        "haste": {"providesModuleNodeModules": [], "platforms": []},
        "project": project,
    }


def load_config(
    project_root: Optional[Union[str, Path]] = None,
    settings: SettingsSource = None,
) -> ResolvedProjectConfig:
    """Resolve the effective configuration of a project.

    Args:
        project_root: Root of the consuming app; the working directory when
            omitted.
        settings: Resolver settings or any source accepted by
            `load_resolver_settings`.

    Returns:
        The resolved configuration.

    Raises:
        ResolutionError: If the project root does not exist.
        ConfigurationError: If the project manifest is missing or malformed,
            or (strict mode) a dependency manifest is malformed.
        ParseError: If (strict mode) a dependency's Android manifest is
            malformed.
    """
    root = Path(project_root) if project_root is not None else Path.cwd()
    if not root.is_dir():
        raise ResolutionError("Project root does not exist", path=root)
    root = root.resolve()

    manifest_path = root / MANIFEST_NAME
    if not manifest_path.is_file():
        raise ConfigurationError("Project manifest not found", path=manifest_path)

    resolver_settings = load_resolver_settings(settings)
    manifest = read_package_manifest(manifest_path)
    user_config = read_project_user_config(manifest, manifest_path)

    graph = PackageGraphWalker(root, resolver_settings, project_manifest=manifest).walk()
    defaults = build_defaults(root, user_config, resolver_settings)

    config = merge_project_config(defaults, graph.packages(), user_config)
    logger.info(
        "Resolved %d dependencies, %d commands, %d platforms for %s",
        len(config.dependencies),
        len(config.commands),
        len(config.platforms),
        root,
    )
    return config


__all__ = ["load_config", "build_defaults", "read_project_user_config"]
