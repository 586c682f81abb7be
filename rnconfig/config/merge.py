"""Config merge engine.

Precedence, lowest to highest:

1. built-in defaults (built-in platforms, inferred project settings)
2. each dependency's computed config (inference + the package's own
   declared ``react-native``/``rnpm`` block)
3. the project's per-dependency override
   (``react-native.dependencies[<name>]`` in the app's package.json)
4. the project's top-level settings (``reactNativePath``, ``commands``,
   ``platforms``, ``haste``, ``project``)

Per field:

* mappings merge recursively, right-biased;
* lists and scalars are replaced wholesale, except
* ``haste`` lists, which are unioned in first-seen order, and
* ``commands``, which are the project's commands followed by every
  dependency's commands in traversal order.

Nothing here mutates its inputs. After merging, platform variants are
validated again so an override cannot leave a half-configured iOS or
Android variant behind.
"""

from __future__ import annotations

import copy
import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Mapping, Optional, Sequence

from rnconfig.config.schema import (
    DependencyConfig,
    HasteConfig,
    ProjectConfig,
    ProjectUserConfig,
    ResolvedProjectConfig,
    parse_model,
)

if TYPE_CHECKING:
    from rnconfig.resolution.walker import PackageDescriptor

logger = logging.getLogger("rnconfig.config.merge")

# Keys a platform variant needs before anything can be linked
_REQUIRED_DEPENDENCY_KEYS = {
    "ios": ("podspec",),
    "android": ("packageImportPath", "packageInstance"),
}
_REQUIRED_PROJECT_KEYS = {
    "ios": ("sourceDir",),
    "android": ("sourceDir",),
}


def deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> Dict[str, Any]:
    """Recursively merge ``override`` onto ``base``.

    Returns a new dict; neither argument is modified. Lists are replaced,
    and an explicit ``None`` in ``override`` replaces the base value.
    """
    merged: Dict[str, Any] = copy.deepcopy(dict(base))
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(value, Mapping) and isinstance(current, Mapping):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def union(lists: Iterable[Iterable[str]]) -> List[str]:
    """Concatenate lists dropping repeats, first occurrence wins."""
    result: List[str] = []
    for items in lists:
        for item in items:
            if item not in result:
                result.append(item)
    return result


def merge_haste(hastes: Sequence[HasteConfig]) -> HasteConfig:
    return HasteConfig(
        provides_module_node_modules=union(h.provides_module_node_modules for h in hastes),
        platforms=union(h.platforms for h in hastes),
    )


def _complete_or_none(
    required: Mapping[str, Sequence[str]],
    platform: str,
    block: Any,
    owner: str,
    overridden: bool,
) -> Any:
    if platform not in required or not isinstance(block, Mapping):
        return block
    missing = [key for key in required[platform] if not block.get(key)]
    if not missing:
        return block
    log = logger.warning if overridden else logger.debug
    log(
        "%s config of %s lacks %s after overrides; treating %s as unsupported",
        platform,
        owner,
        ", ".join(missing),
        platform,
    )
    return None


def merge_dependency(
    computed: Mapping[str, Any], override: Optional[Mapping[str, Any]] = None
) -> DependencyConfig:
    """Apply a project override to one dependency's computed config.

    Args:
        computed: Walker output for the dependency (camelCase mapping).
        override: ``react-native.dependencies[<name>]`` of the project.

    Returns:
        Validated DependencyConfig.
    """
    override = override or {}
    merged = deep_merge(computed, override)
    merged["name"] = computed["name"]

    overridden = override.get("platforms") or {}
    platforms = merged.get("platforms") or {}
    merged["platforms"] = {
        platform: _complete_or_none(
            _REQUIRED_DEPENDENCY_KEYS, platform, block, merged["name"], platform in overridden
        )
        for platform, block in platforms.items()
    }
    return parse_model(DependencyConfig, merged)


def _override_key(package: "PackageDescriptor", overrides: Mapping[str, Any]) -> Optional[str]:
    """Override key for a package: its manifest name, else a name it was requested under."""
    for name in (package.name, *package.requested_as):
        if name in overrides:
            return name
    return None


def _absolute(root: str, relative: str) -> str:
    return os.path.normpath(Path(root) / relative)


def merge_project_config(
    defaults: Mapping[str, Any],
    packages: Sequence["PackageDescriptor"],
    user_config: ProjectUserConfig,
) -> ResolvedProjectConfig:
    """Merge defaults, dependency configs and project settings.

    Args:
        defaults: ``{root, reactNativePath, commands, platforms, haste,
            project}`` built-in values.
        packages: Visited packages in traversal order.
        user_config: The project's own ``react-native`` block.

    Returns:
        The resolved project configuration.
    """
    root = defaults["root"]
    platforms: Dict[str, str] = dict(defaults.get("platforms") or {})
    dependency_commands: List[str] = []
    hastes = [HasteConfig.model_validate(defaults.get("haste") or {})]
    dependencies: Dict[str, DependencyConfig] = {}

    overrides = user_config.dependencies
    claimed = set()
    for package in packages:
        platforms.update(package.platforms)
        dependency_commands.extend(package.commands)
        hastes.append(package.haste)
        key = _override_key(package, overrides)
        if key is not None:
            claimed.add(key)
        dependencies[package.name] = merge_dependency(
            package.dependency, overrides.get(key) if key is not None else None
        )

    for name in overrides:
        if name not in claimed:
            logger.warning("Override for %s ignored: dependency is not installed", name)

    # Project top-level settings
    hastes.append(user_config.haste)
    platforms.update({name: _absolute(root, path) for name, path in user_config.platforms.items()})
    commands = (
        list(defaults.get("commands") or [])
        + [_absolute(root, c) for c in user_config.commands]
        + dependency_commands
    )

    project = deep_merge(defaults.get("project") or {}, user_config.project)
    project = {
        platform: _complete_or_none(
            _REQUIRED_PROJECT_KEYS, platform, block, "the project", platform in user_config.project
        )
        for platform, block in project.items()
    }

    react_native_path = defaults.get("reactNativePath")
    if user_config.react_native_path:
        react_native_path = _absolute(root, user_config.react_native_path)

    return ResolvedProjectConfig(
        root=root,
        react_native_path=react_native_path,
        dependencies=dependencies,
        commands=commands,
        platforms=platforms,
        haste=merge_haste(hastes),
        project=parse_model(ProjectConfig, project),
    )


__all__ = [
    "deep_merge",
    "union",
    "merge_haste",
    "merge_dependency",
    "merge_project_config",
]
