"""Transformation of the legacy ``rnpm`` manifest block.

Old packages describe themselves under ``rnpm``::

    {
      "rnpm": {
        "ios": {"project": "ios/Foo.xcodeproj", "sharedLibraries": [...]},
        "android": {"packageInstance": "new FooPackage()"},
        "assets": ["./fonts"],
        "commands": {"postlink": "node ./scripts/postlink.js"},
        "params": [...],
        "haste": {"platforms": ["windows"], "providesModuleNodeModules": ["foo"]},
        "plugin": "./local-cli/plugin.js",
        "platform": "./local-cli/platform.js"
      }
    }

`transform_legacy_config` rewrites that into the shape of the current
``react-native`` block. Keys without a current equivalent are kept, not
dropped: an Xcode project path becomes ``ios.legacyProjectPath`` and
unknown top-level keys are carried on the dependency block.
"""

from __future__ import annotations

import copy
import logging
from pathlib import PurePosixPath
from typing import Any, Dict, List, Mapping

from rnconfig.config.schema import PODSPEC_EXTENSION
from rnconfig.errors import ConfigurationError

logger = logging.getLogger("rnconfig.resolution.legacy")

LEGACY_KEY = "rnpm"

# legacy key -> key on the current dependency block
_DEPENDENCY_KEYS = {
    "assets": "assets",
    "commands": "hooks",
    "params": "params",
}


def _as_list(value: Any) -> List[Any]:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def _transform_ios(ios: Mapping[str, Any]) -> Dict[str, Any]:
    ios = dict(ios)
    project = ios.pop("project", None)
    if project:
        project = str(project)
        if project.endswith(PODSPEC_EXTENSION):
            ios.setdefault("podspec", PurePosixPath(project).name)
        else:
            ios["legacyProjectPath"] = project
    return ios


def transform_legacy_config(legacy: Mapping[str, Any], package_name: str) -> Dict[str, Any]:
    """Rewrite an ``rnpm`` block into the current schema.

    Paths stay relative to the package root, exactly as in a current
    ``react-native`` block; the walker resolves both schemas alike.

    Args:
        legacy: The ``rnpm`` mapping.
        package_name: Name of the declaring package. Used as the platform
            key when ``platform`` is set but ``haste.platforms`` is empty.

    Returns:
        ``{dependency, commands, platforms, haste}`` mapping.
    """
    remaining = copy.deepcopy(dict(legacy))

    platforms_block: Dict[str, Any] = {}
    ios = remaining.pop("ios", None)
    if isinstance(ios, Mapping):
        platforms_block["ios"] = _transform_ios(ios)
    android = remaining.pop("android", None)
    if isinstance(android, Mapping):
        platforms_block["android"] = dict(android)

    dependency: Dict[str, Any] = {"platforms": platforms_block}
    for legacy_key, key in _DEPENDENCY_KEYS.items():
        if legacy_key in remaining:
            dependency[key] = remaining.pop(legacy_key)

    haste = remaining.pop("haste", None) or {}
    if not isinstance(haste, Mapping):
        raise ConfigurationError(f"rnpm.haste of {package_name} must be an object")
    haste = {
        "platforms": _as_list(haste.get("platforms")),
        "providesModuleNodeModules": _as_list(haste.get("providesModuleNodeModules")),
    }

    commands = [str(p) for p in _as_list(remaining.pop("plugin", None))]

    platforms: Dict[str, str] = {}
    platform_script = remaining.pop("platform", None)
    if platform_script:
        for name in haste["platforms"] or [package_name]:
            platforms[name] = str(platform_script)

    if remaining:
        logger.debug(
            "Carrying unmapped rnpm keys of %s: %s", package_name, ", ".join(sorted(remaining))
        )
        for key, value in remaining.items():
            dependency.setdefault(key, value)

    return {
        "dependency": dependency,
        "commands": commands,
        "platforms": platforms,
        "haste": haste,
    }


__all__ = ["LEGACY_KEY", "transform_legacy_config"]
