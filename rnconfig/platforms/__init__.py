"""Built-in platform handlers.

Each handler module exposes ``dependency_config(folder, user_config,
settings)`` and ``project_config(folder, user_config, settings)``.
Platforms contributed by dependencies (e.g. ``windows``) have no Python
handler; their blocks are carried through unchanged.
"""

from types import ModuleType
from typing import Dict

from rnconfig.platforms import android, ios

BUILTIN_PLATFORMS: Dict[str, ModuleType] = {
    "ios": ios,
    "android": android,
}


def builtin_platform_paths() -> Dict[str, str]:
    """Map built-in platform names to their handler module paths."""
    return {name: module.__name__ for name, module in BUILTIN_PLATFORMS.items()}


__all__ = ["BUILTIN_PLATFORMS", "builtin_platform_paths"]
