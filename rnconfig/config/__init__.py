"""Configuration schema, resolver settings and settings loading for rnconfig."""

from .schema import (
    AndroidDependencyConfig,
    AndroidProjectConfig,
    DependencyConfig,
    DependencyPlatforms,
    ExecutionPosition,
    HasteConfig,
    IOSDependencyConfig,
    IOSProjectConfig,
    PackageDeclaredConfig,
    ProjectConfig,
    ProjectUserConfig,
    ResolvedProjectConfig,
)
from .settings import ResolverSettings
from .loader import load_resolver_settings

__all__ = [
    "AndroidDependencyConfig",
    "AndroidProjectConfig",
    "DependencyConfig",
    "DependencyPlatforms",
    "ExecutionPosition",
    "HasteConfig",
    "IOSDependencyConfig",
    "IOSProjectConfig",
    "PackageDeclaredConfig",
    "ProjectConfig",
    "ProjectUserConfig",
    "ResolvedProjectConfig",
    "ResolverSettings",
    "load_resolver_settings",
]
