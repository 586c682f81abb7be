"""rnconfig - native module configuration resolver for React Native apps."""

from rnconfig.config.schema import DependencyConfig, ResolvedProjectConfig
from rnconfig.config.settings import ResolverSettings
from rnconfig.errors import ConfigurationError, ParseError, RnConfigError
from rnconfig.integrations.cocoapods import use_native_modules
from rnconfig.resolution.assembler import load_config

__version__ = "0.1.0"

__all__ = [
    "ConfigurationError",
    "DependencyConfig",
    "ParseError",
    "ResolvedProjectConfig",
    "ResolverSettings",
    "RnConfigError",
    "load_config",
    "use_native_modules",
]
