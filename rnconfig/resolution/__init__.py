"""Dependency discovery and configuration assembly."""

from rnconfig.resolution.assembler import load_config
from rnconfig.resolution.legacy import transform_legacy_config
from rnconfig.resolution.walker import PackageDescriptor, PackageGraph, PackageGraphWalker

__all__ = [
    "load_config",
    "transform_legacy_config",
    "PackageDescriptor",
    "PackageGraph",
    "PackageGraphWalker",
]
