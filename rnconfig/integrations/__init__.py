"""Consumers of the resolved configuration."""

from rnconfig.integrations.cocoapods import PodfileTarget, use_native_modules

__all__ = ["PodfileTarget", "use_native_modules"]
