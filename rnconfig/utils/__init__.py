"""Filesystem and manifest helpers shared by the resolver."""
