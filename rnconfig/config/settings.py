"""Resolver settings.

Settings control how the resolver walks and scans, never what the
resolved configuration contains.
"""

from typing import Any, Dict, List

from pydantic import BaseModel, Field


DEFAULT_SOURCE_IGNORE_PATTERNS = [
    "node_modules",
    "build",
    "examples",
    "Examples",
    ".gradle",
]


class ResolverSettings(BaseModel):
    """Settings for one resolution run.

    Attributes:
        include_dev_dependencies: Also walk ``devDependencies``.
        max_workers: Thread pool size for per-package reads.
        strict_manifests: Abort on a malformed dependency manifest instead
            of skipping the dependency with a warning.
        manifest_ignore_patterns: Directories skipped when looking for
            ``AndroidManifest.xml``.
        source_ignore_patterns: Directories skipped when scanning Java and
            Kotlin sources.
    """

    include_dev_dependencies: bool = True
    max_workers: int = Field(default=8, ge=1, le=64)
    strict_manifests: bool = True
    manifest_ignore_patterns: List[str] = Field(
        default_factory=lambda: list(DEFAULT_SOURCE_IGNORE_PATTERNS)
    )
    source_ignore_patterns: List[str] = Field(
        default_factory=lambda: list(DEFAULT_SOURCE_IGNORE_PATTERNS)
    )

    model_config = {"extra": "allow"}  # Allow extra fields for extensibility

    @classmethod
    def default(cls) -> "ResolverSettings":
        return cls()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ResolverSettings":
        """Create settings from a dictionary.

        Raises:
            ValidationError: If a value is out of range.
        """
        return cls.model_validate(data)

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump()
