"""Exception hierarchy for rnconfig.

Errors are split by how the resolver reacts to them: recoverable errors
describe a single package or file and may be downgraded to a warning,
everything else aborts the resolution run.
"""

from pathlib import Path
from typing import Optional, Union


class RnConfigError(Exception):
    """Base class for all rnconfig errors."""

    def __init__(
        self, message: str, path: Optional[Union[str, Path]] = None
    ) -> None:
        self.path = str(path) if path is not None else None
        if self.path:
            message = f"{message} ({self.path})"
        super().__init__(message)


class RecoverableError(RnConfigError):
    """Error scoped to one package or file.

    The walker may skip the affected package and continue, depending on
    the ``strict_manifests`` setting.
    """

    pass


class ConfigurationError(RecoverableError):
    """Malformed manifest JSON or invalid configuration data.

    Always fatal when raised for the project's own ``package.json``.
    """

    pass


class ParseError(RecoverableError):
    """Malformed Android manifest XML.

    A broken manifest means the dependency itself is broken, so this is
    the one inference failure that is not reported as "not found".
    """

    pass


class ResolutionError(RnConfigError):
    """A required input (e.g. the project root) could not be resolved."""

    pass


__all__ = [
    "RnConfigError",
    "RecoverableError",
    "ConfigurationError",
    "ParseError",
    "ResolutionError",
]
