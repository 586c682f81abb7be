"""package.json loading."""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Union

from rnconfig.errors import ConfigurationError

logger = logging.getLogger("rnconfig.utils.manifest")

MANIFEST_NAME = "package.json"


def read_package_manifest(path: Union[str, Path]) -> Dict[str, Any]:
    """Read and parse a package.json file.

    Args:
        path: Path to the manifest file, or to the directory holding it.

    Returns:
        Parsed manifest mapping.

    Raises:
        ConfigurationError: If the file is not UTF-8, holds invalid JSON, or
            its top level is not an object.
        OSError: If the file cannot be read.
    """
    path = Path(path)
    if path.is_dir():
        path = path / MANIFEST_NAME

    content = path.read_bytes()
    try:
        data = json.loads(content.decode("utf-8"))
    except UnicodeDecodeError as e:
        raise ConfigurationError(f"Manifest is not valid UTF-8: {e}", path=path) from e
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in manifest: {e}", path=path) from e

    if not isinstance(data, dict):
        raise ConfigurationError("Manifest top level must be an object", path=path)

    logger.debug("Loaded manifest %s (name=%s)", path, data.get("name"))
    return data


def root_package_name(name: str) -> str:
    """Return the package/pod name before any subpath qualifier.

    ``foo/subspec`` -> ``foo``. Scoped npm names keep their scope:
    ``@scope/pkg/sub`` -> ``@scope/pkg``.
    """
    parts = name.split("/")
    if name.startswith("@") and len(parts) > 1:
        return "/".join(parts[:2])
    return parts[0]
