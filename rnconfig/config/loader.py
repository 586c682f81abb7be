"""Helpers for loading resolver settings from TOML/JSON sources.

`load_resolver_settings` accepts:

* None -> default ResolverSettings
* dict -> ResolverSettings.from_dict
* Path / path-like string -> load .toml/.json from filesystem
* Inline JSON/TOML strings
"""

from __future__ import annotations

import json
import logging
import tomllib
from pathlib import Path
from typing import Any, Dict, Optional, Union

from pydantic import ValidationError

from rnconfig.config.settings import ResolverSettings
from rnconfig.errors import ConfigurationError

logger = logging.getLogger("rnconfig.config.loader")

SettingsSource = Union[str, Path, Dict[str, Any], ResolverSettings, None]


def _sniff_format(text: str) -> str:
    return "json" if text.lstrip().startswith(("{", "[")) else "toml"


def _parse(text: str, fmt: str, origin: Optional[Path]) -> Dict[str, Any]:
    try:
        data = json.loads(text) if fmt == "json" else tomllib.loads(text)
    except (json.JSONDecodeError, tomllib.TOMLDecodeError) as e:
        raise ConfigurationError(f"Invalid {fmt.upper()} settings: {e}", path=origin) from e

    if not isinstance(data, dict):
        raise ConfigurationError("Top-level settings must be a mapping", path=origin)
    # Settings may live under a [rnconfig] table of a shared file
    section = data.get("rnconfig")
    return section if isinstance(section, dict) else data


def load_resolver_settings(source: SettingsSource) -> ResolverSettings:
    """Load ResolverSettings from various sources.

    Args:
        source: One of:
            * None: returns ResolverSettings.default()
            * ResolverSettings: returned unchanged
            * dict: treated as an already-parsed mapping
            * str/Path: either a path to a .toml/.json file or an inline
              TOML/JSON string (auto-detected)

    Returns:
        ResolverSettings instance.

    Raises:
        ConfigurationError: On unparsable text or invalid values.
    """
    if source is None:
        logger.debug("No settings source provided; using defaults")
        return ResolverSettings.default()

    if isinstance(source, ResolverSettings):
        return source

    origin: Optional[Path] = None
    if isinstance(source, dict):
        logger.debug("Loading ResolverSettings from provided dict")
        data = source
    elif isinstance(source, (str, Path)):
        path = Path(source)
        inline = isinstance(source, str) and (
            "\n" in source or source.lstrip().startswith("{")
        )
        if not inline and path.is_file():
            origin = path
            text = path.read_text(encoding="utf-8")
            suffix = path.suffix.lower()
            if suffix in {".toml", ".tml"}:
                fmt = "toml"
            elif suffix == ".json":
                fmt = "json"
            else:
                fmt = _sniff_format(text)
            logger.info("Loading settings from file: %s (fmt=%s)", path, fmt)
        else:
            text = str(source)
            fmt = _sniff_format(text)
            logger.info("Loading settings from inline %s string", fmt)
        data = _parse(text, fmt, origin)
    else:
        raise TypeError(f"Unsupported settings source type: {type(source)!r}")

    try:
        return ResolverSettings.from_dict(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid resolver settings:\n{e}", path=origin) from e


__all__ = ["load_resolver_settings", "SettingsSource"]
