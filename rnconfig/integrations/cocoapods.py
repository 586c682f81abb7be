"""CocoaPods activation of native module pods.

The Podfile side is abstracted as a `PodfileTarget`: the caller passes
the target definition being built instead of this module looking up a
global "current target". A Ruby shim only has to forward ``pod`` and
``script_phase`` calls.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import (
    Any,
    Callable,
    Dict,
    Iterable,
    Iterator,
    List,
    Mapping,
    Optional,
    Protocol,
    Tuple,
    Union,
)

from rich.console import Console

from rnconfig.config.loader import SettingsSource
from rnconfig.config.schema import DependencyConfig, ExecutionPosition
from rnconfig.errors import ConfigurationError
from rnconfig.platforms.ios import read_podspec_name
from rnconfig.resolution.assembler import load_config
from rnconfig.utils.manifest import root_package_name

logger = logging.getLogger("rnconfig.integrations.cocoapods")

SpecLoader = Callable[[Path], str]
Reporter = Callable[[str], None]
PackageMap = Mapping[str, Union[DependencyConfig, Mapping[str, Any]]]


class PodfileTarget(Protocol):
    """The Podfile target definition pods are registered into."""

    @property
    def dependencies(self) -> Iterable[Any]:
        """Pods the user already declared (names or objects with ``.name``)."""
        ...

    def pod(self, name: str, path: str) -> None: ...

    def script_phase(self, options: Dict[str, Any]) -> None: ...


def pluralize(word: str, count: int) -> str:
    return word if count == 1 else f"{word}s"


def to_sentence(items: List[str]) -> str:
    """Render items as an English list: ``a``, ``a, and b``, ``a, b, and c``."""
    if not items:
        return ""
    if len(items) == 1:
        return items[0]
    return f"{', '.join(items[:-1])}, and {items[-1]}"


def translate_script_phase(phase: Mapping[str, Any], package_root: Union[str, Path]) -> Dict[str, Any]:
    """Convert a declared script phase into ``script_phase`` options.

    A ``path`` is replaced by the file's contents (read relative to the
    package root) under ``script``; ``execution_position`` becomes an
    `ExecutionPosition`.

    Raises:
        ConfigurationError: On an unknown execution position.
        OSError: If the script file cannot be read.
    """
    options = dict(phase)

    script_path = options.pop("path", None)
    if script_path:
        options["script"] = (Path(package_root) / script_path).read_text(encoding="utf-8")

    position = options.get("execution_position")
    if position:
        try:
            options["execution_position"] = ExecutionPosition(position)
        except ValueError as exc:
            raise ConfigurationError(
                f"Unknown script phase execution_position {position!r}; expected one of "
                + ", ".join(p.value for p in ExecutionPosition)
            ) from exc
    return options


def _ios_entries(packages: PackageMap) -> Iterator[Tuple[str, str, Optional[Mapping[str, Any]]]]:
    """Yield ``(name, root, ios_config)`` for each package, in order.

    Accepts resolved models and JSON-shaped mappings, with the iOS block
    under ``platforms.ios`` or directly under ``ios``.
    """
    for name, package in packages.items():
        if isinstance(package, DependencyConfig):
            ios = package.platforms.ios
            yield name, package.root, ios.model_dump(by_alias=True) if ios else None
            continue

        platforms = package.get("platforms")
        if isinstance(platforms, Mapping):
            ios = platforms.get("ios")
        else:
            ios = package.get("ios")
        yield name, package["root"], ios


def _script_phases(ios: Mapping[str, Any]) -> List[Mapping[str, Any]]:
    phases = ios.get("scriptPhases")
    if not phases:
        return []
    if isinstance(phases, Mapping):
        return [phases]
    return list(phases)


def _console_reporter(message: str) -> None:
    Console().print(message, markup=False, highlight=False)


def use_native_modules(
    target: PodfileTarget,
    packages: Optional[PackageMap] = None,
    *,
    project_root: Optional[Union[str, Path]] = None,
    settings: SettingsSource = None,
    spec_loader: SpecLoader = read_podspec_name,
    reporter: Optional[Reporter] = None,
) -> List[str]:
    """Register the pods of native module dependencies.

    Args:
        target: Podfile target definition to register into.
        packages: Resolved dependency map; resolved from ``project_root``
            when omitted.
        project_root: Project to resolve when ``packages`` is None.
        settings: Resolver settings used for that resolution.
        spec_loader: Returns the pod name declared by a podspec file.
        reporter: Receives the summary message (printed to the console by
            default).

    Returns:
        Names of the pods registered, in registration order.
    """
    if packages is None:
        packages = load_config(project_root, settings).dependencies

    existing = {root_package_name(str(getattr(dep, "name", dep))) for dep in target.dependencies}
    found: List[str] = []

    for name, root, ios in _ios_entries(packages):
        if not ios:
            continue

        spec_name = spec_loader(Path(root) / ios["podspec"])
        if spec_name in existing:
            logger.warning(
                "Pod %s of %s is already declared in the Podfile; not activating it", spec_name, name
            )
            continue
        if spec_name in found:
            logger.warning("Pod %s of %s was already activated by another package", spec_name, name)
            continue

        target.pod(spec_name, path=root)
        for phase in _script_phases(ios):
            target.script_phase(translate_script_phase(phase, root))
        found.append(spec_name)

    if found:
        message = (
            f"Detected native module {pluralize('pod', len(found))} for "
            f"{to_sentence(sorted(found))}"
        )
        (reporter or _console_reporter)(message)
    return found


__all__ = [
    "PodfileTarget",
    "pluralize",
    "to_sentence",
    "translate_script_phase",
    "use_native_modules",
]
