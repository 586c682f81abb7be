"""Configuration schema definitions using Pydantic for validation.

Two families of models live here:

* Input models describe what users and package authors write under the
  ``react-native`` key of a ``package.json``. Every field is optional.
* Resolved models describe the output handed to the linking tools. They
  are frozen and encode the linking invariants: an iOS variant always
  carries a podspec file name, an Android variant always carries both
  its import path and its instance expression.

Python attributes are snake_case; the JSON wire format is camelCase.
"""

from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Type, TypeVar, Union

from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from rnconfig.errors import ConfigurationError

PODSPEC_EXTENSION = ".podspec"

ModelT = TypeVar("ModelT", bound=BaseModel)


def with_podspec_extension(name: str) -> str:
    """Append ``.podspec`` unless the name already carries it."""
    if name.endswith(PODSPEC_EXTENSION):
        return name
    return f"{name}{PODSPEC_EXTENSION}"


class ExecutionPosition(str, Enum):
    """Build-phase positions accepted by CocoaPods' ``script_phase``."""

    BEFORE_COMPILE = "before_compile"
    AFTER_COMPILE = "after_compile"
    BEFORE_HEADERS = "before_headers"
    AFTER_HEADERS = "after_headers"
    ANY = "any"


class WireModel(BaseModel):
    """Base for models exchanged as camelCase JSON."""

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "extra": "allow",  # Unknown keys are carried through, never dropped
    }


class FrozenWireModel(WireModel):
    model_config = {**WireModel.model_config, "frozen": True}


# ---------------------------------------------------------------------------
# Input models
# ---------------------------------------------------------------------------


class HasteConfig(FrozenWireModel):
    """Haste module-resolution extensions.

    Attributes:
        provides_module_node_modules: Extra packages providing haste modules.
        platforms: Extra platform names known to the bundler.
    """

    provides_module_node_modules: List[str] = Field(default_factory=list)
    platforms: List[str] = Field(default_factory=list)


class ProjectUserConfig(WireModel):
    """The consuming project's own ``react-native`` block.

    Attributes:
        react_native_path: Path to the react-native package, relative to
            the project root.
        dependencies: Per-dependency overrides keyed by package name.
        commands: Command module paths relative to the project root.
        platforms: Platform handler paths keyed by platform name.
        haste: Haste additions.
        project: Project-level platform settings keyed by platform name.
    """

    react_native_path: Optional[str] = None
    dependencies: Dict[str, Dict[str, Any]] = Field(default_factory=dict)
    commands: List[str] = Field(default_factory=list)
    platforms: Dict[str, str] = Field(default_factory=dict)
    haste: HasteConfig = Field(default_factory=HasteConfig)
    project: Dict[str, Optional[Dict[str, Any]]] = Field(default_factory=dict)


class PackageDeclaredConfig(WireModel):
    """A dependency's own ``react-native`` block (current schema).

    Attributes:
        dependency: ``{platforms, assets, hooks, params}`` describing how the
            package itself is linked.
        commands: Command module paths relative to the package root.
        platforms: Out-of-tree platform handler paths relative to the
            package root.
        haste: Haste additions contributed by the package.
    """

    dependency: Dict[str, Any] = Field(default_factory=dict)
    commands: List[str] = Field(default_factory=list)
    platforms: Dict[str, str] = Field(default_factory=dict)
    haste: HasteConfig = Field(default_factory=HasteConfig)


# ---------------------------------------------------------------------------
# Resolved models
# ---------------------------------------------------------------------------


class IOSDependencyConfig(FrozenWireModel):
    """iOS linking information for one dependency.

    Attributes:
        podspec: Podspec file name relative to the package root.
        script_phases: CocoaPods script phases declared by the package.
        legacy_project_path: Xcode project path carried over from the
            legacy ``rnpm`` schema; it has no podspec equivalent.
    """

    podspec: str = Field(min_length=1)
    script_phases: List[Dict[str, Any]] = Field(default_factory=list)
    legacy_project_path: Optional[str] = None

    @field_validator("podspec")
    @classmethod
    def ensure_extension(cls, v: str) -> str:
        return with_podspec_extension(v)

    @field_validator("script_phases", mode="before")
    @classmethod
    def listify_phases(cls, v: Any) -> Any:
        """Script phases may be declared as one object or a list."""
        if v is None:
            return []
        if isinstance(v, dict):
            return [v]
        return v


class AndroidDependencyConfig(FrozenWireModel):
    """Android linking information for one dependency.

    Both registration fields are required: a half-known package cannot be
    registered without generating broken code.
    """

    source_dir: Optional[str] = None
    package_import_path: str = Field(min_length=1)
    package_instance: str = Field(min_length=1)
    manifest_path: Optional[str] = None
    package_name: Optional[str] = None


class DependencyPlatforms(FrozenWireModel):
    """Per-platform variants. Out-of-tree platforms land in extra fields."""

    ios: Optional[IOSDependencyConfig] = None
    android: Optional[AndroidDependencyConfig] = None


class DependencyConfig(FrozenWireModel):
    """Resolved configuration of one installed dependency."""

    name: str
    root: str
    platforms: DependencyPlatforms = Field(default_factory=DependencyPlatforms)
    assets: List[str] = Field(default_factory=list)
    hooks: Dict[str, str] = Field(default_factory=dict)
    params: List[Any] = Field(default_factory=list)


class IOSProjectConfig(FrozenWireModel):
    source_dir: str
    podfile: Optional[str] = None
    xcode_project: Optional[str] = None


class AndroidProjectConfig(FrozenWireModel):
    source_dir: str
    manifest_path: Optional[str] = None
    package_name: Optional[str] = None


class ProjectConfig(FrozenWireModel):
    """Project-level platform settings of the consuming app."""

    ios: Optional[IOSProjectConfig] = None
    android: Optional[AndroidProjectConfig] = None


class ResolvedProjectConfig(FrozenWireModel):
    """Top-level resolved configuration.

    This is the object handed to the command dispatcher and the native
    linking integrations.
    """

    root: str
    react_native_path: Optional[str] = None
    dependencies: Dict[str, DependencyConfig] = Field(default_factory=dict)
    commands: List[str] = Field(default_factory=list)
    platforms: Dict[str, str] = Field(default_factory=dict)
    haste: HasteConfig = Field(default_factory=HasteConfig)
    project: ProjectConfig = Field(default_factory=ProjectConfig)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ResolvedProjectConfig":
        """Create a resolved configuration from a (camelCase) mapping.

        Raises:
            ValidationError: If the mapping violates the schema.
        """
        return cls.model_validate(data)

    def to_dict(self) -> Dict[str, Any]:
        """Return the JSON-ready camelCase representation."""
        return self.model_dump(by_alias=True, mode="json")


def parse_model(
    model_cls: Type[ModelT],
    data: Any,
    path: Optional[Union[str, Path]] = None,
) -> ModelT:
    """Validate ``data`` against ``model_cls``.

    Raises:
        ConfigurationError: Wrapping the pydantic error, with the
            offending file path when known.
    """
    try:
        return model_cls.model_validate(data if data is not None else {})
    except ValidationError as e:
        raise ConfigurationError(
            f"Invalid {model_cls.__name__}: {e.error_count()} error(s)\n{e}",
            path=path,
        ) from e
