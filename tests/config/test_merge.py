"""Config merge engine."""

from __future__ import annotations

import copy
import logging
from pathlib import Path

import pytest

from rnconfig.config.merge import deep_merge, merge_dependency, merge_project_config, union
from rnconfig.config.schema import HasteConfig, ProjectUserConfig
from rnconfig.resolution.walker import PackageDescriptor

DEFAULTS = {
    "root": "/work/app",
    "reactNativePath": "/work/app/node_modules/react-native",
    "commands": [],
    "platforms": {"ios": "rnconfig.platforms.ios", "android": "rnconfig.platforms.android"},
    "haste": {"providesModuleNodeModules": [], "platforms": []},
    "project": {"ios": {"sourceDir": "/work/app/ios", "podfile": None}, "android": None},
}


def _computed(name: str, **platforms) -> dict:
    return {
        "name": name,
        "root": f"/work/app/node_modules/{name}",
        "platforms": {"ios": None, "android": None, **platforms},
        "assets": [],
        "hooks": {},
        "params": [],
    }


def _descriptor(name: str, commands=(), platforms=None, haste=None, **dep_platforms) -> PackageDescriptor:
    return PackageDescriptor(
        name=name,
        root=Path(f"/work/app/node_modules/{name}"),
        manifest={"name": name},
        dependency=_computed(name, **dep_platforms),
        commands=tuple(commands),
        platforms=platforms or {},
        haste=haste or HasteConfig(),
    )


def test_deep_merge_is_recursive_and_right_biased() -> None:
    base = {"a": {"x": 1, "y": {"k": "base"}}, "list": [1, 2], "keep": True}
    override = {"a": {"y": {"k": "override"}, "z": 3}, "list": [3]}

    merged = deep_merge(base, override)

    assert merged == {
        "a": {"x": 1, "y": {"k": "override"}, "z": 3},
        "list": [3],
        "keep": True,
    }


def test_deep_merge_does_not_mutate_inputs() -> None:
    base = {"a": {"b": [1]}}
    override = {"a": {"c": {"d": 1}}}
    base_copy, override_copy = copy.deepcopy(base), copy.deepcopy(override)

    merged = deep_merge(base, override)
    merged["a"]["b"].append(2)
    merged["a"]["c"]["d"] = 2

    assert base == base_copy
    assert override == override_copy


def test_deep_merge_explicit_none_replaces() -> None:
    assert deep_merge({"ios": {"podspec": "A.podspec"}}, {"ios": None}) == {"ios": None}


def test_union_keeps_first_occurrence() -> None:
    assert union([["a", "b"], ["b", "c"], ["a", "d"]]) == ["a", "b", "c", "d"]


def test_override_keeps_siblings() -> None:
    computed = _computed(
        "rn-foo",
        android={
            "sourceDir": "/work/app/node_modules/rn-foo/android",
            "packageImportPath": "import com.foo.FooPackage;",
            "packageInstance": "new FooPackage()",
        },
    )

    merged = merge_dependency(
        computed, {"platforms": {"android": {"packageInstance": "new FooPackage(true)"}}}
    )

    assert merged.platforms.android.package_instance == "new FooPackage(true)"
    assert merged.platforms.android.package_import_path == "import com.foo.FooPackage;"
    assert merged.platforms.android.source_dir == "/work/app/node_modules/rn-foo/android"


def test_override_can_supply_a_missing_platform() -> None:
    merged = merge_dependency(_computed("rn-foo"), {"platforms": {"ios": {"podspec": "Custom"}}})
    assert merged.platforms.ios.podspec == "Custom.podspec"


def test_override_can_disable_a_platform() -> None:
    computed = _computed("rn-foo", ios={"podspec": "RNFoo.podspec"})
    merged = merge_dependency(computed, {"platforms": {"ios": None}})
    assert merged.platforms.ios is None


def test_incomplete_override_collapses_platform(caplog: pytest.LogCaptureFixture) -> None:
    computed = _computed(
        "rn-foo",
        android={"packageImportPath": "import a.B;", "packageInstance": "new B()"},
    )

    with caplog.at_level(logging.WARNING, logger="rnconfig.config.merge"):
        merged = merge_dependency(computed, {"platforms": {"android": {"packageImportPath": ""}}})

    assert merged.platforms.android is None
    assert "packageImportPath" in caplog.text


def test_override_does_not_rename_dependency() -> None:
    merged = merge_dependency(_computed("rn-foo"), {"name": "other", "assets": ["./fonts"]})
    assert merged.name == "rn-foo"
    assert merged.assets == ["./fonts"]


def test_project_merge_order_and_unions() -> None:
    packages = [
        _descriptor(
            "rn-windows",
            commands=["/work/app/node_modules/rn-windows/plugin.js"],
            platforms={"windows": "/work/app/node_modules/rn-windows/platform.js"},
            haste=HasteConfig(platforms=["windows"], provides_module_node_modules=["rn-windows"]),
        ),
        _descriptor("rn-bar", commands=["/work/app/node_modules/rn-bar/cmd.js"]),
    ]
    user_config = ProjectUserConfig.model_validate(
        {
            "commands": ["./scripts/local.js"],
            "platforms": {"macos": "./macos/platform.js"},
            "haste": {"platforms": ["windows", "macos"]},
        }
    )

    config = merge_project_config(DEFAULTS, packages, user_config)

    assert config.commands == [
        "/work/app/scripts/local.js",
        "/work/app/node_modules/rn-windows/plugin.js",
        "/work/app/node_modules/rn-bar/cmd.js",
    ]
    assert config.platforms == {
        "ios": "rnconfig.platforms.ios",
        "android": "rnconfig.platforms.android",
        "windows": "/work/app/node_modules/rn-windows/platform.js",
        "macos": "/work/app/macos/platform.js",
    }
    assert config.haste.platforms == ["windows", "macos"]
    assert config.haste.provides_module_node_modules == ["rn-windows"]
    assert list(config.dependencies) == ["rn-windows", "rn-bar"]


def test_project_level_overrides() -> None:
    user_config = ProjectUserConfig.model_validate(
        {
            "reactNativePath": "../react-native",
            "project": {"ios": {"podfile": "/custom/Podfile"}},
        }
    )

    config = merge_project_config(DEFAULTS, [], user_config)

    assert config.react_native_path == "/work/react-native"
    assert config.project.ios.source_dir == "/work/app/ios"
    assert config.project.ios.podfile == "/custom/Podfile"
    assert config.project.android is None


def test_override_for_unknown_dependency_warns(caplog: pytest.LogCaptureFixture) -> None:
    user_config = ProjectUserConfig.model_validate(
        {"dependencies": {"not-installed": {"platforms": {"ios": None}}}}
    )

    with caplog.at_level(logging.WARNING, logger="rnconfig.config.merge"):
        config = merge_project_config(DEFAULTS, [], user_config)

    assert config.dependencies == {}
    assert "not-installed" in caplog.text


def test_per_dependency_override_is_applied() -> None:
    packages = [_descriptor("rn-foo", ios={"podspec": "RNFoo.podspec"})]
    user_config = ProjectUserConfig.model_validate(
        {"dependencies": {"rn-foo": {"platforms": {"ios": {"scriptPhases": {"name": "x", "script": "y"}}}}}}
    )

    config = merge_project_config(DEFAULTS, packages, user_config)

    ios = config.dependencies["rn-foo"].platforms.ios
    assert ios.podspec == "RNFoo.podspec"
    assert ios.script_phases == [{"name": "x", "script": "y"}]


def test_override_keyed_by_requested_alias(caplog: pytest.LogCaptureFixture) -> None:
    descriptor = PackageDescriptor(
        name="rn-foo",
        root=Path("/work/app/node_modules/rn-foo"),
        manifest={"name": "rn-foo"},
        dependency=_computed("rn-foo", ios={"podspec": "RNFoo.podspec"}),
        requested_as=("my-foo",),
    )
    user_config = ProjectUserConfig.model_validate(
        {"dependencies": {"my-foo": {"platforms": {"ios": None}}}}
    )

    with caplog.at_level(logging.WARNING, logger="rnconfig.config.merge"):
        config = merge_project_config(DEFAULTS, [descriptor], user_config)

    assert config.dependencies["rn-foo"].platforms.ios is None
    assert "not installed" not in caplog.text
