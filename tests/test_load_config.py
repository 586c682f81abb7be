"""End-to-end resolution through load_config."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from rnconfig import ResolvedProjectConfig, load_config
from rnconfig.errors import ConfigurationError, ParseError, ResolutionError


def test_default_structure(make_project) -> None:
    root = make_project(manifest={"react-native": {"reactNativePath": "."}})

    config = load_config(root)
    real_root = str(root.resolve())

    assert config.to_dict() == {
        "root": real_root,
        "reactNativePath": real_root,
        "dependencies": {},
        "commands": [],
        "platforms": {
            "ios": "rnconfig.platforms.ios",
            "android": "rnconfig.platforms.android",
        },
        "haste": {"providesModuleNodeModules": [], "platforms": []},
        "project": {"ios": None, "android": None},
    }


def test_dependencies_from_package_json(make_project) -> None:
    root = make_project(
        packages={
            "react-native-test": {
                "package.json": {},
                "ios/HelloWorld.xcodeproj/project.pbxproj": "",
            }
        },
        manifest={"react-native": {"reactNativePath": "."}},
    )

    dependencies = load_config(root).to_dict()["dependencies"]

    assert dependencies == {
        "react-native-test": {
            "name": "react-native-test",
            "root": str((root / "node_modules" / "react-native-test").resolve()),
            "platforms": {"ios": None, "android": None},
            "assets": [],
            "hooks": {},
            "params": [],
        }
    }


def test_native_dependency_is_fully_resolved(make_project, android_library) -> None:
    root = make_project(packages={"react-native-some-example": {"SomeExample.podspec": ""}})
    android_library(root / "node_modules" / "react-native-some-example")

    dependency = load_config(root).dependencies["react-native-some-example"]

    assert dependency.platforms.ios.podspec == "SomeExample.podspec"
    assert dependency.platforms.android.package_import_path == (
        "import com.some.example.SomeExamplePackage;"
    )
    assert dependency.platforms.android.package_instance == "new SomeExamplePackage()"


def test_package_without_android_code_has_null_android(make_project) -> None:
    root = make_project(packages={"react-native-ios-only": {"RNIosOnly.podspec": ""}})

    dependency = load_config(root).to_dict()["dependencies"]["react-native-ios-only"]

    assert dependency["platforms"]["android"] is None
    assert dependency["platforms"]["ios"]["podspec"] == "RNIosOnly.podspec"


def test_override_is_deep_merged(make_project) -> None:
    root = make_project(
        packages={"react-native-test": {"ReactNativeTest.podspec": ""}},
        manifest={
            "react-native": {
                "reactNativePath": ".",
                "dependencies": {
                    "react-native-test": {"platforms": {"ios": {"sourceDir": "./abc"}}}
                },
            }
        },
    )

    ios = load_config(root).to_dict()["dependencies"]["react-native-test"]["platforms"]["ios"]

    assert ios["podspec"] == "ReactNativeTest.podspec"
    assert ios["sourceDir"] == "./abc"


def test_legacy_config_is_transformed(make_project) -> None:
    root = make_project(
        packages={
            "react-native-foo": {
                "package.json": {
                    "name": "react-native-foo",
                    "rnpm": {
                        "ios": {"project": "./RNFoo.podspec"},
                        "commands": {"postlink": "node ./postlink.js"},
                    },
                },
            }
        }
    )

    dependency = load_config(root).dependencies["react-native-foo"]

    assert dependency.platforms.ios.podspec == "RNFoo.podspec"
    assert dependency.hooks == {"postlink": "node ./postlink.js"}


def test_commands_from_dependencies(make_project) -> None:
    root = make_project(
        packages={
            "react-native-foo": {
                "package.json": {"react-native": {"commands": ["./command-foo.js"]}},
            },
            "react-native-bar": {
                "package.json": {"react-native": {"commands": ["./command-bar.js"]}},
            },
        }
    )
    modules = (root / "node_modules").resolve()

    assert load_config(root).commands == [
        str(modules / "react-native-foo" / "command-foo.js"),
        str(modules / "react-native-bar" / "command-bar.js"),
    ]


def test_out_of_tree_platform(make_project) -> None:
    root = make_project(
        packages={
            "react-native-windows": {
                "package.json": {
                    "name": "react-native-windows",
                    "rnpm": {
                        "haste": {
                            "platforms": ["windows"],
                            "providesModuleNodeModules": ["react-native-windows"],
                        },
                        "plugin": "./plugin.js",
                        "platform": "./platform.js",
                    },
                },
                "platform.js": 'module.exports = {"windows": {}};',
            }
        }
    )
    package_root = (root / "node_modules" / "react-native-windows").resolve()

    config = load_config(root)

    assert config.haste.platforms == ["windows"]
    assert config.haste.provides_module_node_modules == ["react-native-windows"]
    assert config.platforms["windows"] == str(package_root / "platform.js")
    assert config.commands == [str(package_root / "plugin.js")]


def test_react_native_path_is_discovered(make_project) -> None:
    root = make_project(files={"node_modules/react-native/package.json": {"name": "react-native"}})
    expected = str((root / "node_modules" / "react-native").resolve())
    assert load_config(root).react_native_path == expected


def test_project_platform_settings(make_project) -> None:
    root = make_project(
        files={
            "ios/Podfile": "",
            "ios/MyApp.xcodeproj/project.pbxproj": "",
            "android/app/src/main/AndroidManifest.xml": '<manifest package="com.myapp"/>',
        }
    )
    real_root = root.resolve()

    project = load_config(root).project

    assert project.ios.podfile == str(real_root / "ios" / "Podfile")
    assert project.ios.xcode_project == str(real_root / "ios" / "MyApp.xcodeproj")
    assert project.android.source_dir == str(real_root / "android" / "app")
    assert project.android.package_name == "com.myapp"


def test_resolution_is_idempotent(make_project, android_library) -> None:
    root = make_project(packages={"rn-a": {"A.podspec": ""}, "rn-b": {}})
    android_library(root / "node_modules" / "rn-b")

    assert load_config(root).to_dict() == load_config(root).to_dict()


def test_unknown_override_warns(make_project, caplog: pytest.LogCaptureFixture) -> None:
    root = make_project(manifest={"react-native": {"dependencies": {"ghost": {}}}})

    with caplog.at_level(logging.WARNING, logger="rnconfig"):
        config = load_config(root)

    assert config.dependencies == {}
    assert "ghost" in caplog.text


def test_missing_root(tmp_path: Path) -> None:
    with pytest.raises(ResolutionError):
        load_config(tmp_path / "missing")


def test_missing_project_manifest(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError) as excinfo:
        load_config(tmp_path)
    assert "package.json" in str(excinfo.value)


def test_malformed_project_manifest(tmp_path: Path) -> None:
    (tmp_path / "package.json").write_text("{", encoding="utf-8")
    with pytest.raises(ConfigurationError):
        load_config(tmp_path)


def test_malformed_dependency_android_manifest(make_project) -> None:
    root = make_project(
        packages={
            "rn-broken": {
                "android/src/main/AndroidManifest.xml": "<manifest",
                "android/src/main/java/Pkg.kt": "package a.b\nclass Pkg : ReactPackage {}\n",
            }
        }
    )

    with pytest.raises(ParseError):
        load_config(root)

    config = load_config(root, {"strict_manifests": False})
    assert "rn-broken" not in config.dependencies


def test_resolved_config_reloads_from_its_json(make_project, android_library) -> None:
    root = make_project(packages={"rn-a": {"A.podspec": ""}})
    android_library(root / "node_modules" / "rn-a")
    config = load_config(root)

    assert ResolvedProjectConfig.from_dict(config.to_dict()) == config


def test_non_utf8_project_manifest(tmp_path: Path) -> None:
    manifest = tmp_path / "package.json"
    manifest.write_bytes(b'{"name": "app\xff"}')

    with pytest.raises(ConfigurationError) as excinfo:
        load_config(tmp_path)
    assert str(manifest) in str(excinfo.value)
