"""Shared fixtures: on-disk React Native projects written into tmp_path."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable, Dict

import pytest

JAVA_REACT_PACKAGE = """\
package com.some.example;

import com.facebook.react.ReactPackage;
import com.facebook.react.bridge.NativeModule;
import java.util.Collections;
import java.util.List;

public class SomeExamplePackage implements ReactPackage {
    @Override
    public List<NativeModule> createNativeModules(ReactApplicationContext context) {
        return Collections.emptyList();
    }
}
"""

ANDROID_MANIFEST = """\
<manifest xmlns:android="http://schemas.android.com/apk/res/android"
    package="com.some.example">
</manifest>
"""

FileTree = Dict[str, Any]


def write_tree(root: Path, files: FileTree) -> Path:
    """Write ``{relative path: content}``; dicts and lists are dumped as JSON."""
    for rel, content in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, (dict, list)):
            content = json.dumps(content)
        path.write_text(content, encoding="utf-8")
    return root


@pytest.fixture
def write_files() -> Callable[[Path, FileTree], Path]:
    return write_tree


@pytest.fixture
def android_library() -> Callable[[Path], Path]:
    """Factory writing a flat-layout Android library into a package root."""

    def _make(root: Path) -> Path:
        return write_tree(
            root,
            {
                "android/src/main/AndroidManifest.xml": ANDROID_MANIFEST,
                "android/src/main/java/com/some/example/SomeExamplePackage.java": JAVA_REACT_PACKAGE,
            },
        )

    return _make


@pytest.fixture
def make_project(tmp_path: Path) -> Callable[..., Path]:
    """Factory for a project root with installed dependencies.

    ``make_project(packages={"name": {files}}, manifest={...})`` writes
    ``node_modules/<name>/...`` for every package and a project
    package.json declaring them all as dependencies (unless ``manifest``
    already lists dependencies).
    """

    def _make(
        packages: Dict[str, FileTree] | None = None,
        manifest: Dict[str, Any] | None = None,
        files: FileTree | None = None,
    ) -> Path:
        root = tmp_path / "app"
        root.mkdir(exist_ok=True)
        packages = packages or {}
        project_manifest = dict(manifest or {})
        project_manifest.setdefault("name", "app")
        project_manifest.setdefault("dependencies", {name: "1.0.0" for name in packages})

        for name, tree in packages.items():
            tree = dict(tree)
            tree.setdefault("package.json", {"name": name, "version": "1.0.0"})
            write_tree(root / "node_modules" / name, tree)

        write_tree(root, {"package.json": project_manifest, **(files or {})})
        return root

    return _make
