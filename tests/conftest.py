"""
Shared fixtures for npm-dupes tests.
"""

import json
from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path_factory, monkeypatch):
    """Keep user config files and NPM_DUPES_* variables out of every test."""
    home = tmp_path_factory.mktemp("home")
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(home)
    for key in [
        "NPM_DUPES_OUTPUT",
        "NPM_DUPES_SILENT",
        "NPM_DUPES_COLOR",
        "NPM_DUPES_EXCLUDED_DIRS",
        "NPM_DUPES_FOLLOW_SYMLINKS",
        "NPM_DUPES_MAX_FILE_SIZE_MB",
        "NPM_DUPES_LOG_LEVEL",
        "NPM_DUPES_LOG_JSON",
    ]:
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def temp_dir(tmp_path):
    """Project root for a test."""
    root = tmp_path / "project"
    root.mkdir()
    return root


@pytest.fixture
def write_manifest(temp_dir):
    """Write a package.json under the project root and return its path."""

    def _write(relative_dir: str, dependencies=None, dev_dependencies=None, raw=None):
        directory = temp_dir / relative_dir if relative_dir else temp_dir
        directory.mkdir(parents=True, exist_ok=True)
        manifest = directory / "package.json"
        if raw is not None:
            manifest.write_text(raw, encoding="utf-8")
            return manifest

        content = {"name": directory.name, "version": "1.0.0"}
        if dependencies is not None:
            content["dependencies"] = dependencies
        if dev_dependencies is not None:
            content["devDependencies"] = dev_dependencies
        manifest.write_text(json.dumps(content, indent=2), encoding="utf-8")
        return manifest

    return _write


@pytest.fixture
def sample_package_json(write_manifest):
    """A single manifest with runtime and dev dependencies."""
    return write_manifest(
        "",
        dependencies={"express": "^4.18.0", "lodash": "^4.17.21"},
        dev_dependencies={"jest": "^29.0.0"},
    )


@pytest.fixture
def lodash_split(write_manifest, temp_dir) -> Path:
    """Two packages declaring lodash with different constraints."""
    write_manifest("packages/a", dependencies={"lodash": "^4.0.0"})
    write_manifest("packages/b", dependencies={"lodash": "^3.0.0"})
    return temp_dir


@pytest.fixture
def react_aligned(write_manifest, temp_dir) -> Path:
    """Two packages declaring react identically."""
    write_manifest("packages/a", dependencies={"react": "^18.0.0"})
    write_manifest("packages/b", dependencies={"react": "^18.0.0"})
    return temp_dir
