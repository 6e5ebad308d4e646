"""Pytest configuration and shared fixtures."""

import json
from pathlib import Path

import pytest

MB = 1024 * 1024


def write_sized_file(path: Path, size: int) -> Path:
    """Create a (sparse) file whose st_size is exactly ``size``."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("wb") as f:
        f.truncate(size)
    return path


def install_package(
    project: Path,
    name: str,
    version: str = "1.0.0",
    peers: dict[str, str] | None = None,
    repository: str | dict | None = None,
    size: int = 0,
) -> Path:
    """Lay out ``node_modules/<name>`` with a package.json and optional payload."""
    pkg_dir = project / "node_modules" / name
    pkg_dir.mkdir(parents=True, exist_ok=True)
    manifest: dict = {"name": name, "version": version}
    if peers:
        manifest["peerDependencies"] = peers
    if repository:
        manifest["repository"] = repository
    (pkg_dir / "package.json").write_text(json.dumps(manifest))
    if size:
        write_sized_file(pkg_dir / "dist" / "index.js", size)
    return pkg_dir


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """An npm project with package.json and an empty node_modules."""
    (tmp_path / "package.json").write_text(json.dumps({
        "name": "my-app",
        "version": "1.2.3",
        "dependencies": {"react": "^18.2.0", "lodash": "^4.17.21"},
        "devDependencies": {"jest": "^29.0.0"},
        "scripts": {"test": "jest --coverage"},
    }))
    (tmp_path / "node_modules").mkdir()
    return tmp_path


@pytest.fixture
def npm_list_payload() -> dict:
    """``npm ls --all --json`` output with a diamond (loose-envify twice)."""
    return {
        "name": "my-app",
        "version": "1.2.3",
        "dependencies": {
            "react": {
                "version": "18.2.0",
                "dependencies": {
                    "loose-envify": {
                        "version": "1.4.0",
                        "dependencies": {"js-tokens": {"version": "4.0.0"}},
                    },
                },
            },
            "lodash": {"version": "4.17.21"},
            "prop-types": {
                "version": "15.8.1",
                "dependencies": {
                    "loose-envify": {"version": "1.3.1"},
                },
            },
        },
    }


class FakeStore:
    """In-memory package store."""

    def __init__(
        self,
        installed: dict[str, Path] | None = None,
        manifests: dict[str, dict] | None = None,
    ) -> None:
        self.installed = installed or {}
        self.manifests = manifests or {}
        self.manifest_reads: list[str] = []

    def install_path(self, name: str) -> Path | None:
        return self.installed.get(name)

    def read_manifest(self, name: str) -> dict:
        from depinsight.manifest import ManifestError

        self.manifest_reads.append(name)
        if name not in self.manifests:
            raise ManifestError(f"{name} is not installed")
        return self.manifests[name]


@pytest.fixture
def fake_store() -> FakeStore:
    return FakeStore()
