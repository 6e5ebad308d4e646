"""Package store: where installed packages live on disk.

The engine never builds ``node_modules`` paths itself; it asks a store.
Tests substitute any object with the same two methods.
"""

from pathlib import Path
from typing import Any, Protocol

from depinsight.manifest import MANIFEST_FILENAME, ManifestError, read_json

NODE_MODULES = "node_modules"


class PackageStore(Protocol):
    """Resolves installed packages by name."""

    def install_path(self, name: str) -> Path | None:
        """Directory the package is installed in, or None if not installed."""
        ...

    def read_manifest(self, name: str) -> dict[str, Any]:
        """The package's own package.json. Raises ManifestError on failure."""
        ...


class NodeModulesStore:
    """Flat ``<project>/node_modules/<name>/`` layout, scoped names included."""

    def __init__(self, project_root: Path | str) -> None:
        self.project_root = Path(project_root)
        self.modules_dir = self.project_root / NODE_MODULES

    def __repr__(self) -> str:
        return f"NodeModulesStore({str(self.project_root)!r})"

    def _package_dir(self, name: str) -> Path:
        # "@scope/pkg" maps onto node_modules/@scope/pkg
        return self.modules_dir.joinpath(*name.split("/"))

    def install_path(self, name: str) -> Path | None:
        path = self._package_dir(name)
        return path if path.exists() else None

    def read_manifest(self, name: str) -> dict[str, Any]:
        path = self._package_dir(name) / MANIFEST_FILENAME
        return read_json(path)

    def peer_dependencies(self, name: str) -> dict[str, str]:
        """Declared peers of an installed package; empty on any read failure."""
        return peer_dependencies(self, name)


def peer_dependencies(store: PackageStore, name: str) -> dict[str, str]:
    """Read ``peerDependencies`` through any store.

    Missing or malformed manifests are expected here and yield no peers.
    """
    try:
        manifest = store.read_manifest(name)
    except ManifestError:
        return {}
    peers = manifest.get("peerDependencies")
    if not isinstance(peers, dict):
        return {}
    return {str(peer): str(spec) for peer, spec in peers.items()}
