"""Resolved dependency tree model.

Wraps the nested mapping printed by ``npm ls --json``:

    {"name": "app", "version": "1.0.0",
     "dependencies": {"react": {"version": "18.2.0", "dependencies": {...}}}}

Children are materialized lazily, so a self-referencing mapping can be
wrapped without recursing; traversals guard against cycles themselves.
"""

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

UNKNOWN_VERSION = "unknown"

_EMPTY: Mapping[str, Any] = MappingProxyType({})


@dataclass(frozen=True)
class PackageNode:
    """One occurrence of a package at a specific position in the tree.

    Two nodes with the same name and version at different positions are
    distinct objects and share nothing but the underlying raw input.
    """

    name: str
    version: str = UNKNOWN_VERSION
    raw: Mapping[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_raw(cls, name: str, raw: Any) -> "PackageNode":
        """Wrap a raw tree entry, defaulting anything malformed."""
        if not isinstance(raw, Mapping):
            raw = _EMPTY
        version = raw.get("version")
        if not isinstance(version, str) or not version:
            version = UNKNOWN_VERSION
        return cls(name=name, version=version, raw=raw)

    @classmethod
    def from_npm_list(
        cls,
        payload: Mapping[str, Any],
        name: str | None = None,
        version: str | None = None,
    ) -> "PackageNode":
        """Build the root node from an ``npm ls --json`` payload.

        Args:
            payload: Parsed JSON from ``npm ls --json``.
            name: Project name override (e.g. from package.json).
            version: Project version override.

        Returns:
            Root PackageNode representing the project itself.
        """
        root = cls.from_raw(payload.get("name") or "", payload)
        return cls(
            name=name or root.name or "(root)",
            version=version or root.version,
            raw=root.raw,
        )

    @property
    def identity(self) -> tuple[str, str]:
        return (self.name, self.version)

    @property
    def label(self) -> str:
        return f"{self.name}@{self.version}"

    def _dependencies(self) -> Mapping[str, Any]:
        deps = self.raw.get("dependencies")
        return deps if isinstance(deps, Mapping) else _EMPTY

    def children(self) -> Iterator[tuple[str, "PackageNode"]]:
        """Yield ``(name, node)`` pairs in the order npm reported them."""
        for child_name, child_raw in self._dependencies().items():
            yield child_name, PackageNode.from_raw(child_name, child_raw)

    def child_names(self) -> list[str]:
        """Names of the direct dependencies, in reported order."""
        return list(self._dependencies())

    @property
    def is_leaf(self) -> bool:
        return not self._dependencies()
