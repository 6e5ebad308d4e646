"""Dependency tree renderer.

Depth-first, pre-order walk of the resolved tree. Each package line is
followed by the peer dependencies its installed manifest declares, then by
its children one level deeper.

npm's own output is acyclic, but the walk does not rely on it: the
``(name, version)`` identities on the current root-to-node path are
tracked, and a node that re-enters its own ancestry is emitted once as
``[circular]`` and not expanded.
"""

from collections.abc import Iterator

from depinsight.models.reports import TreeLine
from depinsight.models.tree import PackageNode
from depinsight.store import PackageStore, peer_dependencies


def render_tree(root: PackageNode, store: PackageStore | None = None) -> list[TreeLine]:
    """Render the tree rooted at the project node.

    Args:
        root: Root node (the project itself).
        store: Package store used to look up peer dependencies. When None,
            no peer lines are emitted.

    Returns:
        Ordered lines; children keep the order npm reported them in.
    """
    return list(iter_tree(root, store))


def iter_tree(root: PackageNode, store: PackageStore | None = None) -> Iterator[TreeLine]:
    """Lazily yield the lines of :func:`render_tree`."""
    yield TreeLine(depth=0, kind="package", name=root.name, version=root.version)
    yield from _walk_children(root, 1, {root.identity}, store)


def _walk_children(
    node: PackageNode,
    depth: int,
    ancestors: set[tuple[str, str]],
    store: PackageStore | None,
) -> Iterator[TreeLine]:
    for name, child in node.children():
        if child.identity in ancestors:
            yield TreeLine(depth=depth, kind="circular", name=name, version=child.version)
            continue

        yield TreeLine(depth=depth, kind="package", name=name, version=child.version)

        if store is not None:
            for peer, spec in peer_dependencies(store, name).items():
                yield TreeLine(depth=depth + 1, kind="peer", name=peer, version=spec)

        ancestors.add(child.identity)
        try:
            yield from _walk_children(child, depth + 1, ancestors, store)
        finally:
            ancestors.discard(child.identity)


def format_tree(lines: list[TreeLine]) -> str:
    """Join rendered lines into plain text."""
    return "\n".join(line.text for line in lines)
