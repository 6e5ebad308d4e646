"""Dependency graph view of the resolved tree.

Unlike the tree view, the graph collapses every occurrence of a
``name@version`` onto one node, which exposes diamonds (one package
required from several places), packages installed in several versions,
and cycles.
"""

from itertools import islice

import networkx as nx

from depinsight.models.reports import GraphSummary
from depinsight.models.tree import PackageNode


def to_digraph(root: PackageNode) -> nx.DiGraph:
    """Build a directed graph with edges from dependent to dependency.

    Nodes are ``name@version`` labels with ``name``, ``version`` and
    ``depth`` (shallowest position seen) attributes. The root node has
    ``root=True``.
    """
    G = nx.DiGraph()
    G.add_node(root.label, name=root.name, version=root.version, depth=0, root=True)
    _add_children(G, root, 1, {root.identity})
    return G


def _add_children(
    G: nx.DiGraph,
    node: PackageNode,
    depth: int,
    ancestors: set[tuple[str, str]],
) -> None:
    for _, child in node.children():
        if child.label in G:
            G.nodes[child.label]["depth"] = min(G.nodes[child.label]["depth"], depth)
        else:
            G.add_node(child.label, name=child.name, version=child.version, depth=depth)
        G.add_edge(node.label, child.label)

        # Edge back into the current path closes a cycle; stop there
        if child.identity in ancestors:
            continue
        ancestors.add(child.identity)
        _add_children(G, child, depth + 1, ancestors)
        ancestors.discard(child.identity)


def _max_depth(root: PackageNode) -> int:
    deepest = 0
    stack: list[tuple[PackageNode, int, frozenset[tuple[str, str]]]] = [
        (root, 0, frozenset({root.identity}))
    ]
    while stack:
        node, depth, path = stack.pop()
        deepest = max(deepest, depth)
        for _, child in node.children():
            if child.identity not in path:
                stack.append((child, depth + 1, path | {child.identity}))
    return deepest


def graph_summary(G: nx.DiGraph, root: PackageNode, max_cycles: int = 20) -> GraphSummary:
    """Summarize structure of the graph built by :func:`to_digraph`.

    Args:
        G: Graph from to_digraph.
        root: The same root node (used for depth).
        max_cycles: Maximum number of cycles to list.

    Returns:
        GraphSummary with counts, cycles and multi-version packages.
    """
    versions: dict[str, list[str]] = {}
    for _, attrs in G.nodes(data=True):
        if attrs.get("root"):
            continue
        versions.setdefault(attrs["name"], []).append(attrs["version"])

    multiple = {
        name: sorted(vs) for name, vs in sorted(versions.items()) if len(vs) > 1
    }
    cycles = [list(c) for c in islice(nx.simple_cycles(G), max_cycles)]

    return GraphSummary(
        node_count=G.number_of_nodes(),
        edge_count=G.number_of_edges(),
        max_depth=_max_depth(root),
        cycles=cycles,
        multiple_versions=multiple,
    )
