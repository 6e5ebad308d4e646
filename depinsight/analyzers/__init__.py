"""Analyzers that turn npm output and node_modules into reports."""

from depinsight.analyzers.alternatives import DEFAULT_ALTERNATIVES, AlternativeMatcher
from depinsight.analyzers.audit import summarize_audit
from depinsight.analyzers.graph import graph_summary, to_digraph
from depinsight.analyzers.outdated import summarize_outdated
from depinsight.analyzers.size import build_size_ledger, classify_size, compute_size, to_megabytes
from depinsight.analyzers.tree import format_tree, iter_tree, render_tree
from depinsight.analyzers.unused import find_unused

__all__ = [
    "DEFAULT_ALTERNATIVES",
    "AlternativeMatcher",
    "build_size_ledger",
    "classify_size",
    "compute_size",
    "find_unused",
    "format_tree",
    "graph_summary",
    "iter_tree",
    "render_tree",
    "summarize_audit",
    "summarize_outdated",
    "to_digraph",
    "to_megabytes",
]
