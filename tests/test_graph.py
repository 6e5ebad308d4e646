"""Tests for the networkx dependency graph view."""

from depinsight.analyzers.graph import graph_summary, to_digraph
from depinsight.models.tree import PackageNode


class TestToDigraph:
    """Tests for to_digraph."""

    def test_nodes_and_edges(self, npm_list_payload: dict) -> None:
        root = PackageNode.from_npm_list(npm_list_payload)

        G = to_digraph(root)

        assert G.has_edge("my-app@1.2.3", "react@18.2.0")
        assert G.has_edge("react@18.2.0", "loose-envify@1.4.0")
        assert G.has_edge("prop-types@15.8.1", "loose-envify@1.3.1")
        assert G.nodes["my-app@1.2.3"]["root"] is True
        assert G.nodes["js-tokens@4.0.0"]["depth"] == 3

    def test_diamond_collapses_to_one_node(self) -> None:
        """The same name@version reached twice is a single node with two parents."""
        shared = {"version": "1.0.0"}
        root = PackageNode.from_npm_list({
            "name": "app",
            "version": "1",
            "dependencies": {
                "a": {"version": "1", "dependencies": {"shared": shared}},
                "b": {"version": "1", "dependencies": {"shared": shared}},
                "shared": shared,
            },
        })

        G = to_digraph(root)

        assert G.in_degree("shared@1.0.0") == 3
        assert G.nodes["shared@1.0.0"]["depth"] == 1

    def test_cycle_terminates(self) -> None:
        a: dict = {"version": "1", "dependencies": {}}
        b: dict = {"version": "1", "dependencies": {"a": a}}
        a["dependencies"]["b"] = b
        root = PackageNode.from_npm_list({"name": "app", "version": "1", "dependencies": {"a": a}})

        G = to_digraph(root)

        assert G.has_edge("a@1", "b@1")
        assert G.has_edge("b@1", "a@1")


class TestGraphSummary:
    """Tests for graph_summary."""

    def test_summary(self, npm_list_payload: dict) -> None:
        root = PackageNode.from_npm_list(npm_list_payload)

        summary = graph_summary(to_digraph(root), root)

        assert summary.node_count == 7
        assert summary.edge_count == 6
        assert summary.max_depth == 3
        assert summary.cycles == []
        assert summary.multiple_versions == {"loose-envify": ["1.3.1", "1.4.0"]}

    def test_reports_cycles(self) -> None:
        a: dict = {"version": "1", "dependencies": {}}
        a["dependencies"]["a"] = a
        root = PackageNode.from_npm_list({"name": "app", "version": "1", "dependencies": {"a": a}})

        summary = graph_summary(to_digraph(root), root)

        assert summary.cycles == [["a@1"]]
        assert summary.max_depth == 1

    def test_empty_tree(self) -> None:
        root = PackageNode.from_npm_list({"name": "app", "version": "1"})

        summary = graph_summary(to_digraph(root), root)

        assert summary.node_count == 1
        assert summary.edge_count == 0
        assert summary.max_depth == 0
