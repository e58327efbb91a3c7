"""Tests for containment graph analysis."""

import networkx as nx

from apiwiki.diagnostics import DiagnosticCode, DiagnosticLog
from apiwiki.manifest import (
    ManifestIndex,
    build_containment_graph,
    build_parent_graph,
    find_cycles,
    parse_manifest,
    report_containment_cycles,
)


def test_containment_graph_edges(index):
    """Namespaces contain child namespaces and types; types contain nested types."""
    graph = build_containment_graph(index)

    assert graph.edges["ns:Foo", "ns:Foo.Sub"]["relation"] == "child"
    assert graph.edges["ns:Foo", "type:Foo.Bar"]["relation"] == "type"
    assert graph.edges["type:Foo.Bar", "type:Foo.Bar.Inner"]["relation"] == "nested"
    assert graph.nodes["type:Foo.Bar"]["kind"] == "type"


def test_unresolved_references_are_not_nodes(manifest_data):
    manifest_data["namespaces"]["ns:Foo"]["types"].append("type:Gone")
    index = ManifestIndex(parse_manifest(manifest_data))

    graph = build_containment_graph(index)

    assert not graph.has_node("type:Gone")


def test_sample_has_no_cycles(index):
    diagnostics = DiagnosticLog()

    assert report_containment_cycles(index, diagnostics) == 0
    assert len(diagnostics) == 0


def test_find_cycles_is_normalized():
    graph = nx.DiGraph()
    graph.add_edges_from([("c", "a"), ("a", "b"), ("b", "c"), ("x", "x")])

    assert find_cycles(graph) == [("a", "b", "c"), ("x",)]


def test_namespace_cycle_reported(manifest_data):
    manifest_data["namespaces"]["ns:Foo.Sub"]["children"] = ["ns:Foo"]
    manifest_data["namespaces"]["ns:Foo"]["parent"] = "ns:Foo.Sub"
    diagnostics = DiagnosticLog()
    index = ManifestIndex(parse_manifest(manifest_data), diagnostics)

    reported = report_containment_cycles(index, diagnostics)

    cycles = diagnostics.by_code(DiagnosticCode.CONTAINMENT_CYCLE)
    assert reported == 2
    assert len(cycles) == 2
    assert all(d.uid == "ns:Foo" for d in cycles)
    assert "ns:Foo -> ns:Foo.Sub -> ns:Foo" in cycles[0].message


def test_parent_graph_edges(index):
    graph = build_parent_graph(index)

    assert graph.has_edge("ns:Foo.Sub", "ns:Foo")
    assert graph.has_edge("ns:Foo", "ns:<global>")
    assert graph.has_edge("type:Foo.Bar.Inner", "type:Foo.Bar")
