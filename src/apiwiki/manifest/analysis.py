"""Structural checks over the manifest's containment graph."""

import logging

import networkx as nx

from apiwiki.diagnostics import DiagnosticCode, DiagnosticLog
from apiwiki.manifest.index import ManifestIndex

logger = logging.getLogger(__name__)


def build_containment_graph(index: ManifestIndex) -> nx.DiGraph:
    """Build a directed graph of containment edges.

    Edges point from container to contained:
        - namespace -> child namespace (relation="child")
        - namespace -> declared type (relation="type")
        - type -> nested type (relation="nested")

    Only UIDs that resolve become nodes.

    Args:
        index: The indexed manifest.

    Returns:
        NetworkX directed graph keyed by UID.
    """
    graph = nx.DiGraph()

    for uid in index.manifest.namespaces:
        namespace = index.namespace(uid)
        if namespace is None:
            continue
        graph.add_node(uid, kind="namespace", name=namespace.name)
        for child in namespace.children:
            if index.namespace(child) is not None:
                graph.add_edge(uid, child, relation="child")
        for type_uid in namespace.types:
            if index.type(type_uid) is not None:
                graph.add_edge(uid, type_uid, relation="type")

    for uid in index.manifest.types:
        type_ = index.type(uid)
        if type_ is None:
            continue
        graph.add_node(uid, kind="type", name=type_.name)
        for nested in type_.nested_types:
            if index.type(nested) is not None:
                graph.add_edge(uid, nested, relation="nested")

    return graph


def build_parent_graph(index: ManifestIndex) -> nx.DiGraph:
    """Build a directed graph of upward links (namespace parent, enclosing type)."""
    graph = nx.DiGraph()

    for uid in index.manifest.namespaces:
        namespace = index.namespace(uid)
        if namespace is not None and index.namespace(namespace.parent) is not None:
            graph.add_edge(uid, namespace.parent, relation="parent")

    for uid in index.manifest.types:
        type_ = index.type(uid)
        if type_ is not None and index.type(type_.enclosing_type) is not None:
            graph.add_edge(uid, type_.enclosing_type, relation="enclosing")

    return graph


def _normalize_cycle(cycle: list[str]) -> tuple[str, ...]:
    # Rotate so the smallest UID comes first; the same cycle then always
    # prints the same way.
    start = cycle.index(min(cycle))
    return tuple(cycle[start:] + cycle[:start])


def find_cycles(graph: nx.DiGraph) -> list[tuple[str, ...]]:
    """All simple cycles of the graph in a deterministic order."""
    return sorted({_normalize_cycle(list(cycle)) for cycle in nx.simple_cycles(graph)})


def report_containment_cycles(index: ManifestIndex, diagnostics: DiagnosticLog) -> int:
    """Record a diagnostic for every containment or parent cycle.

    Returns:
        Number of cycles reported.
    """
    reported = 0
    for label, graph in (
        ("containment", build_containment_graph(index)),
        ("parent", build_parent_graph(index)),
    ):
        for cycle in find_cycles(graph):
            path = " -> ".join(cycle + (cycle[0],))
            diagnostics.warn(
                DiagnosticCode.CONTAINMENT_CYCLE,
                f"{label} cycle: {path}",
                uid=cycle[0],
            )
            reported += 1
    if reported:
        logger.info(f"Manifest has {reported} containment cycles")
    return reported
