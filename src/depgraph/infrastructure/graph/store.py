"""GraphStore — NetworkX adjacency plus package registry and occurrence index.

Nodes are opaque string ids; each carries ``pkg_id`` and ``info``
attributes. Successor and predecessor lookups come from the DiGraph, so
parent relationships are derived, never stored separately.

Insertion order of nodes, edges and registry entries is preserved and is
the enumeration order used by serialization.
"""

from __future__ import annotations

from typing import cast

import networkx as nx

from depgraph.domain.errors import UnknownNodeError
from depgraph.domain.types import NodeInfo, PkgInfo

type _Graph = nx.DiGraph


class GraphStore:
    """Mutable during construction; treated as read-only once wrapped by an engine."""

    def __init__(self, root_node_id: str) -> None:
        self.root_node_id = root_node_id
        self.graph: _Graph = nx.DiGraph()
        self.pkgs: dict[str, PkgInfo] = {}
        # pkg_id -> ordered set of node ids (dict keys keep insertion order)
        self.pkg_nodes: dict[str, dict[str, None]] = {}

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    def add_pkg(self, pkg_id: str, info: PkgInfo) -> None:
        self.pkgs[pkg_id] = info
        self.pkg_nodes.setdefault(pkg_id, {})

    def add_node(self, node_id: str, pkg_id: str, info: NodeInfo | None = None) -> None:
        """Bind *node_id* to *pkg_id*, moving it out of any previous occurrence set."""
        if node_id in self.graph:
            previous = self.graph.nodes[node_id]["pkg_id"]
            self.pkg_nodes.get(previous, {}).pop(node_id, None)
        self.pkg_nodes.setdefault(pkg_id, {})[node_id] = None
        self.graph.add_node(node_id, pkg_id=pkg_id, info=info or NodeInfo())

    def add_edge(self, parent_id: str, dep_id: str) -> None:
        self.graph.add_edge(parent_id, dep_id)

    def copy(self) -> GraphStore:
        """Return an independent store with the same nodes, edges and registry."""
        clone = GraphStore(self.root_node_id)
        clone.graph = self.graph.copy()
        clone.pkgs = dict(self.pkgs)
        clone.pkg_nodes = {pkg_id: dict(node_ids) for pkg_id, node_ids in self.pkg_nodes.items()}
        return clone

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def __contains__(self, node_id: object) -> bool:
        return node_id in self.graph

    def node_attrs(self, node_id: str) -> dict[str, object]:
        try:
            return self.graph.nodes[node_id]
        except KeyError:
            raise UnknownNodeError(node_id) from None

    def node_pkg_id(self, node_id: str) -> str:
        return str(self.node_attrs(node_id)["pkg_id"])

    def node_info(self, node_id: str) -> NodeInfo:
        return cast(NodeInfo, self.node_attrs(node_id)["info"])

    def successors(self, node_id: str) -> list[str]:
        if node_id not in self.graph:
            raise UnknownNodeError(node_id)
        return list(self.graph.successors(node_id))

    def predecessors(self, node_id: str) -> list[str]:
        if node_id not in self.graph:
            raise UnknownNodeError(node_id)
        return list(self.graph.predecessors(node_id))

    # ------------------------------------------------------------------
    # Invariants
    # ------------------------------------------------------------------

    def invariant_violations(self) -> list[str]:
        """Return a description of every broken store invariant (empty when valid)."""
        problems: list[str] = []
        if self.root_node_id not in self.graph:
            problems.append(f"root node {self.root_node_id!r} does not exist")

        expected: dict[str, set[str]] = {}
        for node_id, pkg_id in self.graph.nodes(data="pkg_id"):
            if pkg_id not in self.pkgs:
                problems.append(f"node {node_id!r} references unknown pkg {pkg_id!r}")
            expected.setdefault(pkg_id, set()).add(node_id)

        for pkg_id in self.pkgs.keys() | self.pkg_nodes.keys():
            if set(self.pkg_nodes.get(pkg_id, ())) != expected.get(pkg_id, set()):
                problems.append(f"occurrence index out of sync for pkg {pkg_id!r}")
        return problems
