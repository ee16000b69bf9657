"""DepGraphImpl — read-only query and analysis surface over a GraphStore.

The wrapped store is never mutated. Two instance-scoped memo caches exist:
the cycle flag and the per-node "paths to root" count table. Both are
filled compute-then-publish, so redundant concurrent fills are harmless.

Upward path enumeration, path counting and equality co-traversal run on
explicit work stacks; deep graphs never hit the interpreter recursion limit.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

import networkx as nx

from depgraph.domain.errors import CyclicGraphUnsupportedError, DepGraphError, UnknownPackageError
from depgraph.domain.ids import SCHEMA_VERSION, get_pkg_id
from depgraph.domain.types import (
    DepGraphData,
    DepRef,
    GraphData,
    GraphNodeData,
    Node,
    Pkg,
    PkgEntry,
    PkgInfo,
    PkgManager,
)
from depgraph.infrastructure.graph.store import GraphStore

logger = logging.getLogger(__name__)


@runtime_checkable
class DepGraph(Protocol):
    """Public query contract. Equality is defined over this surface only."""

    @property
    def root_node_id(self) -> str: ...

    @property
    def root_pkg(self) -> PkgInfo: ...

    @property
    def pkg_manager(self) -> PkgManager: ...

    def get_pkgs(self) -> list[PkgInfo]: ...

    def get_dep_pkgs(self) -> list[PkgInfo]: ...

    def get_pkg_nodes(self, pkg: Pkg) -> list[Node]: ...

    def get_node(self, node_id: str) -> Node: ...

    def get_node_deps_node_ids(self, node_id: str) -> list[str]: ...

    def has_cycles(self) -> bool: ...

    def pkg_paths_to_root(self, pkg: Pkg) -> list[list[PkgInfo]]: ...

    def count_paths_to_root(self, pkg: Pkg) -> int: ...

    def direct_deps_leading_to(self, pkg: Pkg) -> list[PkgInfo]: ...

    def equals(self, other: object, *, compare_root: bool = True) -> bool: ...

    def to_json(self) -> dict[str, Any]: ...


class DepGraphImpl:
    """Immutable dependency graph produced by the builder or the deserializer."""

    SCHEMA_VERSION = SCHEMA_VERSION

    get_pkg_id = staticmethod(get_pkg_id)

    def __init__(self, store: GraphStore, pkg_manager: PkgManager) -> None:
        self._store = store
        self._pkg_manager = pkg_manager
        self._root_pkg_id = store.node_pkg_id(store.root_node_id)

        self._pkg_list = list(store.pkgs.values())
        self._dep_pkgs_list = [
            info for pkg_id, info in store.pkgs.items() if pkg_id != self._root_pkg_id
        ]

        self._has_cycles: bool | None = None
        self._count_paths_cache: dict[str, int] = {}

    def __repr__(self) -> str:
        return (
            f"<DepGraphImpl root={self._root_pkg_id!r} "
            f"nodes={self._store.graph.number_of_nodes()} pkgs={len(self._pkg_list)}>"
        )

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def pkg_manager(self) -> PkgManager:
        return self._pkg_manager

    @property
    def root_pkg(self) -> PkgInfo:
        return self._store.pkgs[self._root_pkg_id]

    @property
    def root_node_id(self) -> str:
        return self._store.root_node_id

    def get_pkgs(self) -> list[PkgInfo]:
        return list(self._pkg_list)

    def get_dep_pkgs(self) -> list[PkgInfo]:
        return list(self._dep_pkgs_list)

    def get_pkg_node_ids(self, pkg: Pkg) -> list[str]:
        """Return every node id at which *pkg* occurs.

        Raises:
            UnknownPackageError: If *pkg* is not in the registry.
        """
        pkg_id = get_pkg_id(pkg)
        if pkg_id not in self._store.pkgs:
            raise UnknownPackageError(pkg_id)
        return list(self._store.pkg_nodes.get(pkg_id, ()))

    def get_pkg_nodes(self, pkg: Pkg) -> list[Node]:
        return [self.get_node(node_id) for node_id in self.get_pkg_node_ids(pkg)]

    def get_node(self, node_id: str) -> Node:
        return Node(
            id=node_id,
            pkg=self.get_node_pkg(node_id),
            info=self._store.node_info(node_id),
        )

    def get_node_pkg(self, node_id: str) -> PkgInfo:
        return self._store.pkgs[self._store.node_pkg_id(node_id)]

    def get_node_deps(self, node_id: str) -> list[Node]:
        return [self.get_node(dep_id) for dep_id in self.get_node_deps_node_ids(node_id)]

    def get_node_deps_node_ids(self, node_id: str) -> list[str]:
        return self._store.successors(node_id)

    def get_node_parents_node_ids(self, node_id: str) -> list[str]:
        return self._store.predecessors(node_id)

    # ------------------------------------------------------------------
    # Cycle detection
    # ------------------------------------------------------------------

    def has_cycles(self) -> bool:
        """Whether the graph contains a directed cycle (memoized)."""
        if self._has_cycles is None:
            result = not nx.is_directed_acyclic_graph(self._store.graph)
            logger.debug("cycle detection for %s: has_cycles=%s", self._root_pkg_id, result)
            self._has_cycles = result
        return self._has_cycles

    def _require_acyclic(self, op: str) -> None:
        if self.has_cycles():
            msg = f"{op} does not support cyclic graphs"
            raise CyclicGraphUnsupportedError(msg)

    # ------------------------------------------------------------------
    # Upward path analysis
    # ------------------------------------------------------------------

    def pkg_paths_to_root(self, pkg: Pkg) -> list[list[PkgInfo]]:
        """Enumerate every path from each occurrence of *pkg* up to a root.

        Each path starts at *pkg* and ends at a parentless node. Paths are
        not deduplicated. Output is sorted by length, shortest first; equal
        lengths keep enumeration order. Output size can be exponential in the
        number of diamonds; use :meth:`count_paths_to_root` when only the
        number is needed.

        Raises:
            CyclicGraphUnsupportedError: If the graph has cycles.
            UnknownPackageError: If *pkg* is not in the registry.
        """
        self._require_acyclic("pkg_paths_to_root")

        memo: dict[str, list[list[PkgInfo]]] = {}
        paths: list[list[PkgInfo]] = []
        for node_id in self.get_pkg_node_ids(pkg):
            paths.extend(self._paths_from_node_to_root(node_id, memo))
        return sorted(paths, key=len)

    def _paths_from_node_to_root(
        self, node_id: str, memo: dict[str, list[list[PkgInfo]]]
    ) -> list[list[PkgInfo]]:
        # Postorder over ancestors: a node is resolved once all parents are.
        stack: list[tuple[str, bool]] = [(node_id, False)]
        while stack:
            current, parents_done = stack.pop()
            if current in memo:
                continue
            parents = self.get_node_parents_node_ids(current)
            if not parents_done:
                stack.append((current, True))
                stack.extend((parent, False) for parent in parents if parent not in memo)
                continue
            current_pkg = self.get_node_pkg(current)
            if not parents:
                memo[current] = [[current_pkg]]
            else:
                memo[current] = [
                    [current_pkg, *path] for parent in parents for path in memo[parent]
                ]
        return memo[node_id]

    def count_paths_to_root(self, pkg: Pkg) -> int:
        """Count the paths :meth:`pkg_paths_to_root` would return, without building them.

        Raises:
            CyclicGraphUnsupportedError: If the graph has cycles.
            UnknownPackageError: If *pkg* is not in the registry.
        """
        self._require_acyclic("count_paths_to_root")
        return sum(self._count_node_paths_to_root(node_id) for node_id in self.get_pkg_node_ids(pkg))

    def _count_node_paths_to_root(self, node_id: str) -> int:
        cache = self._count_paths_cache
        stack: list[tuple[str, bool]] = [(node_id, False)]
        while stack:
            current, parents_done = stack.pop()
            if current in cache:
                continue
            parents = self.get_node_parents_node_ids(current)
            if not parents_done:
                stack.append((current, True))
                stack.extend((parent, False) for parent in parents if parent not in cache)
                continue
            cache[current] = sum(cache[parent] for parent in parents) if parents else 1
        return cache[node_id]

    # ------------------------------------------------------------------
    # Subtree containment
    # ------------------------------------------------------------------

    def direct_deps_leading_to(self, pkg: Pkg) -> list[PkgInfo]:
        """Return the root's direct dependencies whose subtree contains *pkg*."""
        pkg_node_ids = set(self.get_pkg_node_ids(pkg))
        leading: list[PkgInfo] = []
        for dep_id in self.get_node_deps_node_ids(self.root_node_id):
            reachable = nx.dfs_postorder_nodes(self._store.graph, source=dep_id)
            if any(node_id in pkg_node_ids for node_id in reachable):
                leading.append(self.get_node_pkg(dep_id))
        return leading

    # ------------------------------------------------------------------
    # Structural equality
    # ------------------------------------------------------------------

    def equals(self, other: object, *, compare_root: bool = True) -> bool:
        """Deep structural comparison with another graph. Never raises.

        *other* may be any :class:`DepGraph` implementation, an object
        exposing only ``to_json()``, or a raw document mapping; the latter
        two are normalized through the deserializer first.

        With ``compare_root=False`` the root packages and root node infos
        are ignored, but the root's dependencies are still compared.
        """
        try:
            other_graph = _as_dep_graph(other)
            if other_graph is None:
                return False
            return _graphs_equal(self, other_graph, compare_root=compare_root)
        except DepGraphError as exc:
            logger.debug("equality check failed: %s", exc)
            return False

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_json(self) -> dict[str, Any]:
        """Return the canonical, schema-versioned document as a plain dict."""
        graph = self._store.graph
        nodes: list[GraphNodeData] = []
        for node_id, attrs in graph.nodes(data=True):
            info = attrs["info"]
            nodes.append(
                GraphNodeData(
                    node_id=node_id,
                    pkg_id=attrs["pkg_id"],
                    deps=[DepRef(node_id=dep_id) for dep_id in graph.successors(node_id)],
                    info=None if info.is_empty() else info,
                )
            )
        data = DepGraphData(
            schema_version=self.SCHEMA_VERSION,
            pkg_manager=self._pkg_manager,
            pkgs=[PkgEntry(id=pkg_id, info=info) for pkg_id, info in self._store.pkgs.items()],
            graph=GraphData(root_node_id=self.root_node_id, nodes=nodes),
        )
        return data.to_dict()


def _as_dep_graph(other: object) -> DepGraph | None:
    """Bring *other* onto the public query contract, or None if impossible."""
    from depgraph.core.create_from_json import create_from_json

    if isinstance(other, DepGraph):
        return other
    if isinstance(other, Mapping):
        return create_from_json(other)
    to_json = getattr(other, "to_json", None)
    if callable(to_json):
        logger.debug("normalizing foreign graph %s via its document form", type(other).__name__)
        return create_from_json(to_json())
    return None


def _graphs_equal(graph_a: DepGraph, graph_b: DepGraph, *, compare_root: bool) -> bool:
    """Co-traverse both graphs from their roots.

    A pair of node ids already descended is treated as equal on revisit, so
    cyclic graphs terminate; substructure inside a cycle is only verified up
    to its first encounter.
    """
    root_a, root_b = graph_a.root_node_id, graph_b.root_node_id
    traversed: set[tuple[str, str]] = set()
    stack: list[tuple[str, str]] = [(root_a, root_b)]
    at_root = True

    while stack:
        node_id_a, node_id_b = stack.pop()
        if not at_root:
            if (node_id_a, node_id_b) in traversed:
                continue
            traversed.add((node_id_a, node_id_b))
        at_root = False

        if compare_root or (node_id_a != root_a and node_id_b != root_b):
            node_a = graph_a.get_node(node_id_a)
            node_b = graph_b.get_node(node_id_b)
            if node_a.pkg.to_dict() != node_b.pkg.to_dict():
                return False
            if node_a.info.to_dict() != node_b.info.to_dict():
                return False

        deps_a = graph_a.get_node_deps_node_ids(node_id_a)
        deps_b = graph_b.get_node_deps_node_ids(node_id_b)
        if len(deps_a) != len(deps_b):
            return False

        deps_a = _sorted_by_pkg_id(graph_a, deps_a)
        deps_b = _sorted_by_pkg_id(graph_b, deps_b)
        # Reversed so the first pair is descended first.
        stack.extend(reversed(list(zip(deps_a, deps_b, strict=True))))

    return True


def _sorted_by_pkg_id(graph: DepGraph, node_ids: list[str]) -> list[str]:
    return sorted(node_ids, key=lambda node_id: get_pkg_id(graph.get_node(node_id).pkg))
