"""DepGraphBuilder — incremental construction of a DepGraphImpl.

Usage::

    builder = DepGraphBuilder(PkgManager(name="npm"), PkgInfo(name="app", version="1.0.0"))
    builder.add_pkg_node(PkgInfo(name="lodash", version="4.17.21"), "lodash@4.17.21")
    builder.connect_dep(builder.root_node_id, "lodash@4.17.21")
    dep_graph = builder.build()

INVARIANT: ``build()`` only returns graphs whose store invariants hold.
"""

from __future__ import annotations

import logging

from depgraph.core.dep_graph import DepGraphImpl
from depgraph.domain.errors import InvalidGraphConstructionError
from depgraph.domain.ids import get_pkg_id
from depgraph.domain.types import NodeInfo, Pkg, PkgInfo, PkgManager
from depgraph.infrastructure.graph.store import GraphStore

logger = logging.getLogger(__name__)

DEFAULT_ROOT_NODE_ID = "root-node"
DEFAULT_ROOT_PKG = PkgInfo(name="_root", version="0.0.0")


def as_pkg_info(pkg: Pkg) -> PkgInfo:
    """Coerce *pkg* to a PkgInfo; an empty version becomes None."""
    info = pkg if isinstance(pkg, PkgInfo) else PkgInfo.model_validate(pkg.model_dump())
    if info.version == "":
        info = info.model_copy(update={"version": None})
    return info


class DepGraphBuilder:
    """Collects nodes and edges, then freezes them into a DepGraphImpl."""

    def __init__(
        self,
        pkg_manager: PkgManager,
        root_pkg: Pkg | None = None,
        root_node_id: str = DEFAULT_ROOT_NODE_ID,
    ) -> None:
        self._pkg_manager = pkg_manager
        self._root_pkg = as_pkg_info(root_pkg) if root_pkg is not None else DEFAULT_ROOT_PKG
        self._store = GraphStore(root_node_id)
        self.add_pkg_node(self._root_pkg, root_node_id)

    @property
    def root_node_id(self) -> str:
        return self._store.root_node_id

    @property
    def root_pkg(self) -> PkgInfo:
        return self._root_pkg

    def get_pkgs(self) -> list[PkgInfo]:
        return list(self._store.pkgs.values())

    def add_pkg_node(self, pkg: Pkg, node_id: str, node_info: NodeInfo | None = None) -> DepGraphBuilder:
        """Register *pkg* and bind *node_id* to it.

        Re-adding an existing *node_id* rebinds it; the root node can only be
        re-added with the root package.

        Raises:
            InvalidGraphConstructionError: On an attempt to rebind the root node.
        """
        info = as_pkg_info(pkg)
        if node_id == self.root_node_id and info != self._root_pkg:
            msg = "add_pkg_node() cannot override the root node"
            raise InvalidGraphConstructionError(msg)

        pkg_id = get_pkg_id(info)
        self._store.add_pkg(pkg_id, info)
        self._store.add_node(node_id, pkg_id, node_info)
        return self

    def connect_dep(self, parent_node_id: str, dep_node_id: str) -> DepGraphBuilder:
        """Add the edge ``parent -> dep`` ("parent directly depends on dep").

        Raises:
            InvalidGraphConstructionError: If either node was never added.
        """
        if parent_node_id not in self._store:
            msg = f"parent node {parent_node_id!r} does not exist"
            raise InvalidGraphConstructionError(msg)
        if dep_node_id not in self._store:
            msg = f"dep node {dep_node_id!r} does not exist"
            raise InvalidGraphConstructionError(msg)
        self._store.add_edge(parent_node_id, dep_node_id)
        return self

    def build(self) -> DepGraphImpl:
        """Validate the collected graph and return an immutable engine over it.

        Raises:
            InvalidGraphConstructionError: If any store invariant is violated.
        """
        problems = self._store.invariant_violations()
        if problems:
            raise InvalidGraphConstructionError("; ".join(problems))
        logger.debug(
            "built dep graph: %d nodes, %d edges, %d pkgs",
            self._store.graph.number_of_nodes(),
            self._store.graph.number_of_edges(),
            len(self._store.pkgs),
        )
        return DepGraphImpl(self._store.copy(), self._pkg_manager)
