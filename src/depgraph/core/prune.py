"""prune_graph — bound path blow-up by expanding every node only once.

A depth-first walk from the root keeps the first edge into each node. Every
later edge into an already-expanded node (diamond re-convergence or a cycle
back-edge) is redirected to a shared stub ``"<node_id>:pruned"`` (with a
``:<n>`` counter appended when the input already has a node by that id). The
stub has the same package, the node's labels plus ``pruned="true"``, and no
dependencies. The result is acyclic and each real node keeps exactly one
parent, so path counts are bounded by the edge count.
"""

from __future__ import annotations

import logging

from depgraph.core.builder import DepGraphBuilder
from depgraph.core.dep_graph import DepGraphImpl
from depgraph.domain.types import NodeInfo

logger = logging.getLogger(__name__)

PRUNED_LABEL = "pruned"
PRUNED_SUFFIX = ":pruned"


def _pruned_info(info: NodeInfo) -> NodeInfo:
    labels = dict(info.labels or {})
    labels[PRUNED_LABEL] = "true"
    return info.model_copy(update={"labels": labels})


def _stub_id(node_id: str, taken: set[str]) -> str:
    stub_id = f"{node_id}{PRUNED_SUFFIX}"
    suffix = 2
    while stub_id in taken:
        stub_id = f"{node_id}{PRUNED_SUFFIX}:{suffix}"
        suffix += 1
    return stub_id


def prune_graph(dep_graph: DepGraphImpl, *, only_if_cycles: bool = False) -> DepGraphImpl:
    """Return a pruned copy of *dep_graph*.

    Args:
        dep_graph: The graph to prune. It is never modified.
        only_if_cycles: Return *dep_graph* itself when it is acyclic.
    """
    if only_if_cycles and not dep_graph.has_cycles():
        return dep_graph

    root_id = dep_graph.root_node_id
    builder = DepGraphBuilder(dep_graph.pkg_manager, dep_graph.root_pkg, root_id)
    root_info = dep_graph.get_node(root_id).info
    if not root_info.is_empty():
        builder.add_pkg_node(dep_graph.root_pkg, root_id, root_info)

    expanded: set[str] = {root_id}
    taken: set[str] = {
        node_id for pkg in dep_graph.get_pkgs() for node_id in dep_graph.get_pkg_node_ids(pkg)
    }
    stubs: dict[str, str] = {}  # node id -> its stub id
    # (parent, child) edges still to place, consumed depth-first in dependency order.
    stack: list[tuple[str, str]] = [
        (root_id, dep_id) for dep_id in reversed(dep_graph.get_node_deps_node_ids(root_id))
    ]
    while stack:
        parent_id, node_id = stack.pop()
        node = dep_graph.get_node(node_id)
        if node_id in expanded:
            stub_id = stubs.get(node_id)
            if stub_id is None:
                stub_id = _stub_id(node_id, taken)
                taken.add(stub_id)
                stubs[node_id] = stub_id
                builder.add_pkg_node(node.pkg, stub_id, _pruned_info(node.info))
            builder.connect_dep(parent_id, stub_id)
            continue

        expanded.add(node_id)
        builder.add_pkg_node(node.pkg, node_id, node.info)
        builder.connect_dep(parent_id, node_id)
        stack.extend(
            (node_id, dep_id) for dep_id in reversed(dep_graph.get_node_deps_node_ids(node_id))
        )

    pruned = builder.build()
    logger.debug(
        "pruned dep graph: %d nodes kept, %d stubs",
        len(expanded),
        len(stubs),
    )
    return pruned
