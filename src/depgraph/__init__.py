"""depgraph — dependency graph model, analysis and canonical serialization."""

from __future__ import annotations

from depgraph.core.builder import DepGraphBuilder
from depgraph.core.create_from_json import create_from_json
from depgraph.core.dep_graph import DepGraph, DepGraphImpl
from depgraph.core.prune import prune_graph
from depgraph.domain import errors
from depgraph.domain.types import (
    Node,
    NodeInfo,
    Pkg,
    PkgInfo,
    PkgManager,
    VersionProvenance,
)

__version__ = "0.1.0"

__all__ = [
    "DepGraph",
    "DepGraphBuilder",
    "DepGraphImpl",
    "Node",
    "NodeInfo",
    "Pkg",
    "PkgInfo",
    "PkgManager",
    "VersionProvenance",
    "__version__",
    "create_from_json",
    "errors",
    "prune_graph",
]
