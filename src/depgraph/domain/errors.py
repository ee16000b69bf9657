"""Error vocabulary shared by the engine, builder and deserializer.

Every error carries a stable ``code`` so the service layer can turn it into
a :class:`~depgraph.services.result.ServiceError` without string matching.
"""

from __future__ import annotations

from typing import ClassVar


class DepGraphError(Exception):
    """Base class for all depgraph errors."""

    code: ClassVar[str] = "DEPGRAPH_ERROR"


class UnknownNodeError(DepGraphError, KeyError):
    """A query referenced a node id that is not in the graph."""

    code = "UNKNOWN_NODE"

    def __init__(self, node_id: str) -> None:
        super().__init__(f"no such node: {node_id}")
        self.node_id = node_id

    def __str__(self) -> str:
        return str(self.args[0])


class UnknownPackageError(DepGraphError, KeyError):
    """A query referenced a package identity that is not in the registry."""

    code = "UNKNOWN_PACKAGE"

    def __init__(self, pkg_id: str) -> None:
        super().__init__(f"no such pkg: {pkg_id}")
        self.pkg_id = pkg_id

    def __str__(self) -> str:
        return str(self.args[0])


class CyclicGraphUnsupportedError(DepGraphError):
    """An upward path query was invoked on a cyclic graph."""

    code = "CYCLIC_GRAPH"


class IncompatibleSchemaError(DepGraphError):
    """A document declares a schema version whose major is not supported."""

    code = "INCOMPATIBLE_SCHEMA"


class MalformedDocumentError(DepGraphError):
    """A document is structurally invalid (missing root, dangling edge, ...)."""

    code = "MALFORMED_DOCUMENT"


class InvalidGraphConstructionError(DepGraphError):
    """The builder was asked to produce a graph that violates an invariant."""

    code = "INVALID_GRAPH"
