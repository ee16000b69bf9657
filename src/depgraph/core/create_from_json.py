"""create_from_json — rebuild a DepGraphImpl from its canonical document.

Validation order: schema version, document shape (pydantic), then
referential integrity (root node, package ids, dependency targets).
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from depgraph.core.builder import as_pkg_info
from depgraph.core.dep_graph import DepGraphImpl
from depgraph.domain.errors import IncompatibleSchemaError, MalformedDocumentError
from depgraph.domain.ids import SUPPORTED_SCHEMA_MAJOR, get_pkg_id, is_schema_compatible
from depgraph.domain.types import DepGraphData, PkgInfo
from depgraph.infrastructure.graph.store import GraphStore

logger = logging.getLogger(__name__)


def create_from_json(document: Mapping[str, Any] | str | bytes) -> DepGraphImpl:
    """Deserialize *document* (a mapping or its JSON text) into a DepGraphImpl.

    Raises:
        IncompatibleSchemaError: If the schema major version is unsupported.
        MalformedDocumentError: If the document is structurally invalid.
    """
    if isinstance(document, str | bytes):
        try:
            document = json.loads(document)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            msg = f"dep-graph document is not valid JSON: {exc}"
            raise MalformedDocumentError(msg) from exc
    if not isinstance(document, Mapping):
        msg = "dep-graph document must be a JSON object"
        raise MalformedDocumentError(msg)

    _check_schema_version(document.get("schemaVersion"))

    try:
        data = DepGraphData.model_validate(dict(document))
    except ValidationError as exc:
        msg = f"invalid dep-graph document: {exc.error_count()} error(s)\n{exc}"
        raise MalformedDocumentError(msg) from exc

    _check_references(data)

    store = GraphStore(data.graph.root_node_id)
    for entry in data.pkgs:
        store.add_pkg(entry.id, as_pkg_info(entry.info))
    for node in data.graph.nodes:
        store.add_node(node.node_id, node.pkg_id, node.info)
    for node in data.graph.nodes:
        for dep in node.deps:
            store.add_edge(node.node_id, dep.node_id)

    logger.debug(
        "loaded dep graph document v%s: %d nodes, %d pkgs",
        data.schema_version,
        len(data.graph.nodes),
        len(data.pkgs),
    )
    return DepGraphImpl(store, data.pkg_manager)


def _check_schema_version(version: object) -> None:
    if not isinstance(version, str):
        msg = ".schemaVersion is missing"
        raise MalformedDocumentError(msg)
    if not is_schema_compatible(version):
        msg = f"dep-graph schemaVersion {version!r} not in '^{SUPPORTED_SCHEMA_MAJOR}.0.0'"
        raise IncompatibleSchemaError(msg)


def _check_references(data: DepGraphData) -> None:
    pkgs: dict[str, PkgInfo] = {}
    for entry in data.pkgs:
        if entry.id in pkgs:
            msg = f".pkgs contains duplicate id {entry.id!r}"
            raise MalformedDocumentError(msg)
        if get_pkg_id(entry.info) != entry.id:
            msg = f".pkgs item id {entry.id!r} does not match info ({get_pkg_id(entry.info)!r})"
            raise MalformedDocumentError(msg)
        pkgs[entry.id] = entry.info

    node_ids: set[str] = set()
    for node in data.graph.nodes:
        if node.node_id in node_ids:
            msg = f".graph.nodes contains duplicate node {node.node_id!r}"
            raise MalformedDocumentError(msg)
        node_ids.add(node.node_id)

    if data.graph.root_node_id not in node_ids:
        msg = f".graph.rootNodeId {data.graph.root_node_id!r} root graph node is missing"
        raise MalformedDocumentError(msg)

    for node in data.graph.nodes:
        if node.pkg_id not in pkgs:
            msg = f".pkgs item missing for graph node {node.node_id!r}"
            raise MalformedDocumentError(msg)
        for dep in node.deps:
            if dep.node_id not in node_ids:
                msg = f".graph.nodes - missing node {dep.node_id!r} (dep of {node.node_id!r})"
                raise MalformedDocumentError(msg)
