"""Package, node and document models.

Per-package data (``PkgInfo``) lives once in the registry; per-occurrence
data (``NodeInfo``) lives on each graph node, because the same package can
appear at several positions with different annotations.

The ``DepGraphData`` family mirrors the canonical JSON document and uses
camelCase aliases on the wire.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Pkg(BaseModel):
    """A package identity: name plus optional version."""

    model_config = ConfigDict(frozen=True)

    name: str
    version: str | None = None


class PkgInfo(Pkg):
    """Registry value for a package id. Extra flat metadata is preserved."""

    model_config = ConfigDict(frozen=True, extra="allow")

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)


class ProvenanceProperty(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str


class VersionProvenance(BaseModel):
    """Where a resolved version came from (manifest file, property, ...)."""

    model_config = ConfigDict(frozen=True)

    type: str
    location: str
    property: ProvenanceProperty | None = None


class NodeInfo(BaseModel):
    """Per-occurrence annotations. An empty NodeInfo equals an absent one."""

    model_config = ConfigDict(frozen=True, extra="allow", populate_by_name=True)

    version_provenance: VersionProvenance | None = Field(default=None, alias="versionProvenance")
    labels: dict[str, str] | None = None

    def to_dict(self) -> dict[str, Any]:
        """Wire form with unset fields dropped (``{}`` when empty)."""
        return self.model_dump(by_alias=True, exclude_none=True)

    def is_empty(self) -> bool:
        return not self.to_dict()


class Repository(BaseModel):
    model_config = ConfigDict(frozen=True)

    alias: str


class PkgManager(BaseModel):
    """Opaque package-manager descriptor carried through serialization."""

    model_config = ConfigDict(frozen=True, extra="allow")

    name: str
    version: str | None = None
    repositories: list[Repository] | None = None


class Node(BaseModel):
    """Query view of one graph occurrence."""

    model_config = ConfigDict(frozen=True)

    id: str
    pkg: PkgInfo
    info: NodeInfo = Field(default_factory=NodeInfo)


# --- Canonical document ---


class DepRef(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    node_id: str = Field(alias="nodeId")


class GraphNodeData(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    node_id: str = Field(alias="nodeId")
    pkg_id: str = Field(alias="pkgId")
    deps: list[DepRef] = Field(default_factory=list)
    info: NodeInfo | None = None


class GraphData(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    root_node_id: str = Field(alias="rootNodeId")
    nodes: list[GraphNodeData]


class PkgEntry(BaseModel):
    id: str
    info: PkgInfo


class DepGraphData(BaseModel):
    """The schema-versioned document produced by ``DepGraphImpl.to_json()``."""

    model_config = ConfigDict(populate_by_name=True)

    schema_version: str = Field(alias="schemaVersion")
    pkg_manager: PkgManager = Field(alias="pkgManager")
    pkgs: list[PkgEntry]
    graph: GraphData

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)
