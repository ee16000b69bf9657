"""Tests for DepGraphBuilder."""

from __future__ import annotations

import pytest

from depgraph.core.builder import DEFAULT_ROOT_NODE_ID, DEFAULT_ROOT_PKG, DepGraphBuilder
from depgraph.domain.errors import InvalidGraphConstructionError
from depgraph.domain.types import NodeInfo, Pkg, PkgInfo, PkgManager

NPM = PkgManager(name="npm")


class TestConstruction:
    def test_defaults(self) -> None:
        builder = DepGraphBuilder(NPM)
        assert builder.root_node_id == DEFAULT_ROOT_NODE_ID
        assert builder.root_pkg == DEFAULT_ROOT_PKG

        dep_graph = builder.build()
        assert dep_graph.root_pkg == PkgInfo(name="_root", version="0.0.0")
        assert dep_graph.get_pkgs() == [DEFAULT_ROOT_PKG]
        assert dep_graph.get_dep_pkgs() == []

    def test_custom_root(self) -> None:
        builder = DepGraphBuilder(NPM, PkgInfo(name="app", version="2.1.0"), "top")
        dep_graph = builder.build()
        assert dep_graph.root_node_id == "top"
        assert dep_graph.get_node("top").pkg.name == "app"

    def test_plain_pkg_is_accepted(self) -> None:
        builder = DepGraphBuilder(NPM, Pkg(name="app", version="1.0.0"))
        builder.add_pkg_node(Pkg(name="left-pad", version="1.3.0"), "lp")
        builder.connect_dep(builder.root_node_id, "lp")
        dep_graph = builder.build()
        assert isinstance(dep_graph.get_node("lp").pkg, PkgInfo)
        assert dep_graph.get_node_deps_node_ids(dep_graph.root_node_id) == ["lp"]

    def test_methods_chain(self) -> None:
        builder = DepGraphBuilder(NPM)
        result = builder.add_pkg_node(PkgInfo(name="a", version="1"), "a").connect_dep(
            DEFAULT_ROOT_NODE_ID, "a"
        )
        assert result is builder

    def test_get_pkgs_tracks_registrations(self) -> None:
        builder = DepGraphBuilder(NPM)
        builder.add_pkg_node(PkgInfo(name="a", version="1"), "a1")
        builder.add_pkg_node(PkgInfo(name="a", version="1"), "a2")
        assert builder.get_pkgs() == [DEFAULT_ROOT_PKG, PkgInfo(name="a", version="1")]

    def test_node_info_is_kept(self) -> None:
        builder = DepGraphBuilder(NPM)
        builder.add_pkg_node(PkgInfo(name="a", version="1"), "a", NodeInfo(labels={"scope": "dev"}))
        assert builder.build().get_node("a").info.labels == {"scope": "dev"}

    def test_empty_version_becomes_none(self) -> None:
        builder = DepGraphBuilder(NPM, PkgInfo(name="app", version=""))
        builder.add_pkg_node(Pkg(name="x", version=""), "x")
        dep_graph = builder.build()
        assert dep_graph.root_pkg.version is None
        assert dep_graph.get_node("x").pkg == PkgInfo(name="x")
        assert dep_graph.get_pkg_node_ids(Pkg(name="x")) == ["x"]


class TestRootProtection:
    def test_root_cannot_be_rebound(self) -> None:
        builder = DepGraphBuilder(NPM, PkgInfo(name="app", version="1"))
        with pytest.raises(InvalidGraphConstructionError, match="cannot override the root"):
            builder.add_pkg_node(PkgInfo(name="other", version="1"), builder.root_node_id)

    def test_root_can_be_readded_with_root_pkg(self) -> None:
        root = PkgInfo(name="app", version="1")
        builder = DepGraphBuilder(NPM, root)
        builder.add_pkg_node(root, builder.root_node_id, NodeInfo(labels={"kind": "root"}))
        dep_graph = builder.build()
        assert dep_graph.get_node(dep_graph.root_node_id).info.labels == {"kind": "root"}


class TestConnectDep:
    def test_unknown_parent(self) -> None:
        builder = DepGraphBuilder(NPM)
        builder.add_pkg_node(PkgInfo(name="a", version="1"), "a")
        with pytest.raises(InvalidGraphConstructionError, match="parent node 'nope'"):
            builder.connect_dep("nope", "a")

    def test_unknown_dep(self) -> None:
        builder = DepGraphBuilder(NPM)
        with pytest.raises(InvalidGraphConstructionError, match="dep node 'nope'"):
            builder.connect_dep(builder.root_node_id, "nope")

    def test_duplicate_edge_collapses(self) -> None:
        builder = DepGraphBuilder(NPM)
        builder.add_pkg_node(PkgInfo(name="a", version="1"), "a")
        builder.connect_dep(builder.root_node_id, "a").connect_dep(builder.root_node_id, "a")
        assert builder.build().get_node_deps_node_ids(DEFAULT_ROOT_NODE_ID) == ["a"]


class TestRebind:
    def test_rebinding_moves_the_occurrence(self) -> None:
        builder = DepGraphBuilder(NPM)
        old, new = PkgInfo(name="a", version="1"), PkgInfo(name="a", version="2")
        builder.add_pkg_node(old, "a")
        builder.connect_dep(builder.root_node_id, "a")
        builder.add_pkg_node(new, "a")

        dep_graph = builder.build()
        assert dep_graph.get_node("a").pkg == new
        assert dep_graph.get_pkg_node_ids(new) == ["a"]
        assert dep_graph.get_pkg_node_ids(old) == []
        # edges survive the rebind
        assert dep_graph.get_node_deps_node_ids(DEFAULT_ROOT_NODE_ID) == ["a"]


class TestBuild:
    def test_build_snapshots_the_store(self) -> None:
        builder = DepGraphBuilder(NPM)
        first = builder.build()
        builder.add_pkg_node(PkgInfo(name="late", version="1"), "late")
        builder.connect_dep(builder.root_node_id, "late")

        assert first.get_node_deps_node_ids(first.root_node_id) == []
        assert builder.build().get_node_deps_node_ids(first.root_node_id) == ["late"]

    def test_pkg_manager_is_carried(self) -> None:
        manager = PkgManager(name="pip", version="24.0")
        assert DepGraphBuilder(manager).build().pkg_manager == manager
