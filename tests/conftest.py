"""Shared pytest fixtures for depgraph tests."""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path

import pytest
from click.testing import CliRunner

from depgraph.core.builder import DepGraphBuilder
from depgraph.core.dep_graph import DepGraphImpl
from depgraph.domain.ids import parse_pkg_spec
from depgraph.domain.types import PkgInfo, PkgManager

type GraphFactory = Callable[[str, dict[str, list[str]]], DepGraphImpl]


def pkg_info(spec: str) -> PkgInfo:
    return PkgInfo.model_validate(parse_pkg_spec(spec).model_dump())


def _make_graph(root: str, deps: dict[str, list[str]]) -> DepGraphImpl:
    """Build a graph with one occurrence per package; node id == package spec.

    *deps* maps a package spec to the specs it depends on; the root spec
    maps onto the builder's root node.
    """
    builder = DepGraphBuilder(PkgManager(name="npm"), pkg_info(root))

    def node_id(spec: str) -> str:
        if spec == root:
            return builder.root_node_id
        if spec not in seen:
            builder.add_pkg_node(pkg_info(spec), spec)
            seen.add(spec)
        return spec

    seen: set[str] = set()
    for parent, children in deps.items():
        parent_id = node_id(parent)
        for child in children:
            builder.connect_dep(parent_id, node_id(child))
    return builder.build()


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def make_graph() -> GraphFactory:
    """Factory building a graph from a ``{parent: [deps]}`` mapping of pkg specs."""
    return _make_graph


@pytest.fixture
def diamond_graph() -> DepGraphImpl:
    """A@1.0.0 -> B, C; B -> D; C -> D."""
    return _make_graph(
        "A@1.0.0",
        {
            "A@1.0.0": ["B@1.0.0", "C@1.0.0"],
            "B@1.0.0": ["D@1.0.0"],
            "C@1.0.0": ["D@1.0.0"],
        },
    )


@pytest.fixture
def version_split_graph() -> DepGraphImpl:
    """A -> C@2.0.0 directly and A -> B -> C@1.0.0."""
    return _make_graph(
        "A@1.0.0",
        {
            "A@1.0.0": ["C@2.0.0", "B@1.0.0"],
            "B@1.0.0": ["C@1.0.0"],
        },
    )


@pytest.fixture
def cyclic_graph() -> DepGraphImpl:
    """A -> B -> C -> B."""
    return _make_graph(
        "A@1.0.0",
        {
            "A@1.0.0": ["B@1.0.0"],
            "B@1.0.0": ["C@1.0.0"],
            "C@1.0.0": ["B@1.0.0"],
        },
    )


@pytest.fixture
def write_graph(tmp_path: Path) -> Callable[[DepGraphImpl, str], Path]:
    """Write a graph's document to ``tmp_path/<name>`` and return the path."""

    def _write(dep_graph: DepGraphImpl, name: str = "graph.json") -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(dep_graph.to_json()), encoding="utf-8")
        return path

    return _write
