"""Tests for the depgraph CLI."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Generator
from pathlib import Path

import pytest
from click.testing import CliRunner

from depgraph import __version__
from depgraph.cli import cli
from depgraph.config.discovery import CONFIG_ENV_VAR, CONFIG_FILENAME
from depgraph.core.create_from_json import create_from_json
from depgraph.core.dep_graph import DepGraphImpl

type GraphWriter = Callable[..., Path]


@pytest.fixture(autouse=True)
def _isolated(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[None]:
    """Keep config discovery inside tmp_path and restore logging afterwards."""
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    monkeypatch.chdir(tmp_path)
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    depgraph_level = logging.getLogger("depgraph").level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    logging.getLogger("depgraph").setLevel(depgraph_level)


def test_cli_help(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    assert "depgraph" in result.output
    for command in ("info", "pkgs", "paths", "count", "leading-to", "compare", "prune"):
        assert command in result.output


def test_cli_version(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_cli_no_args(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, [])
    assert result.exit_code == 0
    assert "Usage" in result.output


class TestInspect:
    def test_info_human(
        self, cli_runner: CliRunner, write_graph: GraphWriter, diamond_graph: DepGraphImpl
    ) -> None:
        result = cli_runner.invoke(cli, ["info", str(write_graph(diamond_graph))])
        assert result.exit_code == 0
        assert "root: A@1.0.0" in result.output
        assert "has_cycles: False" in result.output

    def test_info_json(
        self, cli_runner: CliRunner, write_graph: GraphWriter, cyclic_graph: DepGraphImpl
    ) -> None:
        result = cli_runner.invoke(cli, ["--json", "info", str(write_graph(cyclic_graph))])
        assert result.exit_code == 0
        parsed = json.loads(result.output)
        assert parsed["ok"] is True
        assert parsed["data"]["has_cycles"] is True

    def test_pkgs_quiet(
        self, cli_runner: CliRunner, write_graph: GraphWriter, diamond_graph: DepGraphImpl
    ) -> None:
        result = cli_runner.invoke(cli, ["-q", "pkgs", "--deps-only", str(write_graph(diamond_graph))])
        assert result.exit_code == 0
        assert result.output.splitlines() == ["B@1.0.0", "C@1.0.0", "D@1.0.0"]

    def test_missing_file_exits_1(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        result = cli_runner.invoke(cli, ["info", str(tmp_path / "nope.json")])
        assert result.exit_code == 1
        assert "FILE_NOT_FOUND" in result.output


class TestPaths:
    def test_paths_quiet(
        self, cli_runner: CliRunner, write_graph: GraphWriter, diamond_graph: DepGraphImpl
    ) -> None:
        result = cli_runner.invoke(cli, ["-q", "paths", str(write_graph(diamond_graph)), "D@1.0.0"])
        assert result.exit_code == 0
        assert sorted(result.output.splitlines()) == [
            "D@1.0.0 > B@1.0.0 > A@1.0.0",
            "D@1.0.0 > C@1.0.0 > A@1.0.0",
        ]

    def test_paths_limited_by_config(
        self,
        cli_runner: CliRunner,
        write_graph: GraphWriter,
        diamond_graph: DepGraphImpl,
        tmp_path: Path,
    ) -> None:
        (tmp_path / CONFIG_FILENAME).write_text("[analysis]\nmax_paths = 1\n")
        result = cli_runner.invoke(cli, ["--json", "paths", str(write_graph(diamond_graph)), "D@1.0.0"])
        assert result.exit_code == 0
        parsed = json.loads(result.output)
        assert len(parsed["data"]["paths"]) == 1
        assert parsed["warnings"] == ["Showing 1 of 2 paths"]

    def test_count(
        self, cli_runner: CliRunner, write_graph: GraphWriter, diamond_graph: DepGraphImpl
    ) -> None:
        result = cli_runner.invoke(cli, ["-q", "count", str(write_graph(diamond_graph)), "D@1.0.0"])
        assert result.exit_code == 0
        assert result.output.strip() == "2"

    def test_count_cyclic_exits_1(
        self, cli_runner: CliRunner, write_graph: GraphWriter, cyclic_graph: DepGraphImpl
    ) -> None:
        result = cli_runner.invoke(cli, ["count", str(write_graph(cyclic_graph)), "B@1.0.0"])
        assert result.exit_code == 1
        assert "CYCLIC_GRAPH" in result.output

    def test_unknown_pkg_exits_1(
        self, cli_runner: CliRunner, write_graph: GraphWriter, diamond_graph: DepGraphImpl
    ) -> None:
        result = cli_runner.invoke(cli, ["paths", str(write_graph(diamond_graph)), "Z@1"])
        assert result.exit_code == 1
        assert "UNKNOWN_PACKAGE" in result.output

    def test_leading_to(
        self, cli_runner: CliRunner, write_graph: GraphWriter, version_split_graph: DepGraphImpl
    ) -> None:
        path = str(write_graph(version_split_graph))
        result = cli_runner.invoke(cli, ["-q", "leading-to", path, "C@1.0.0"])
        assert result.exit_code == 0
        assert result.output.splitlines() == ["B@1.0.0"]


class TestCompare:
    def test_equal(
        self, cli_runner: CliRunner, write_graph: GraphWriter, diamond_graph: DepGraphImpl
    ) -> None:
        a = write_graph(diamond_graph, "a.json")
        b = write_graph(diamond_graph, "b.json")
        result = cli_runner.invoke(cli, ["compare", "--exit-code", str(a), str(b)])
        assert result.exit_code == 0
        assert "EQUAL" in result.output

    def test_different_exit_code(
        self, cli_runner: CliRunner, write_graph: GraphWriter, make_graph: Callable[..., DepGraphImpl]
    ) -> None:
        a = write_graph(make_graph("A@1", {"A@1": ["B@1"]}), "a.json")
        b = write_graph(make_graph("A@2", {"A@2": ["B@1"]}), "b.json")

        result = cli_runner.invoke(cli, ["-q", "compare", str(a), str(b)])
        assert result.exit_code == 0
        assert result.output.strip() == "different"

        result = cli_runner.invoke(cli, ["-q", "compare", "--exit-code", str(a), str(b)])
        assert result.exit_code == 2

        result = cli_runner.invoke(cli, ["-q", "compare", "--ignore-root", "--exit-code", str(a), str(b)])
        assert result.exit_code == 0
        assert result.output.strip() == "equal"


class TestPrune:
    def test_prune_to_file(
        self,
        cli_runner: CliRunner,
        write_graph: GraphWriter,
        cyclic_graph: DepGraphImpl,
        tmp_path: Path,
    ) -> None:
        output = tmp_path / "pruned.json"
        result = cli_runner.invoke(cli, ["prune", str(write_graph(cyclic_graph)), "-o", str(output)])
        assert result.exit_code == 0
        assert create_from_json(output.read_text(encoding="utf-8")).has_cycles() is False

    def test_prune_json(
        self, cli_runner: CliRunner, write_graph: GraphWriter, diamond_graph: DepGraphImpl
    ) -> None:
        result = cli_runner.invoke(cli, ["--json", "prune", "--only-if-cycles", str(write_graph(diamond_graph))])
        assert result.exit_code == 0
        parsed = json.loads(result.output)
        assert parsed["data"]["pruned"] is False
        assert create_from_json(parsed["data"]["graph"]).equals(diamond_graph)
