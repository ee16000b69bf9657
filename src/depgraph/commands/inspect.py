"""Commands: info, pkgs."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

if TYPE_CHECKING:
    from depgraph.commands._context import AppContext

_FILE = click.Path(path_type=Path, dir_okay=False)


@click.command()
@click.argument("graph_file", type=_FILE)
@click.pass_obj
def info(app: AppContext, graph_file: Path) -> None:
    """Summarize a dep-graph document (root, sizes, cycles)."""
    app.emit(app.service.info(graph_file))


@click.command()
@click.argument("graph_file", type=_FILE)
@click.option("--deps-only", is_flag=True, help="Exclude the root package.")
@click.pass_obj
def pkgs(app: AppContext, graph_file: Path, deps_only: bool) -> None:
    """List packages and how often each occurs in the graph."""
    app.emit(app.service.pkgs(graph_file, deps_only=deps_only))
