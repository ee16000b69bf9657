"""Command: compare."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

if TYPE_CHECKING:
    from depgraph.commands._context import AppContext

_FILE = click.Path(path_type=Path, dir_okay=False)


@click.command()
@click.argument("graph_a", type=_FILE)
@click.argument("graph_b", type=_FILE)
@click.option(
    "--ignore-root/--compare-root",
    "ignore_root",
    default=None,
    help="Ignore root package identity and info (default from [analysis] compare_root).",
)
@click.option("--exit-code", is_flag=True, help="Exit with status 2 when the graphs differ.")
@click.pass_obj
def compare(
    app: AppContext, graph_a: Path, graph_b: Path, ignore_root: bool | None, exit_code: bool
) -> None:
    """Check whether two dep-graph documents are structurally equal."""
    compare_root = None if ignore_root is None else not ignore_root
    result = app.service.compare(graph_a, graph_b, compare_root=compare_root)
    app.emit(result)
    if exit_code and result.ok and not result.data["equal"]:
        raise SystemExit(2)
