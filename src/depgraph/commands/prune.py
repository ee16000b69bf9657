"""Command: prune."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

if TYPE_CHECKING:
    from depgraph.commands._context import AppContext


@click.command()
@click.argument("graph_file", type=click.Path(path_type=Path, dir_okay=False))
@click.option(
    "-o",
    "--output",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Write the pruned document here instead of printing it.",
)
@click.option(
    "--only-if-cycles/--always",
    "only_if_cycles",
    default=None,
    help="Prune only cyclic graphs (default from [prune] only_if_cycles).",
)
@click.pass_obj
def prune(app: AppContext, graph_file: Path, output: Path | None, only_if_cycles: bool | None) -> None:
    """Collapse repeated subtrees so every node is expanded once."""
    app.emit(app.service.prune(graph_file, output=output, only_if_cycles=only_if_cycles))
