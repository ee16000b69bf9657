"""Commands: paths, count, leading-to.

PKG is given as ``name@version``; scoped names such as
``@types/node@20.1.0`` are supported.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

if TYPE_CHECKING:
    from depgraph.commands._context import AppContext

_FILE = click.Path(path_type=Path, dir_okay=False)


@click.command()
@click.argument("graph_file", type=_FILE)
@click.argument("pkg")
@click.pass_obj
def paths(app: AppContext, graph_file: Path, pkg: str) -> None:
    """List every path from PKG up to the root, shortest first."""
    app.emit(app.service.paths(graph_file, pkg))


@click.command()
@click.argument("graph_file", type=_FILE)
@click.argument("pkg")
@click.pass_obj
def count(app: AppContext, graph_file: Path, pkg: str) -> None:
    """Count the paths from PKG up to the root."""
    app.emit(app.service.count(graph_file, pkg))


@click.command(name="leading-to")
@click.argument("graph_file", type=_FILE)
@click.argument("pkg")
@click.pass_obj
def leading_to(app: AppContext, graph_file: Path, pkg: str) -> None:
    """Show which direct dependencies of the root pull PKG in."""
    app.emit(app.service.leading_to(graph_file, pkg))
