"""Subcommand modules for depgraph.

Provides register_commands(), importing command modules on registration
only, so library users never pay for Click.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all standalone commands on the root CLI group."""
    from depgraph.commands.compare import compare
    from depgraph.commands.inspect import info, pkgs
    from depgraph.commands.paths import count, leading_to, paths
    from depgraph.commands.prune import prune

    cli.add_command(info)
    cli.add_command(pkgs)
    cli.add_command(paths)
    cli.add_command(count)
    cli.add_command(leading_to)
    cli.add_command(compare)
    cli.add_command(prune)
