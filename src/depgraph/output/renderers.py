"""Operation-specific Rich renderers for ServiceResult.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from rich.markup import escape
from rich.table import Table
from rich.text import Text

from depgraph.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from depgraph.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a string via Rich."""
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Minimal output for ``--quiet``: one line per path or package, else a verdict."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    data = result.data
    if "paths" in data:
        return "\n".join(" > ".join(path) for path in data["paths"])
    if "items" in data:
        return "\n".join(str(item.get("id", "")) for item in data["items"])
    if "equal" in data:
        return "equal" if data["equal"] else "different"
    if "count" in data:
        return str(data["count"])
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    console.print(Text("OK", style="dg.ok"), Text(f"  {result.op}", style="dg.op"), sep="")


def _field(console: Console, key: str, value: Any) -> None:
    k = Text(f"  {key}: ", style="dg.key")
    style = "dg.pkg" if key in ("pkg", "root", "a", "b") else ""
    console.print(k, Text(str(value), style=style), sep="")


def _render_warnings(console: Console, result: ServiceResult) -> None:
    for warning in result.warnings:
        console.print(Text("  warning: ", style="dg.warning"), Text(warning), sep="")


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    code = f" [{err.code}]" if err else ""
    console.print(
        Text("ERROR", style="dg.error"),
        Text(f"  {result.op}{code}", style="dg.op"),
        Text(" — "),
        Text(msg),
        sep="",
    )

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(Text(f"    {k}: {v}"))


# ── Graph renderers ───────────────────────────────────────────────────


def _render_info(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    data = result.data
    _field(console, "root", data["root"]["id"])
    _field(console, "root_node_id", data["root_node_id"])
    manager = data["pkg_manager"]
    _field(console, "pkg_manager", f"{manager.get('name')} {manager.get('version', '')}".strip())
    for key in ("pkg_count", "dep_pkg_count", "node_count", "has_cycles"):
        _field(console, key, data[key])


def _render_pkg_table(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    items = result.data.get("items", [])
    _status_line(console, result)
    if not items:
        console.print("  (none)")
        return

    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Package", style="dg.pkg", no_wrap=True)
    table.add_column("Name")
    table.add_column("Version")
    has_occurrences = "occurrences" in items[0]
    if has_occurrences:
        table.add_column("Occurrences", style="dg.count", justify="right")
    for item in items:
        row = [str(item.get("id", "")), str(item.get("name", "")), str(item.get("version") or "")]
        if has_occurrences:
            row.append(str(item["occurrences"]))
        table.add_row(*row)
    console.print(table)


def _render_paths(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render each path as a chain from the package up to the root."""
    data = result.data
    paths = data.get("paths", [])
    _status_line(console, result)
    _field(console, "pkg", data["pkg"])
    _field(console, "count", data["count"])
    for i, path in enumerate(paths, start=1):
        chain = " → ".join(f"[dg.pkg]{escape(step)}[/dg.pkg]" for step in path[:-1])
        root = f"[dg.root]{escape(path[-1])}[/dg.root]"
        console.print(f"  {i:>3}. {chain + ' → ' if chain else ''}{root}")
    _render_warnings(console, result)


def _render_count(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    data = result.data
    _status_line(console, result)
    _field(console, "pkg", data["pkg"])
    _field(console, "occurrences", data["occurrences"])
    console.print(Text("  paths to root: ", style="dg.key"), Text(str(data["count"]), style="dg.count"), sep="")


def _render_compare(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    data = result.data
    verdict = Text("EQUAL", style="dg.ok") if data["equal"] else Text("DIFFERENT", style="dg.error")
    _status_line(console, result)
    _field(console, "a", data["a"])
    _field(console, "b", data["b"])
    if verbose:
        _field(console, "compare_root", data["compare_root"])
    console.print(Text("  result: ", style="dg.key"), verdict, sep="")


def _render_prune(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    data = result.data
    _status_line(console, result)
    if not data["pruned"]:
        console.print("  graph is acyclic; nothing pruned")
    _field(console, "nodes", f"{data['nodes_before']} → {data['nodes_after']}")
    if "output" in data:
        _field(console, "output", data["output"])
    else:
        console.print(json.dumps(data["graph"], indent=2), markup=False, soft_wrap=True)


# ── Generic fallback ──────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, dict | list):
            _field(console, key, json.dumps(value, separators=(",", ":")))
        else:
            _field(console, key, value)
    _render_warnings(console, result)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    "info": _render_info,
    "pkgs": _render_pkg_table,
    "leading_to": _render_pkg_table,
    "paths": _render_paths,
    "count": _render_count,
    "compare": _render_compare,
    "prune": _render_prune,
}
