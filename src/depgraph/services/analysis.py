"""DepGraphService — file-level dependency graph analysis.

Each operation loads one or two dep-graph documents, runs an engine query
and packages the outcome into a :class:`ServiceResult`. Library errors are
reported through their ``code``; nothing raises past this layer.
"""

from __future__ import annotations

import functools
import json
import logging
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING, Any, ParamSpec

from depgraph.config.settings import DepGraphSettings
from depgraph.core.prune import prune_graph
from depgraph.domain.errors import DepGraphError
from depgraph.domain.ids import get_pkg_id, parse_pkg_spec
from depgraph.infrastructure.files import dump_dep_graph, load_dep_graph
from depgraph.services.result import ServiceResult

if TYPE_CHECKING:
    from depgraph.core.dep_graph import DepGraphImpl

logger = logging.getLogger(__name__)

P = ParamSpec("P")


def _reports_errors(
    op: str,
) -> Callable[[Callable[P, ServiceResult]], Callable[P, ServiceResult]]:
    """Turn file and library errors raised by an operation into failed results."""

    def decorator(func: Callable[P, ServiceResult]) -> Callable[P, ServiceResult]:
        @functools.wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> ServiceResult:
            try:
                return func(*args, **kwargs)
            except FileNotFoundError as exc:
                return ServiceResult.failure(
                    op, "FILE_NOT_FOUND", f"File not found: {exc.filename}", path=str(exc.filename)
                )
            except OSError as exc:
                return ServiceResult.failure(
                    op,
                    "FILE_ERROR",
                    f"Cannot access {exc.filename}: {exc.strerror}",
                    path=str(exc.filename),
                )
            except json.JSONDecodeError as exc:
                return ServiceResult.failure(op, "INVALID_JSON", f"Invalid JSON: {exc}")
            except UnicodeDecodeError as exc:
                return ServiceResult.failure(op, "INVALID_JSON", f"Not UTF-8 text: {exc}")
            except DepGraphError as exc:
                logger.debug("%s failed: %s", op, exc)
                return ServiceResult.failure(op, exc.code, str(exc))

        return wrapper

    return decorator


def _pkg_dict(pkg: Any) -> dict[str, Any]:
    return {"id": get_pkg_id(pkg), **pkg.to_dict()}


def _node_count(dep_graph: DepGraphImpl) -> int:
    # Every node occurs under exactly one registered package.
    return sum(len(dep_graph.get_pkg_node_ids(pkg)) for pkg in dep_graph.get_pkgs())


class DepGraphService:
    """Runs graph queries against dep-graph documents on disk."""

    def __init__(self, settings: DepGraphSettings | None = None) -> None:
        self._settings = settings or DepGraphSettings()

    # ------------------------------------------------------------------
    # info / pkgs
    # ------------------------------------------------------------------

    @_reports_errors("info")
    def info(self, path: Path) -> ServiceResult:
        """Summarize a graph: root, package manager, sizes and cyclicity."""
        dep_graph = load_dep_graph(path)
        pkgs = dep_graph.get_pkgs()
        return ServiceResult(
            ok=True,
            op="info",
            data={
                "root": _pkg_dict(dep_graph.root_pkg),
                "root_node_id": dep_graph.root_node_id,
                "pkg_manager": dep_graph.pkg_manager.model_dump(exclude_none=True),
                "pkg_count": len(pkgs),
                "dep_pkg_count": len(dep_graph.get_dep_pkgs()),
                "node_count": _node_count(dep_graph),
                "has_cycles": dep_graph.has_cycles(),
            },
        )

    @_reports_errors("pkgs")
    def pkgs(self, path: Path, *, deps_only: bool = False) -> ServiceResult:
        """List packages with their occurrence counts."""
        dep_graph = load_dep_graph(path)
        pkgs = dep_graph.get_dep_pkgs() if deps_only else dep_graph.get_pkgs()
        items = [
            {**_pkg_dict(pkg), "occurrences": len(dep_graph.get_pkg_node_ids(pkg))}
            for pkg in pkgs
        ]
        return ServiceResult(ok=True, op="pkgs", data={"count": len(items), "items": items})

    # ------------------------------------------------------------------
    # paths / count / leading_to
    # ------------------------------------------------------------------

    @_reports_errors("paths")
    def paths(self, path: Path, pkg_spec: str) -> ServiceResult:
        """Enumerate paths from a package up to the root, shortest first.

        Enumeration is refused above ``analysis.refuse_paths_above`` paths,
        and at most ``analysis.max_paths`` paths are returned.
        """
        analysis = self._settings.analysis
        dep_graph = load_dep_graph(path)
        pkg = parse_pkg_spec(pkg_spec)

        count = dep_graph.count_paths_to_root(pkg)
        if count > analysis.refuse_paths_above:
            return ServiceResult.failure(
                "paths",
                "TOO_MANY_PATHS",
                f"{get_pkg_id(pkg)} has {count} paths to root; "
                f"refusing to enumerate more than {analysis.refuse_paths_above}",
                count=count,
            )

        warnings: list[str] = []
        paths = dep_graph.pkg_paths_to_root(pkg)
        if len(paths) > analysis.max_paths:
            warnings.append(f"Showing {analysis.max_paths} of {len(paths)} paths")
            paths = paths[: analysis.max_paths]

        return ServiceResult(
            ok=True,
            op="paths",
            data={
                "pkg": get_pkg_id(pkg),
                "count": count,
                "paths": [[get_pkg_id(step) for step in p] for p in paths],
            },
            warnings=warnings,
        )

    @_reports_errors("count")
    def count(self, path: Path, pkg_spec: str) -> ServiceResult:
        """Count paths from a package up to the root without enumerating them."""
        dep_graph = load_dep_graph(path)
        pkg = parse_pkg_spec(pkg_spec)
        return ServiceResult(
            ok=True,
            op="count",
            data={
                "pkg": get_pkg_id(pkg),
                "occurrences": len(dep_graph.get_pkg_node_ids(pkg)),
                "count": dep_graph.count_paths_to_root(pkg),
            },
        )

    @_reports_errors("leading_to")
    def leading_to(self, path: Path, pkg_spec: str) -> ServiceResult:
        """Find which direct dependencies of the root pull a package in."""
        dep_graph = load_dep_graph(path)
        pkg = parse_pkg_spec(pkg_spec)
        items = [_pkg_dict(dep) for dep in dep_graph.direct_deps_leading_to(pkg)]
        return ServiceResult(
            ok=True,
            op="leading_to",
            data={"pkg": get_pkg_id(pkg), "count": len(items), "items": items},
        )

    # ------------------------------------------------------------------
    # compare / prune
    # ------------------------------------------------------------------

    @_reports_errors("compare")
    def compare(
        self, path_a: Path, path_b: Path, *, compare_root: bool | None = None
    ) -> ServiceResult:
        """Check two graph documents for structural equality."""
        if compare_root is None:
            compare_root = self._settings.analysis.compare_root
        graph_a = load_dep_graph(path_a)
        graph_b = load_dep_graph(path_b)
        equal = graph_a.equals(graph_b, compare_root=compare_root)
        return ServiceResult(
            ok=True,
            op="compare",
            data={
                "a": str(path_a),
                "b": str(path_b),
                "equal": equal,
                "compare_root": compare_root,
            },
        )

    @_reports_errors("prune")
    def prune(
        self,
        path: Path,
        *,
        output: Path | None = None,
        only_if_cycles: bool | None = None,
    ) -> ServiceResult:
        """Prune repeated subtrees and write (or return) the resulting document."""
        if only_if_cycles is None:
            only_if_cycles = self._settings.prune.only_if_cycles
        dep_graph = load_dep_graph(path)
        pruned = prune_graph(dep_graph, only_if_cycles=only_if_cycles)

        data: dict[str, Any] = {
            "pruned": pruned is not dep_graph,
            "nodes_before": _node_count(dep_graph),
            "nodes_after": _node_count(pruned),
        }
        if output is not None:
            dump_dep_graph(pruned, output)
            data["output"] = str(output)
        else:
            data["graph"] = pruned.to_json()
        return ServiceResult(ok=True, op="prune", data=data)
