"""Package ids, package specs and schema-version rules.

Package id: ``name@version`` with an empty version segment when the
version is absent. It is the join key between graph nodes and the
package registry.

INVARIANT: two packages share a package id iff name and version are equal.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from depgraph.domain.types import Pkg

SCHEMA_VERSION = "1.2.0"
SUPPORTED_SCHEMA_MAJOR = 1

_SCHEMA_VERSION_RE = re.compile(r"^(\d+)\.(\d+)\.(\d+)(?:[-+][0-9A-Za-z.+-]*)?$")


def get_pkg_id(pkg: Pkg | Mapping[str, Any]) -> str:
    """Return the canonical ``name@version`` key for *pkg*."""
    if isinstance(pkg, Mapping):
        name, version = pkg.get("name"), pkg.get("version")
    else:
        name, version = pkg.name, pkg.version
    return f"{name}@{version or ''}"


def parse_pkg_spec(spec: str) -> Pkg:
    """Parse a ``name@version`` string into a :class:`Pkg`.

    The separator is the last ``@`` that is not the first character, so
    scoped names like ``@types/node@20.1.0`` keep their leading ``@``.
    A spec without a version (``lodash`` or ``lodash@``) yields ``version=None``.
    """
    idx = spec.rfind("@")
    if idx <= 0:
        return Pkg(name=spec)
    name, version = spec[:idx], spec[idx + 1 :]
    return Pkg(name=name, version=version or None)


def parse_schema_version(version: str) -> tuple[int, int, int]:
    """Split a ``major.minor.patch`` schema version.

    Raises:
        ValueError: If *version* is not a semantic version string.
    """
    match = _SCHEMA_VERSION_RE.match(version)
    if match is None:
        msg = f"invalid schema version: {version!r}"
        raise ValueError(msg)
    major, minor, patch = (int(part) for part in match.groups())
    return major, minor, patch


def is_schema_compatible(version: str) -> bool:
    """Whether a document with *version* can be read (same major only)."""
    try:
        major, _minor, _patch = parse_schema_version(version)
    except ValueError:
        return False
    return major == SUPPORTED_SCHEMA_MAJOR
