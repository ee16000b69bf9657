"""Reading and writing dep-graph documents on disk.

Documents are UTF-8 JSON. Loading goes through :func:`create_from_json`, so
every loaded graph satisfies the engine invariants.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING

from depgraph.core.create_from_json import create_from_json

if TYPE_CHECKING:
    from depgraph.core.dep_graph import DepGraphImpl

logger = logging.getLogger(__name__)


def load_dep_graph(path: Path) -> DepGraphImpl:
    """Load a dep-graph document from *path*.

    Raises:
        FileNotFoundError: If *path* does not exist.
        OSError: If *path* cannot be read.
        json.JSONDecodeError: If the file is not JSON.
        UnicodeDecodeError: If the file is not UTF-8 text.
        MalformedDocumentError / IncompatibleSchemaError: From the deserializer.
    """
    raw = path.read_text(encoding="utf-8")
    document = json.loads(raw)
    logger.debug("read dep graph document %s (%d bytes)", path, len(raw))
    return create_from_json(document)


def dump_dep_graph(dep_graph: DepGraphImpl, path: Path, *, indent: int | None = 2) -> None:
    """Write the canonical document of *dep_graph* to *path*."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(dep_graph.to_json(), indent=indent) + "\n", encoding="utf-8")
    logger.debug("wrote dep graph document %s", path)
