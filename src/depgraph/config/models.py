"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, depgraph.toml only contains overrides.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class AnalysisConfig(BaseModel):
    """[analysis] section."""

    model_config = {"frozen": True}

    compare_root: bool = True
    # Paths returned by the paths operation; the rest are counted only.
    max_paths: int = Field(default=1000, ge=1)
    # Above this many paths, enumeration is refused and only the count reported.
    refuse_paths_above: int = Field(default=100_000, ge=1)


class PruneConfig(BaseModel):
    """[prune] section."""

    model_config = {"frozen": True}

    only_if_cycles: bool = False

