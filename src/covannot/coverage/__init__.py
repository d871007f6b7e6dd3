"""Cobertura ingestion into a per-file, per-line hit map.

Usage:
    from covannot.coverage import build_coverage_map

    coverage = build_coverage_map([Path("target/cov/cobertura.xml")], Path("."))
    coverage[Path("/abs/src/lib.rs")][12]  # True if line 12 was hit
"""

from covannot.coverage.builder import (
    CoverageMap,
    CoverageMapBuilder,
    build_coverage_map,
    join_hit,
    resolve_source_path,
)
from covannot.coverage.events import (
    ClassEvent,
    CoverageEvent,
    LineEvent,
    SourceEvent,
    iter_cobertura_events,
)

__all__ = [
    # Events
    "ClassEvent",
    "CoverageEvent",
    "LineEvent",
    "SourceEvent",
    "iter_cobertura_events",
    # Builder
    "CoverageMap",
    "CoverageMapBuilder",
    "build_coverage_map",
    "join_hit",
    "resolve_source_path",
]
