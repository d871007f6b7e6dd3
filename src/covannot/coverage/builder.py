"""Coverage map construction from Cobertura event streams.

The coverage map is keyed by canonical absolute path, then by 1-based line
number, and holds whether the line was hit. Several report fragments (from
separate test binaries, shards or crates) are folded into one map with a
join over the lattice absent < miss < hit: a hit is never downgraded by a
later fragment reporting zero hits for the same line.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from covannot.core.errors import CoverageError
from covannot.core.logging import get_logger
from covannot.coverage.events import (
    ClassEvent,
    CoverageEvent,
    LineEvent,
    SourceEvent,
    iter_cobertura_events,
)

log = get_logger("coverage.builder")

CoverageMap = dict[Path, dict[int, bool]]


def join_hit(existing: bool | None, observed: bool) -> bool:
    """Join a line's recorded state with a newly observed one.

    ``None`` means no entry yet. The result is the least upper bound, so the
    fold is independent of fragment order.
    """
    if existing is None:
        return observed
    return existing or observed


def resolve_source_path(filename: str, roots: Iterable[str], project_root: Path) -> Path | None:
    """Find the first root under which ``filename`` exists.

    Roots are tried in order. Relative roots (including ``""``) are taken
    relative to ``project_root``. Returns the canonical path, or None when
    the file exists under no root.
    """
    for root in roots:
        base = Path(root)
        if not base.is_absolute():
            base = project_root / base
        candidate = base / filename
        if candidate.exists():
            return candidate.resolve()
    return None


class CoverageMapBuilder:
    """Folds the events of one or more report fragments into a CoverageMap."""

    def __init__(self, project_root: Path) -> None:
        self.project_root = project_root.resolve()
        self._coverage: CoverageMap = {}
        self._roots: list[str] = [""]
        self._current: dict[int, bool] | None = None
        self._report: Path | None = None
        self.fragments = 0

    def begin_fragment(self, report: Path | None = None) -> None:
        """Start a new report: source roots and the current class are per report."""
        self._roots = [""]
        self._current = None
        self._report = report
        self.fragments += 1

    def feed(self, event: CoverageEvent) -> None:
        if isinstance(event, SourceEvent):
            self._roots.append(event.path)
        elif isinstance(event, ClassEvent):
            self._enter_class(event.filename)
        elif isinstance(event, LineEvent):
            self._record_line(event)

    def _enter_class(self, filename: str) -> None:
        path = resolve_source_path(filename, self._roots, self.project_root)
        if path is None:
            raise CoverageError.unresolved_path(filename, list(self._roots))
        self._current = self._coverage.setdefault(path, {})

    def _record_line(self, event: LineEvent) -> None:
        if event.number <= 0:
            return
        if self._current is None:
            log.debug(
                "line_outside_class",
                report=str(self._report) if self._report else None,
                line=event.number,
            )
            return
        self._current[event.number] = join_hit(
            self._current.get(event.number), event.hits != 0
        )

    def add_report(self, report: Path) -> None:
        """Read one Cobertura report and fold it in."""
        self.begin_fragment(report)
        for event in iter_cobertura_events(report):
            self.feed(event)
        log.debug("coverage_fragment_loaded", report=str(report), files=len(self._coverage))

    def build(self) -> CoverageMap:
        return {path: dict(lines) for path, lines in self._coverage.items()}


def build_coverage_map(reports: Iterable[Path], project_root: Path) -> CoverageMap:
    """Merge every report, in the given order, into one CoverageMap.

    Raises:
        CoverageError: If a report is unreadable or names a file that exists
            under none of its source roots.
    """
    builder = CoverageMapBuilder(project_root)
    for report in reports:
        builder.add_report(report)
    coverage = builder.build()
    log.info("coverage_map_built", fragments=builder.fragments, files=len(coverage))
    return coverage
