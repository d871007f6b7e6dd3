"""Region state machine.

The region is the annotation in force for lines without a mark of their
own. It starts as ``Tested(explicit=False)``, BEGIN/END marks open and close
it, and regions never nest. ``transition`` is the whole table; it is pure and
knows nothing about files or line numbers.

    mark          region                 line                   next region
    ------------  ---------------------  ---------------------  --------------
    NONE          R                      R (not explicit)       R
    LINE X        X (redundant)          X explicit             X
    LINE X        R != X                 X explicit             R
    BEGIN X       TESTED                 X                      X
    BEGIN X       R != TESTED (nested)   R                      R
    END X         X                      X                      TESTED
    END X         R != X (nested)        R                      R
    FILE X        R                      R                      R
"""

from __future__ import annotations

from dataclasses import dataclass

from covannot.annotations.models import (
    DEFAULT_ANNOTATION,
    Coverage,
    LineAnnotation,
    LineMark,
    MarkScope,
)
from covannot.diagnostics import DiagnosticKind


@dataclass(frozen=True, slots=True)
class Transition:
    """Result of feeding one mark to the state machine."""

    line: LineAnnotation
    region: LineAnnotation
    issue: DiagnosticKind | None = None
    message: str = ""


def _keep(
    region: LineAnnotation, issue: DiagnosticKind | None = None, message: str = ""
) -> Transition:
    return Transition(region.inherited(), region, issue, message)


def _line_mark(region: LineAnnotation, coverage: Coverage) -> Transition:
    line = LineAnnotation(coverage, explicit=True)
    if region.coverage is coverage:
        return Transition(
            line,
            LineAnnotation(coverage, explicit=False),
            DiagnosticKind.REDUNDANT_ANNOTATION,
            f"redundant {coverage.label} coverage annotation",
        )
    return Transition(line, region)


def _begin_mark(region: LineAnnotation, coverage: Coverage) -> Transition:
    if region.coverage is not Coverage.TESTED:
        return _keep(
            region,
            DiagnosticKind.NESTED_BEGIN,
            f"ignored nested BEGIN {coverage.label} coverage annotation",
        )
    opened = LineAnnotation(coverage, explicit=False)
    return Transition(opened, opened)


def _end_mark(region: LineAnnotation, coverage: Coverage) -> Transition:
    if region.coverage is not coverage:
        return _keep(
            region,
            DiagnosticKind.NESTED_END,
            f"ignored nested END {coverage.label} coverage annotation",
        )
    return Transition(LineAnnotation(coverage, explicit=False), DEFAULT_ANNOTATION)


def _file_mark(region: LineAnnotation, coverage: Coverage, file_mark_seen: bool) -> Transition:
    if file_mark_seen:
        return _keep(
            region,
            DiagnosticKind.REPEATED_FILE_ANNOTATION,
            f"repeated FILE {coverage.label} coverage annotation",
        )
    return _keep(region)


def transition(
    region: LineAnnotation,
    mark: LineMark,
    *,
    file_mark_seen: bool = False,
) -> Transition:
    """Resolve one line and compute the region for the next one.

    Args:
        region: Region state before this line.
        mark: Mark found on this line.
        file_mark_seen: Whether a FILE mark appeared on an earlier line.
    """
    coverage = mark.coverage
    if coverage is None:
        return _keep(region)
    if mark.scope is MarkScope.LINE:
        return _line_mark(region, coverage)
    if mark.scope is MarkScope.BEGIN:
        return _begin_mark(region, coverage)
    if mark.scope is MarkScope.END:
        return _end_mark(region, coverage)
    return _file_mark(region, coverage, file_mark_seen)
