"""Cross-checking file annotations against the coverage map.

Every file in either map that lies under a tracked root is checked:

- a MAYBE TESTED file is never a mismatch;
- a NOT TESTED file must not have any hit line;
- a per-line file must appear in the coverage report, and then each line's
  annotation must agree with the line's hit state.

A line with no coverage entry is non-executable; only explicit annotations
on such lines are reported. FLAKY TESTED lines are checked as the flaky
policy says.
"""

from __future__ import annotations

from collections.abc import Collection, Iterable, Mapping
from pathlib import Path

from covannot.annotations.models import (
    Coverage,
    FileAnnotations,
    FileVerdict,
    FlakyPolicy,
    LineAnnotation,
)
from covannot.core.logging import get_logger
from covannot.coverage.builder import CoverageMap
from covannot.diagnostics import CheckResult, Diagnostic, DiagnosticKind
from covannot.discovery import is_tracked

log = get_logger("reconcile")

_EXPLICIT_CHECKED = frozenset({Coverage.TESTED, Coverage.NOT_TESTED, Coverage.MAYBE_TESTED})


def check_line(
    path: Path,
    line_number: int,
    annotation: LineAnnotation,
    hit: bool | None,
    policy: FlakyPolicy,
) -> Diagnostic | None:
    """Compare one line annotation with its hit state (None: no coverage entry)."""
    if hit is None:
        if annotation.explicit and annotation.coverage in _EXPLICIT_CHECKED:
            return Diagnostic(
                path,
                line_number,
                DiagnosticKind.EXPLICIT_NON_EXECUTABLE,
                f"explicit {annotation.coverage.label} coverage annotation "
                "for a non-executable line",
            )
        return None

    effective = policy.effective(annotation.coverage)
    if effective is Coverage.TESTED and not hit:
        kind = DiagnosticKind.WRONG_TESTED
    elif effective is Coverage.NOT_TESTED and hit:
        kind = DiagnosticKind.WRONG_NOT_TESTED
    else:
        return None

    # Flaky lines report exactly like the coverage the policy maps them to.
    return Diagnostic(path, line_number, kind, f"wrong {effective.label} coverage annotation")


def check_file(
    path: Path,
    annotations: FileAnnotations,
    line_hits: Mapping[int, bool] | None,
    policy: FlakyPolicy,
) -> list[Diagnostic]:
    """Check one file. ``line_hits`` is None when the file isn't in the coverage map."""
    if annotations.verdict is FileVerdict.MAYBE_TESTED:
        return []

    if annotations.verdict is FileVerdict.NOT_TESTED:
        if line_hits is not None and any(line_hits.values()):
            return [
                Diagnostic(
                    path,
                    None,
                    DiagnosticKind.WRONG_FILE_NOT_TESTED,
                    "wrong FILE NOT TESTED coverage annotation",
                )
            ]
        return []

    if line_hits is None:
        return [
            Diagnostic(
                path,
                None,
                DiagnosticKind.MISSING_FILE_NOT_TESTED,
                "missing FILE NOT TESTED coverage annotation",
            )
        ]

    diagnostics: list[Diagnostic] = []
    for line_number, annotation in enumerate(annotations.lines, start=1):
        diagnostic = check_line(path, line_number, annotation, line_hits.get(line_number), policy)
        if diagnostic is not None:
            diagnostics.append(diagnostic)
    return diagnostics


def check_annotations(
    coverage: CoverageMap,
    file_annotations: Mapping[Path, FileAnnotations],
    *,
    tracked_roots: Collection[Path],
    policy: FlakyPolicy = FlakyPolicy.MAYBE_TESTED,
    scan_diagnostics: Iterable[Diagnostic] = (),
) -> CheckResult:
    """Cross-check every tracked file and collect all diagnostics.

    Args:
        coverage: Merged coverage map.
        file_annotations: Scan results keyed by canonical path.
        tracked_roots: Canonical directories whose files are checked.
        policy: Flaky policy for FLAKY TESTED lines.
        scan_diagnostics: Diagnostics already produced while scanning; they
            come first in the result and count toward its verdict.
    """
    diagnostics = list(scan_diagnostics)

    for path in sorted(coverage.keys() | file_annotations.keys()):
        if not is_tracked(path, tracked_roots):
            continue
        annotations = file_annotations.get(path)
        if annotations is None:
            log.warning("coverage_without_source", path=str(path))
            continue
        diagnostics.extend(check_file(path, annotations, coverage.get(path), policy))

    result = CheckResult(diagnostics=tuple(diagnostics))
    log.info(
        "annotations_checked",
        files=len(file_annotations),
        covered_files=len(coverage),
        failures=len(result.failures),
        warnings=len(result.warnings),
    )
    return result
