"""Per-file annotation scanning and whole-file aggregation.

For each physical line, in order:

1. extract the lexical mark,
2. feed it to the region state machine,
3. for unmarked lines containing the unreachable token, resolve to
   ``NotTested(explicit=False)``,
4. force structural (untrusted) lines to ``MaybeTested(explicit=False)``.

Steps 3 and 4 override the resolved line only; the region carried to the
next line is the one computed in step 2.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from covannot.annotations.marks import extract_line_mark
from covannot.annotations.models import (
    DEFAULT_ANNOTATION,
    Coverage,
    FileAnnotations,
    FileVerdict,
    FlakyPolicy,
    LineAnnotation,
    LineMark,
    MarkScope,
)
from covannot.annotations.regions import transition
from covannot.annotations.untrusted import (
    UNTRUSTED_ANNOTATION,
    block_comment_open_after,
    is_untrusted_line,
)
from covannot.core.errors import ScanError
from covannot.core.logging import get_logger
from covannot.diagnostics import Diagnostic, DiagnosticKind

log = get_logger("annotations.scanner")

DEFAULT_UNREACHABLE_TOKEN = "unreachable!("

_UNREACHABLE_ANNOTATION = LineAnnotation(Coverage.NOT_TESTED, explicit=False)


@dataclass(slots=True)
class ScanResult:
    """Annotations of one file and the diagnostics found while scanning it."""

    annotations: FileAnnotations
    diagnostics: list[Diagnostic] = field(default_factory=list)


def _file_verdict(file_marks: list[Coverage], policy: FlakyPolicy) -> tuple[FileVerdict, str]:
    """Collapse the FILE marks of a file into a verdict and the label it came from."""
    has_flaky = Coverage.FLAKY_TESTED in file_marks
    if Coverage.MAYBE_TESTED in file_marks:
        return FileVerdict.MAYBE_TESTED, Coverage.MAYBE_TESTED.label
    if has_flaky and policy is FlakyPolicy.MAYBE_TESTED:
        return FileVerdict.MAYBE_TESTED, Coverage.FLAKY_TESTED.label
    if Coverage.NOT_TESTED in file_marks:
        return FileVerdict.NOT_TESTED, Coverage.NOT_TESTED.label
    if has_flaky and policy is FlakyPolicy.NOT_TESTED:
        return FileVerdict.NOT_TESTED, Coverage.FLAKY_TESTED.label
    return FileVerdict.LINES, ""


def collect_file_annotations(
    path: Path,
    lines: Iterable[str],
    *,
    policy: FlakyPolicy = FlakyPolicy.MAYBE_TESTED,
    unreachable_token: str = DEFAULT_UNREACHABLE_TOKEN,
) -> ScanResult:
    """Resolve every line of a file and aggregate the file verdict.

    Args:
        path: Canonical path of the file (used for diagnostics and the result).
        lines: Physical lines, in order.
        policy: Flaky policy; decides what a FILE FLAKY TESTED mark collapses to.
        unreachable_token: Token marking code that is never expected to run.
    """
    diagnostics: list[Diagnostic] = []
    resolved: list[LineAnnotation] = []
    file_marks: list[Coverage] = []
    region = DEFAULT_ANNOTATION
    in_block_comment = False

    for line_number, line in enumerate(lines, start=1):
        mark_result = extract_line_mark(line, path, line_number)
        if mark_result.diagnostic is not None:
            diagnostics.append(mark_result.diagnostic)
        mark = mark_result.mark

        step = transition(region, mark, file_mark_seen=bool(file_marks))
        if step.issue is not None:
            diagnostics.append(Diagnostic(path, line_number, step.issue, step.message))

        if mark.scope is MarkScope.FILE and mark.coverage is not None:
            file_marks.append(mark.coverage)

        annotation = step.line
        if mark is LineMark.NONE and unreachable_token and unreachable_token in line:
            annotation = _UNREACHABLE_ANNOTATION
        if is_untrusted_line(line, in_block_comment=in_block_comment):
            annotation = UNTRUSTED_ANNOTATION
        in_block_comment = block_comment_open_after(line, in_block_comment)

        resolved.append(annotation)
        region = step.region

    verdict, label = _file_verdict(file_marks, policy)
    if verdict is not FileVerdict.LINES:
        for line_number, annotation in enumerate(resolved, start=1):
            if annotation.explicit:
                diagnostics.append(
                    Diagnostic(
                        path,
                        line_number,
                        DiagnosticKind.EXPLICIT_IN_UNTESTED_FILE,
                        f"line coverage annotation in a FILE which is {label}",
                    )
                )

    annotations = FileAnnotations(
        path=path,
        verdict=verdict,
        lines=tuple(resolved),
        file_mark=file_marks[0] if file_marks else None,
    )
    return ScanResult(annotations=annotations, diagnostics=diagnostics)


def read_source_lines(path: Path) -> list[str]:
    """Read a UTF-8 source file as physical lines without line endings.

    Raises:
        ScanError: If the file can't be read or decoded.
    """
    try:
        with path.open(encoding="utf-8") as f:
            return [line.rstrip("\n") for line in f]
    except (OSError, UnicodeDecodeError) as e:
        raise ScanError.read_error(str(path), str(e)) from e


def scan_file(
    path: Path,
    *,
    policy: FlakyPolicy = FlakyPolicy.MAYBE_TESTED,
    unreachable_token: str = DEFAULT_UNREACHABLE_TOKEN,
) -> ScanResult:
    """Read and scan one source file."""
    result = collect_file_annotations(
        path,
        read_source_lines(path),
        policy=policy,
        unreachable_token=unreachable_token,
    )
    log.debug(
        "file_scanned",
        path=str(path),
        lines=len(result.annotations.lines),
        verdict=result.annotations.verdict.value,
        diagnostics=len(result.diagnostics),
    )
    return result


def scan_files(
    paths: Iterable[Path],
    *,
    policy: FlakyPolicy = FlakyPolicy.MAYBE_TESTED,
    unreachable_token: str = DEFAULT_UNREACHABLE_TOKEN,
) -> tuple[dict[Path, FileAnnotations], list[Diagnostic]]:
    """Scan many files, keyed by path, diagnostics in scan order."""
    annotations: dict[Path, FileAnnotations] = {}
    diagnostics: list[Diagnostic] = []
    for path in paths:
        result = scan_file(path, policy=policy, unreachable_token=unreachable_token)
        annotations[path] = result.annotations
        diagnostics.extend(result.diagnostics)
    return annotations, diagnostics
