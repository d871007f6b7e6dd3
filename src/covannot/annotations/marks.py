"""Lexical extraction of annotation marks from a single line.

Marks are found by substring containment of a fixed vocabulary inside a
``//`` or ``/*`` comment, anywhere on the line. The vocabulary is checked in
a fixed priority order and the first hit wins, so results do not depend on
where on the line the token sits.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from covannot.annotations.models import LineMark
from covannot.diagnostics import Diagnostic, DiagnosticKind

COMMENT_OPENERS: tuple[str, ...] = ("//", "/*")

# Priority order: line marks, then BEGIN, END and FILE families.
MARK_VOCABULARY: tuple[tuple[str, LineMark], ...] = (
    ("TESTED", LineMark.LINE_TESTED),
    ("MAYBE TESTED", LineMark.LINE_MAYBE_TESTED),
    ("NOT TESTED", LineMark.LINE_NOT_TESTED),
    ("FLAKY TESTED", LineMark.LINE_FLAKY_TESTED),
    ("BEGIN MAYBE TESTED", LineMark.BEGIN_MAYBE_TESTED),
    ("BEGIN NOT TESTED", LineMark.BEGIN_NOT_TESTED),
    ("BEGIN FLAKY TESTED", LineMark.BEGIN_FLAKY_TESTED),
    ("END MAYBE TESTED", LineMark.END_MAYBE_TESTED),
    ("END NOT TESTED", LineMark.END_NOT_TESTED),
    ("END FLAKY TESTED", LineMark.END_FLAKY_TESTED),
    ("FILE MAYBE TESTED", LineMark.FILE_MAYBE_TESTED),
    ("FILE NOT TESTED", LineMark.FILE_NOT_TESTED),
    ("FILE FLAKY TESTED", LineMark.FILE_FLAKY_TESTED),
)

# Old spelling of FLAKY TESTED; recognized only to point users at the new one.
DEPRECATED_VOCABULARY: tuple[tuple[str, str], ...] = (
    ("APPEARS NOT TESTED", "FLAKY TESTED"),
    ("BEGIN APPEARS NOT TESTED", "BEGIN FLAKY TESTED"),
    ("END APPEARS NOT TESTED", "END FLAKY TESTED"),
    ("FILE APPEARS NOT TESTED", "FILE FLAKY TESTED"),
)


def _patterns(text: str) -> tuple[str, ...]:
    return tuple(f"{opener} {text}" for opener in COMMENT_OPENERS)


_MARK_PATTERNS: tuple[tuple[tuple[str, ...], LineMark], ...] = tuple(
    (_patterns(text), mark) for text, mark in MARK_VOCABULARY
)

_DEPRECATED_PATTERNS: tuple[tuple[tuple[str, ...], str, str], ...] = tuple(
    (_patterns(old), old, new) for old, new in DEPRECATED_VOCABULARY
)


@dataclass(frozen=True, slots=True)
class MarkResult:
    """Mark of one line, plus a diagnostic when the line used a deprecated token."""

    mark: LineMark
    diagnostic: Diagnostic | None = None


def _contains_any(line: str, patterns: tuple[str, ...]) -> bool:
    return any(pattern in line for pattern in patterns)


def extract_line_mark(line: str, path: Path, line_number: int) -> MarkResult:
    """Classify one physical line.

    Args:
        line: Raw line text (trailing newline optional).
        path: File the line belongs to, for diagnostics only.
        line_number: 1-based line number, for diagnostics only.
    """
    for patterns, mark in _MARK_PATTERNS:
        if _contains_any(line, patterns):
            return MarkResult(mark)

    for patterns, old, new in _DEPRECATED_PATTERNS:
        if _contains_any(line, patterns):
            return MarkResult(
                LineMark.NONE,
                Diagnostic(
                    path=path,
                    line=line_number,
                    kind=DiagnosticKind.DEPRECATED_ANNOTATION,
                    message=f"deprecated {old} coverage annotation, use {new} instead",
                ),
            )

    return MarkResult(LineMark.NONE)
