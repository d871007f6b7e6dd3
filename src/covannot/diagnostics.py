"""Diagnostics reported while scanning annotations and checking them.

A diagnostic is user output: one line on stderr naming the file, the
1-based line when there is one, and what is wrong. Some kinds only warn
about sloppy annotation usage; the rest make the run fail.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class DiagnosticKind(Enum):
    """Classification of a reported inconsistency."""

    # Annotation usage (scan time)
    DEPRECATED_ANNOTATION = "deprecated_annotation"
    REDUNDANT_ANNOTATION = "redundant_annotation"
    NESTED_BEGIN = "nested_begin"
    NESTED_END = "nested_end"
    REPEATED_FILE_ANNOTATION = "repeated_file_annotation"
    EXPLICIT_IN_UNTESTED_FILE = "explicit_in_untested_file"

    # Coverage mismatch (check time)
    WRONG_TESTED = "wrong_tested"
    WRONG_NOT_TESTED = "wrong_not_tested"
    WRONG_FILE_NOT_TESTED = "wrong_file_not_tested"
    MISSING_FILE_NOT_TESTED = "missing_file_not_tested"
    EXPLICIT_NON_EXECUTABLE = "explicit_non_executable"

    @property
    def fails(self) -> bool:
        """Whether this kind makes the run fail."""
        return self not in _WARNING_KINDS


_WARNING_KINDS = frozenset(
    {
        DiagnosticKind.DEPRECATED_ANNOTATION,
        DiagnosticKind.REDUNDANT_ANNOTATION,
        DiagnosticKind.NESTED_BEGIN,
        DiagnosticKind.NESTED_END,
        DiagnosticKind.REPEATED_FILE_ANNOTATION,
    }
)


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """A single reported inconsistency."""

    path: Path
    line: int | None
    kind: DiagnosticKind
    message: str

    @property
    def fails(self) -> bool:
        return self.kind.fails

    def render(self) -> str:
        """Format as ``path:line: message`` (or ``path: message``)."""
        if self.line is None:
            return f"{self.path}: {self.message}"
        return f"{self.path}:{self.line}: {self.message}"

    def __str__(self) -> str:
        return self.render()


@dataclass(frozen=True, slots=True)
class CheckResult:
    """Outcome of one run: every diagnostic, in the order produced."""

    diagnostics: tuple[Diagnostic, ...] = ()

    @property
    def failures(self) -> tuple[Diagnostic, ...]:
        return tuple(d for d in self.diagnostics if d.fails)

    @property
    def warnings(self) -> tuple[Diagnostic, ...]:
        return tuple(d for d in self.diagnostics if not d.fails)

    @property
    def passed(self) -> bool:
        return not self.failures

    @property
    def exit_code(self) -> int:
        return 0 if self.passed else 1
