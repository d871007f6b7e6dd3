"""Annotation data model.

A source line carries at most one lexical mark (``// NOT TESTED``,
``// BEGIN MAYBE TESTED``, ``// FILE NOT TESTED`` ...). Scanning a file turns
marks into one resolved ``LineAnnotation`` per physical line, and the whole
file into a ``FileAnnotations`` verdict.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class Coverage(Enum):
    """Claimed coverage of a line, region or file. Values are the comment labels."""

    TESTED = "TESTED"
    MAYBE_TESTED = "MAYBE TESTED"
    NOT_TESTED = "NOT TESTED"
    FLAKY_TESTED = "FLAKY TESTED"

    @property
    def label(self) -> str:
        return self.value


class MarkScope(Enum):
    """What a mark applies to."""

    NONE = "none"
    LINE = "line"
    BEGIN = "begin"
    END = "end"
    FILE = "file"


class LineMark(Enum):
    """Lexical annotation found on a single line."""

    NONE = "none"
    LINE_TESTED = "line_tested"
    LINE_MAYBE_TESTED = "line_maybe_tested"
    LINE_NOT_TESTED = "line_not_tested"
    LINE_FLAKY_TESTED = "line_flaky_tested"
    BEGIN_MAYBE_TESTED = "begin_maybe_tested"
    BEGIN_NOT_TESTED = "begin_not_tested"
    BEGIN_FLAKY_TESTED = "begin_flaky_tested"
    END_MAYBE_TESTED = "end_maybe_tested"
    END_NOT_TESTED = "end_not_tested"
    END_FLAKY_TESTED = "end_flaky_tested"
    FILE_MAYBE_TESTED = "file_maybe_tested"
    FILE_NOT_TESTED = "file_not_tested"
    FILE_FLAKY_TESTED = "file_flaky_tested"

    @property
    def scope(self) -> MarkScope:
        return _MARK_PARTS[self][0]

    @property
    def coverage(self) -> Coverage | None:
        """Coverage kind of the mark; None for ``LineMark.NONE``."""
        return _MARK_PARTS[self][1]


_MARK_PARTS: dict[LineMark, tuple[MarkScope, Coverage | None]] = {
    LineMark.NONE: (MarkScope.NONE, None),
    LineMark.LINE_TESTED: (MarkScope.LINE, Coverage.TESTED),
    LineMark.LINE_MAYBE_TESTED: (MarkScope.LINE, Coverage.MAYBE_TESTED),
    LineMark.LINE_NOT_TESTED: (MarkScope.LINE, Coverage.NOT_TESTED),
    LineMark.LINE_FLAKY_TESTED: (MarkScope.LINE, Coverage.FLAKY_TESTED),
    LineMark.BEGIN_MAYBE_TESTED: (MarkScope.BEGIN, Coverage.MAYBE_TESTED),
    LineMark.BEGIN_NOT_TESTED: (MarkScope.BEGIN, Coverage.NOT_TESTED),
    LineMark.BEGIN_FLAKY_TESTED: (MarkScope.BEGIN, Coverage.FLAKY_TESTED),
    LineMark.END_MAYBE_TESTED: (MarkScope.END, Coverage.MAYBE_TESTED),
    LineMark.END_NOT_TESTED: (MarkScope.END, Coverage.NOT_TESTED),
    LineMark.END_FLAKY_TESTED: (MarkScope.END, Coverage.FLAKY_TESTED),
    LineMark.FILE_MAYBE_TESTED: (MarkScope.FILE, Coverage.MAYBE_TESTED),
    LineMark.FILE_NOT_TESTED: (MarkScope.FILE, Coverage.NOT_TESTED),
    LineMark.FILE_FLAKY_TESTED: (MarkScope.FILE, Coverage.FLAKY_TESTED),
}


@dataclass(frozen=True, slots=True)
class LineAnnotation:
    """Resolved annotation of one line.

    ``explicit`` is True only when this exact line carried a single-line
    mark; values inherited from a region or the default are not explicit.
    The same shape is used for the region state carried between lines.
    """

    coverage: Coverage
    explicit: bool = False

    def inherited(self) -> LineAnnotation:
        """Same coverage, not explicit."""
        if not self.explicit:
            return self
        return LineAnnotation(self.coverage, explicit=False)


DEFAULT_ANNOTATION = LineAnnotation(Coverage.TESTED, explicit=False)


class FlakyPolicy(Enum):
    """How FLAKY TESTED lines, regions and files are checked.

    - ``not-tested``: as if NOT TESTED (flagged when hit)
    - ``maybe-tested``: never flagged
    - ``tested``: as if TESTED (flagged when not hit)
    """

    NOT_TESTED = "not-tested"
    MAYBE_TESTED = "maybe-tested"
    TESTED = "tested"

    @property
    def coverage(self) -> Coverage:
        """Coverage a flaky annotation is checked as."""
        return _FLAKY_AS[self]

    def effective(self, coverage: Coverage) -> Coverage:
        """Map FLAKY_TESTED to the policy's coverage; others pass through."""
        if coverage is Coverage.FLAKY_TESTED:
            return self.coverage
        return coverage


_FLAKY_AS: dict[FlakyPolicy, Coverage] = {
    FlakyPolicy.NOT_TESTED: Coverage.NOT_TESTED,
    FlakyPolicy.MAYBE_TESTED: Coverage.MAYBE_TESTED,
    FlakyPolicy.TESTED: Coverage.TESTED,
}


class FileVerdict(Enum):
    """Whole-file outcome of scanning."""

    LINES = "lines"
    MAYBE_TESTED = "maybe_tested"
    NOT_TESTED = "not_tested"


@dataclass(frozen=True, slots=True)
class FileAnnotations:
    """Scan result for one source file.

    ``lines`` holds one annotation per physical line (index 0 is line 1),
    kept even when the file collapses to a whole-file verdict.
    ``file_mark`` is the coverage of the first FILE mark seen, if any.
    """

    path: Path
    verdict: FileVerdict
    lines: tuple[LineAnnotation, ...] = ()
    file_mark: Coverage | None = None

    @property
    def is_whole_file(self) -> bool:
        return self.verdict is not FileVerdict.LINES
