"""Annotation scanning: marks, regions, untrusted lines and file verdicts.

Usage:
    from covannot.annotations import FlakyPolicy, scan_file

    result = scan_file(Path("src/lib.rs"), policy=FlakyPolicy.MAYBE_TESTED)
    result.annotations.verdict  # FileVerdict.LINES
    result.diagnostics  # redundant / nested / repeated annotation warnings
"""

from covannot.annotations.marks import MarkResult, extract_line_mark
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
from covannot.annotations.regions import Transition, transition
from covannot.annotations.scanner import (
    ScanResult,
    collect_file_annotations,
    read_source_lines,
    scan_file,
    scan_files,
)
from covannot.annotations.untrusted import (
    UNTRUSTED_ANNOTATION,
    block_comment_open_after,
    is_untrusted_line,
)

__all__ = [
    # Models
    "DEFAULT_ANNOTATION",
    "Coverage",
    "FileAnnotations",
    "FileVerdict",
    "FlakyPolicy",
    "LineAnnotation",
    "LineMark",
    "MarkScope",
    # Marks
    "MarkResult",
    "extract_line_mark",
    # Regions
    "Transition",
    "transition",
    # Untrusted lines
    "UNTRUSTED_ANNOTATION",
    "block_comment_open_after",
    "is_untrusted_line",
    # Scanning
    "ScanResult",
    "collect_file_annotations",
    "read_source_lines",
    "scan_file",
    "scan_files",
]
