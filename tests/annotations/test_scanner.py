"""Tests for annotations/scanner.py - per-file scanning and aggregation."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from covannot.annotations.models import (
    Coverage,
    FileVerdict,
    FlakyPolicy,
    LineAnnotation,
)
from covannot.annotations.scanner import (
    collect_file_annotations,
    read_source_lines,
    scan_file,
    scan_files,
)
from covannot.core.errors import ErrorCode, ScanError
from covannot.diagnostics import DiagnosticKind

PATH = Path("/project/src/lib.rs")

Split = Callable[[str], list[str]]


def _coverages(result_lines: tuple[LineAnnotation, ...]) -> list[Coverage]:
    return [a.coverage for a in result_lines]


class TestRegions:
    """Region handling across lines."""

    def test_plain_file_is_all_tested(self, lines_of: Split) -> None:
        result = collect_file_annotations(PATH, lines_of("fn a() {\n    b();\n"))

        assert result.annotations.verdict is FileVerdict.LINES
        assert result.annotations.lines[1] == LineAnnotation(Coverage.TESTED, explicit=False)
        assert result.diagnostics == []

    def test_not_tested_region(self, lines_of: Split) -> None:
        text = (
            "fn a() {\n"  # 1
            "    // BEGIN NOT TESTED\n"  # 2 (comment-only: untrusted)
            "    b();\n"  # 3
            "    c();\n"  # 4
            "    // END NOT TESTED\n"  # 5
            "    d();\n"  # 6
        )
        result = collect_file_annotations(PATH, lines_of(text))
        lines = result.annotations.lines

        assert lines[2] == LineAnnotation(Coverage.NOT_TESTED, explicit=False)
        assert lines[3] == LineAnnotation(Coverage.NOT_TESTED, explicit=False)
        assert lines[5] == LineAnnotation(Coverage.TESTED, explicit=False)
        assert result.diagnostics == []

    def test_nested_begin_reported_once_and_region_kept(self, lines_of: Split) -> None:
        text = (
            "x(); // BEGIN NOT TESTED\n"
            "y(); // BEGIN NOT TESTED\n"
            "z();\n"
            "w(); // END NOT TESTED\n"
            "v();\n"
        )
        result = collect_file_annotations(PATH, lines_of(text))

        nested = [d for d in result.diagnostics if d.kind is DiagnosticKind.NESTED_BEGIN]
        assert len(nested) == 1
        assert nested[0].line == 2
        assert _coverages(result.annotations.lines) == [
            Coverage.NOT_TESTED,
            Coverage.NOT_TESTED,
            Coverage.NOT_TESTED,
            Coverage.NOT_TESTED,
            Coverage.TESTED,
        ]

    def test_unmatched_end_is_reported(self, lines_of: Split) -> None:
        result = collect_file_annotations(PATH, lines_of("x(); // END MAYBE TESTED\n"))

        assert [d.kind for d in result.diagnostics] == [DiagnosticKind.NESTED_END]
        assert result.annotations.lines[0].coverage is Coverage.TESTED

    def test_redundant_mark_is_reported(self, lines_of: Split) -> None:
        result = collect_file_annotations(PATH, lines_of("x(); // TESTED\n"))

        assert [d.kind for d in result.diagnostics] == [DiagnosticKind.REDUNDANT_ANNOTATION]
        assert result.annotations.lines[0] == LineAnnotation(Coverage.TESTED, explicit=True)


class TestOverrides:
    """Unreachable token and untrusted lines override the resolved annotation."""

    def test_unreachable_line_is_not_tested(self, lines_of: Split) -> None:
        result = collect_file_annotations(PATH, lines_of('    _ => unreachable!("no"),\n'))

        assert result.annotations.lines[0] == LineAnnotation(Coverage.NOT_TESTED, explicit=False)

    def test_unreachable_does_not_override_explicit_mark(self, lines_of: Split) -> None:
        result = collect_file_annotations(
            PATH, lines_of("    _ => unreachable!(), // MAYBE TESTED\n")
        )

        assert result.annotations.lines[0] == LineAnnotation(Coverage.MAYBE_TESTED, explicit=True)

    def test_custom_unreachable_token(self, lines_of: Split) -> None:
        result = collect_file_annotations(
            PATH, lines_of("    abort();\n"), unreachable_token="abort("
        )

        assert result.annotations.lines[0].coverage is Coverage.NOT_TESTED

    def test_untrusted_line_overrides_region(self, lines_of: Split) -> None:
        text = "x(); // BEGIN NOT TESTED\n    }\ny();\nz(); // END NOT TESTED\n"
        result = collect_file_annotations(PATH, lines_of(text))
        lines = result.annotations.lines

        assert lines[1] == LineAnnotation(Coverage.MAYBE_TESTED, explicit=False)
        # The region survives the override
        assert lines[2] == LineAnnotation(Coverage.NOT_TESTED, explicit=False)

    def test_untrusted_line_overrides_explicit_mark(self, lines_of: Split) -> None:
        result = collect_file_annotations(PATH, lines_of("    // NOT TESTED\n"))

        assert result.annotations.lines[0] == LineAnnotation(Coverage.MAYBE_TESTED, explicit=False)

    def test_block_comment_body_is_untrusted(self, lines_of: Split) -> None:
        text = "/**\n * Docs.\n */\nfn a() {\n"
        result = collect_file_annotations(PATH, lines_of(text))

        assert _coverages(result.annotations.lines) == [
            Coverage.MAYBE_TESTED,
            Coverage.MAYBE_TESTED,
            Coverage.MAYBE_TESTED,
            Coverage.TESTED,
        ]

    def test_multiplication_continuation_keeps_region(self, lines_of: Split) -> None:
        text = "    let x = a // NOT TESTED\n        * factor;\n"
        result = collect_file_annotations(PATH, lines_of(text))

        assert result.annotations.lines[1] == LineAnnotation(Coverage.TESTED, explicit=False)


class TestFileVerdicts:
    """Whole-file verdict aggregation."""

    def test_file_not_tested(self, lines_of: Split) -> None:
        result = collect_file_annotations(PATH, lines_of("// FILE NOT TESTED\nfn a() {}\n"))

        assert result.annotations.verdict is FileVerdict.NOT_TESTED
        assert result.annotations.file_mark is Coverage.NOT_TESTED
        assert result.annotations.is_whole_file
        assert result.diagnostics == []

    def test_file_maybe_tested_wins_over_not_tested(self, lines_of: Split) -> None:
        text = "// FILE NOT TESTED\n// FILE MAYBE TESTED\n"
        result = collect_file_annotations(PATH, lines_of(text))

        assert result.annotations.verdict is FileVerdict.MAYBE_TESTED
        assert result.annotations.file_mark is Coverage.NOT_TESTED
        assert [d.kind for d in result.diagnostics] == [DiagnosticKind.REPEATED_FILE_ANNOTATION]

    def test_every_repeated_file_mark_is_reported(self, lines_of: Split) -> None:
        text = "// FILE NOT TESTED\n// FILE NOT TESTED\n// FILE NOT TESTED\n"
        result = collect_file_annotations(PATH, lines_of(text))

        assert [d.line for d in result.diagnostics] == [2, 3]

    def test_explicit_line_in_untested_file_is_reported(self, lines_of: Split) -> None:
        text = "// FILE NOT TESTED\nfn a() {\n    b(); // NOT TESTED\n"
        result = collect_file_annotations(PATH, lines_of(text))

        assert len(result.diagnostics) == 1
        diagnostic = result.diagnostics[0]
        assert diagnostic.kind is DiagnosticKind.EXPLICIT_IN_UNTESTED_FILE
        assert diagnostic.line == 3
        assert diagnostic.message == "line coverage annotation in a FILE which is NOT TESTED"
        assert diagnostic.fails

    @pytest.mark.parametrize(
        ("policy", "verdict"),
        [
            (FlakyPolicy.MAYBE_TESTED, FileVerdict.MAYBE_TESTED),
            (FlakyPolicy.NOT_TESTED, FileVerdict.NOT_TESTED),
            (FlakyPolicy.TESTED, FileVerdict.LINES),
        ],
    )
    def test_file_flaky_follows_policy(
        self, lines_of: Split, policy: FlakyPolicy, verdict: FileVerdict
    ) -> None:
        result = collect_file_annotations(PATH, lines_of("// FILE FLAKY TESTED\n"), policy=policy)

        assert result.annotations.verdict is verdict
        assert result.annotations.file_mark is Coverage.FLAKY_TESTED

    def test_flaky_label_in_untested_file_message(self, lines_of: Split) -> None:
        text = "// FILE FLAKY TESTED\nb(); // TESTED\n"
        result = collect_file_annotations(PATH, lines_of(text), policy=FlakyPolicy.NOT_TESTED)

        messages = [d.message for d in result.diagnostics]
        assert "line coverage annotation in a FILE which is FLAKY TESTED" in messages


class TestReading:
    """Reading files from disk."""

    def test_scan_file_reads_lines(self, tmp_path: Path) -> None:
        path = tmp_path / "lib.rs"
        path.write_text("fn a() {\n    b(); // NOT TESTED\n}\n", encoding="utf-8")

        result = scan_file(path)

        assert len(result.annotations.lines) == 3
        assert result.annotations.lines[1] == LineAnnotation(Coverage.NOT_TESTED, explicit=True)

    def test_crlf_line_endings(self, tmp_path: Path) -> None:
        path = tmp_path / "lib.rs"
        path.write_bytes(b"a();\r\n}\r\n")

        assert read_source_lines(path) == ["a();", "}"]

    def test_missing_file_raises_scan_error(self, tmp_path: Path) -> None:
        with pytest.raises(ScanError) as exc_info:
            scan_file(tmp_path / "missing.rs")
        assert exc_info.value.code is ErrorCode.SCAN_READ_ERROR

    def test_invalid_utf8_raises_scan_error(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.rs"
        path.write_bytes(b"\xff\xfe\xfa\n")

        with pytest.raises(ScanError):
            scan_file(path)

    def test_scan_files_keys_by_path(self, tmp_path: Path) -> None:
        first = tmp_path / "a.rs"
        second = tmp_path / "b.rs"
        first.write_text("x(); // TESTED\n", encoding="utf-8")
        second.write_text("// FILE NOT TESTED\n", encoding="utf-8")

        annotations, diagnostics = scan_files([first, second])

        assert set(annotations) == {first, second}
        assert annotations[second].verdict is FileVerdict.NOT_TESTED
        assert [d.path for d in diagnostics] == [first]
