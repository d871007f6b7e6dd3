"""Tests for coverage/builder.py - coverage map construction and merging."""

from __future__ import annotations

from pathlib import Path

import pytest
from project_support import ProjectBuilder

from covannot.core.errors import CoverageError, ErrorCode
from covannot.coverage.builder import (
    CoverageMapBuilder,
    build_coverage_map,
    join_hit,
    resolve_source_path,
)
from covannot.coverage.events import ClassEvent, LineEvent, SourceEvent


class TestJoinHit:
    """The absent < miss < hit lattice join."""

    @pytest.mark.parametrize(
        ("existing", "observed", "expected"),
        [
            (None, False, False),
            (None, True, True),
            (False, False, False),
            (False, True, True),
            (True, False, True),
            (True, True, True),
        ],
    )
    def test_join(self, existing: bool | None, observed: bool, expected: bool) -> None:
        assert join_hit(existing, observed) is expected


class TestResolveSourcePath:
    """Ordered search over source roots."""

    def test_empty_root_is_project_relative(self, project: ProjectBuilder) -> None:
        path = project.source("src/lib.rs", "")

        assert resolve_source_path("src/lib.rs", [""], project.root) == path

    def test_first_existing_root_wins(self, project: ProjectBuilder) -> None:
        first = project.source("a/src/lib.rs", "")
        project.source("b/src/lib.rs", "")

        resolved = resolve_source_path("src/lib.rs", ["", "a", "b"], project.root)

        assert resolved == first

    def test_absolute_root(self, project: ProjectBuilder, tmp_path: Path) -> None:
        elsewhere = tmp_path / "elsewhere"
        (elsewhere / "src").mkdir(parents=True)
        (elsewhere / "src" / "x.rs").write_text("", encoding="utf-8")

        resolved = resolve_source_path("src/x.rs", ["", str(elsewhere)], project.root)

        assert resolved == (elsewhere / "src" / "x.rs").resolve()

    def test_unresolvable_returns_none(self, project: ProjectBuilder) -> None:
        assert resolve_source_path("src/missing.rs", ["", "a"], project.root) is None


class TestCoverageMapBuilder:
    """Event folding."""

    def test_lines_recorded_for_current_class(self, project: ProjectBuilder) -> None:
        path = project.source("src/lib.rs", "a\nb\nc\n")
        builder = CoverageMapBuilder(project.root)
        builder.begin_fragment()

        for event in (ClassEvent("src/lib.rs"), LineEvent(1, 3), LineEvent(2, 0)):
            builder.feed(event)

        assert builder.build() == {path: {1: True, 2: False}}

    def test_line_numbers_below_one_are_ignored(self, project: ProjectBuilder) -> None:
        path = project.source("src/lib.rs", "a\n")
        builder = CoverageMapBuilder(project.root)
        builder.begin_fragment()

        for event in (ClassEvent("src/lib.rs"), LineEvent(0, 1), LineEvent(-1, 1)):
            builder.feed(event)

        assert builder.build() == {path: {}}

    def test_lines_before_any_class_are_ignored(self, project: ProjectBuilder) -> None:
        builder = CoverageMapBuilder(project.root)
        builder.begin_fragment()

        builder.feed(LineEvent(1, 1))

        assert builder.build() == {}

    def test_hit_is_never_downgraded(self, project: ProjectBuilder) -> None:
        path = project.source("src/lib.rs", "a\n")
        builder = CoverageMapBuilder(project.root)
        builder.begin_fragment()

        for event in (ClassEvent("src/lib.rs"), LineEvent(1, 1), LineEvent(1, 0)):
            builder.feed(event)

        assert builder.build()[path][1] is True

    def test_miss_is_upgraded_by_later_hit(self, project: ProjectBuilder) -> None:
        path = project.source("src/lib.rs", "a\n")
        builder = CoverageMapBuilder(project.root)
        builder.begin_fragment()

        for event in (ClassEvent("src/lib.rs"), LineEvent(1, 0), LineEvent(1, 5)):
            builder.feed(event)

        assert builder.build()[path][1] is True

    def test_source_roots_are_used_in_order(self, project: ProjectBuilder) -> None:
        path = project.source("crate/src/lib.rs", "a\n")
        builder = CoverageMapBuilder(project.root)
        builder.begin_fragment()

        for event in (SourceEvent("crate"), ClassEvent("src/lib.rs"), LineEvent(1, 1)):
            builder.feed(event)

        assert builder.build() == {path: {1: True}}

    def test_source_roots_reset_per_fragment(self, project: ProjectBuilder) -> None:
        project.source("crate/src/lib.rs", "a\n")
        builder = CoverageMapBuilder(project.root)
        builder.begin_fragment()
        builder.feed(SourceEvent("crate"))
        builder.begin_fragment()

        with pytest.raises(CoverageError):
            builder.feed(ClassEvent("src/lib.rs"))

    def test_unresolvable_class_raises(self, project: ProjectBuilder) -> None:
        builder = CoverageMapBuilder(project.root)
        builder.begin_fragment()

        with pytest.raises(CoverageError) as exc_info:
            builder.feed(ClassEvent("src/gone.rs"))

        assert exc_info.value.code is ErrorCode.COVERAGE_PATH_UNRESOLVED
        assert exc_info.value.details["roots"] == [""]

    def test_build_returns_independent_copy(self, project: ProjectBuilder) -> None:
        path = project.source("src/lib.rs", "a\n")
        builder = CoverageMapBuilder(project.root)
        builder.begin_fragment()
        builder.feed(ClassEvent("src/lib.rs"))
        builder.feed(LineEvent(1, 0))

        built = builder.build()
        built[path][1] = True

        assert builder.build()[path][1] is False


class TestBuildCoverageMap:
    """Merging report fragments from disk."""

    def test_fragments_are_merged(self, project: ProjectBuilder) -> None:
        lib = project.source("src/lib.rs", "a\nb\nc\n")
        util = project.source("src/util.rs", "a\n")
        first = project.report("target/a/cobertura.xml", {"src/lib.rs": {1: 1, 2: 0}})
        second = project.report(
            "target/b/cobertura.xml",
            {"src/lib.rs": {1: 0, 2: 4, 3: 0}, "src/util.rs": {1: 0}},
        )

        coverage = build_coverage_map([first, second], project.root)

        assert coverage == {lib: {1: True, 2: True, 3: False}, util: {1: False}}

    def test_merge_is_order_independent(self, project: ProjectBuilder) -> None:
        project.source("src/lib.rs", "a\nb\n")
        first = project.report("a/cobertura.xml", {"src/lib.rs": {1: 1, 2: 0}})
        second = project.report("b/cobertura.xml", {"src/lib.rs": {1: 0, 2: 0}})

        forward = build_coverage_map([first, second], project.root)
        backward = build_coverage_map([second, first], project.root)

        assert forward == backward

    def test_no_fragments_gives_empty_map(self, project: ProjectBuilder) -> None:
        assert build_coverage_map([], project.root) == {}

    def test_declared_sources_resolve_relative_filenames(self, project: ProjectBuilder) -> None:
        path = project.source("crates/core/src/lib.rs", "a\n")
        report = project.report(
            "target/cov/cobertura.xml",
            {"src/lib.rs": {1: 1}},
            sources=[str(project.root / "crates" / "core")],
        )

        assert build_coverage_map([report], project.root) == {path: {1: True}}
