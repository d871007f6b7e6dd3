"""One complete check of a project.

Phases run strictly one after the other: find and merge the coverage
reports, find and scan the annotated sources, then cross-check. Any
structural failure raises and aborts the run before anything is reported.
"""

from __future__ import annotations

from pathlib import Path

from covannot.annotations.scanner import scan_files
from covannot.config.models import CheckConfig
from covannot.core.logging import get_logger
from covannot.core.progress import spinner
from covannot.coverage.builder import build_coverage_map
from covannot.diagnostics import CheckResult
from covannot.discovery import find_coverage_reports, find_source_files, tracked_root_paths
from covannot.reconcile import check_annotations

log = get_logger("runner")


def run_check(project_root: Path, config: CheckConfig | None = None) -> CheckResult:
    """Check every annotation of the project against its coverage reports.

    Raises:
        CovAnnotError: On unreadable/unparsable reports, unresolvable covered
            files, or unreadable sources and directories.
    """
    config = config or CheckConfig()
    project_root = project_root.resolve()
    policy = config.flaky_policy
    log.debug("check_started", project_root=str(project_root), flaky_policy=policy.value)

    tracked_roots = tracked_root_paths(project_root, config.tracked_roots)

    with spinner("Reading coverage reports"):
        reports = find_coverage_reports(project_root, config.report_names)
        coverage = build_coverage_map(reports, project_root)

    with spinner("Scanning annotations"):
        sources = find_source_files(
            project_root, config.source_extensions, tracked_roots=tracked_roots
        )
        annotations, scan_diagnostics = scan_files(
            sources,
            policy=policy,
            unreachable_token=config.unreachable_token,
        )

    return check_annotations(
        coverage,
        annotations,
        tracked_roots=tracked_roots,
        policy=policy,
        scan_diagnostics=scan_diagnostics,
    )
