"""Finding coverage reports and annotated source files in a project tree.

Both walks visit directories in sorted order so that results, and therefore
diagnostics and merge order, are the same from one run to the next.
"""

from __future__ import annotations

import os
from collections.abc import Callable, Collection
from pathlib import Path

from covannot.core.errors import CoverageError, ScanError
from covannot.core.excludes import is_hardcoded_dir, is_prunable_dir
from covannot.core.logging import get_logger

log = get_logger("discovery")


def _raise_dir_error(error: OSError) -> None:
    raise ScanError.dir_error(str(error.filename), error.strerror or str(error))


def _walk_files(root: Path, should_prune: Callable[[Path, str], bool]) -> list[Path]:
    """Walk all files under root with pruning. Paths are canonical."""
    results: list[Path] = []
    for dirpath, dirnames, filenames in os.walk(root, onerror=_raise_dir_error):
        parent = Path(dirpath)
        dirnames[:] = sorted(d for d in dirnames if not should_prune(parent, d))
        for filename in sorted(filenames):
            results.append(Path(dirpath, filename).resolve())
    return results


def find_coverage_reports(project_root: Path, names: Collection[str]) -> list[Path]:
    """Find every coverage report fragment under the project.

    Build output directories are searched too, since that is where coverage
    tools usually write their reports.

    Raises:
        CoverageError: If no report is found.
    """
    reports = [
        path
        for path in _walk_files(project_root, lambda _parent, name: is_hardcoded_dir(name))
        if path.name in names
    ]
    if not reports:
        raise CoverageError.not_found(str(project_root), sorted(names))
    log.debug("coverage_reports_found", count=len(reports), reports=[str(r) for r in reports])
    return reports


def find_source_files(
    project_root: Path,
    extensions: Collection[str],
    *,
    tracked_roots: Collection[Path] = (),
) -> list[Path]:
    """Find every source file with one of the given extensions.

    Build output and dependency directories are pruned outside the tracked
    roots only: inside them a module directory named ``build`` or
    ``coverage`` is ordinary source.
    """

    def should_prune(parent: Path, name: str) -> bool:
        if is_hardcoded_dir(name):
            return True
        return is_prunable_dir(name) and not is_tracked((parent / name).resolve(), tracked_roots)

    sources = [
        path for path in _walk_files(project_root, should_prune) if path.suffix in extensions
    ]
    log.debug("source_files_found", count=len(sources))
    return sources


def tracked_root_paths(project_root: Path, tracked_roots: Collection[str]) -> list[Path]:
    """Canonical paths of the tracked roots that exist in the project."""
    roots = []
    for name in tracked_roots:
        candidate = project_root / name
        if candidate.is_dir():
            roots.append(candidate.resolve())
    return roots


def is_tracked(path: Path, roots: Collection[Path]) -> bool:
    return any(path.is_relative_to(root) for root in roots)
