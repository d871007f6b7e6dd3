"""Directories skipped while walking a project tree.

Tier 0 (HARDCODED_DIRS): Never traversed, neither for sources nor for
    coverage reports. VCS internals and our own config directory.

Tier 1 (DEFAULT_PRUNABLE_DIRS): Skipped when looking for annotated sources
    outside the tracked roots. Dependencies, caches and build outputs.
    Coverage reports usually live in build output directories (``target/``,
    ``coverage/``), so report discovery only prunes tier 0.
"""

from __future__ import annotations

HARDCODED_DIRS: frozenset[str] = frozenset(
    (
        # VCS internals
        ".git",
        ".svn",
        ".hg",
        ".bzr",
        # coverage-annotations config
        ".covannot",
    )
)

DEFAULT_PRUNABLE_DIRS: frozenset[str] = frozenset(
    (
        # -------------------------------------------------------------------------
        # Rust / JVM / C-family build outputs
        # -------------------------------------------------------------------------
        "target",
        "build",
        "out",
        "dist",
        "cmake-build-debug",
        "cmake-build-release",
        # -------------------------------------------------------------------------
        # JavaScript/Node.js ecosystem
        # -------------------------------------------------------------------------
        "node_modules",
        "bower_components",
        # -------------------------------------------------------------------------
        # Python ecosystem
        # -------------------------------------------------------------------------
        "venv",
        ".venv",
        "__pycache__",
        ".pytest_cache",
        ".mypy_cache",
        ".ruff_cache",
        ".tox",
        ".nox",
        # -------------------------------------------------------------------------
        # Coverage outputs
        # -------------------------------------------------------------------------
        "coverage",
        ".coverage",
        "htmlcov",
        # -------------------------------------------------------------------------
        # IDE/Editor directories
        # -------------------------------------------------------------------------
        ".idea",
        ".vscode",
        ".vs",
        # -------------------------------------------------------------------------
        # Misc caches
        # -------------------------------------------------------------------------
        ".cache",
        "vendor",
    )
)

PRUNABLE_DIRS: frozenset[str] = HARDCODED_DIRS | DEFAULT_PRUNABLE_DIRS


def is_hardcoded_dir(dirname: str) -> bool:
    """Check if directory is never traversed."""
    return dirname in HARDCODED_DIRS


def is_prunable_dir(dirname: str) -> bool:
    """Check if directory is skipped when looking for sources outside tracked roots."""
    return dirname in PRUNABLE_DIRS


__all__ = [
    "HARDCODED_DIRS",
    "DEFAULT_PRUNABLE_DIRS",
    "PRUNABLE_DIRS",
    "is_hardcoded_dir",
    "is_prunable_dir",
]
