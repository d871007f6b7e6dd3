"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages,
and provides fixtures to lay out a small annotated project with Cobertura
reports in a temporary directory.
"""

import sys
from collections.abc import Callable
from pathlib import Path

import pytest

# Insert local src directory at the beginning of sys.path
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

# Test helpers (project_support) live next to this file
_tests_dir = Path(__file__).parent
if str(_tests_dir) not in sys.path:
    sys.path.insert(0, str(_tests_dir))

# Force reimport of covannot modules if already imported
for module_name in list(sys.modules.keys()):
    if module_name.startswith("covannot"):
        del sys.modules[module_name]

from project_support import ProjectBuilder, cobertura_xml  # noqa: E402


@pytest.fixture
def project(tmp_path: Path) -> ProjectBuilder:
    """Empty project root with a src/ directory."""
    root = tmp_path / "project"
    (root / "src").mkdir(parents=True)
    return ProjectBuilder(root)


@pytest.fixture
def lines_of() -> Callable[[str], list[str]]:
    """Split source text into physical lines the way the scanner reads them."""

    def _split(text: str) -> list[str]:
        return text.split("\n")[:-1] if text.endswith("\n") else text.split("\n")

    return _split


@pytest.fixture
def cobertura() -> Callable[..., str]:
    """The Cobertura renderer, for tests that write reports themselves."""
    return cobertura_xml
