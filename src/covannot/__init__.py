"""coverage-annotations - check coverage annotation comments against a coverage report."""

__version__ = "0.1.0"
