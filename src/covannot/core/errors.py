"""coverage-annotations error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Coverage report
- 4xxx: Source scanning

Every error raised through this hierarchy is fatal: the run aborts and no
report is printed. Annotation problems are diagnostics, not errors.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002

    # Coverage report (3xxx)
    COVERAGE_PARSE_ERROR = 3001
    COVERAGE_NOT_FOUND = 3002
    COVERAGE_PATH_UNRESOLVED = 3003

    # Source scanning (4xxx)
    SCAN_READ_ERROR = 4001
    SCAN_DIR_ERROR = 4002


@dataclass(eq=False)
class CovAnnotError(Exception):
    """Base error with structured context."""

    code: ErrorCode
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'CONFIG_PARSE_ERROR')."""
        return self.code.name

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(CovAnnotError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )


class CoverageError(CovAnnotError):
    """Coverage report could not be found, read or resolved."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "CoverageError":
        return cls(
            code=ErrorCode.COVERAGE_PARSE_ERROR,
            message=f"Failed to parse coverage report {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def not_found(cls, root: str, names: list[str]) -> "CoverageError":
        return cls(
            code=ErrorCode.COVERAGE_NOT_FOUND,
            message=f"No coverage report ({', '.join(names)}) found under {root}",
            details={"root": root, "names": names},
        )

    @classmethod
    def unresolved_path(cls, filename: str, roots: list[str]) -> "CoverageError":
        return cls(
            code=ErrorCode.COVERAGE_PATH_UNRESOLVED,
            message=f"Can't find covered source file {filename} under any source root",
            details={"filename": filename, "roots": roots},
        )


class ScanError(CovAnnotError):
    """Source files or directories could not be read."""

    @classmethod
    def read_error(cls, path: str, reason: str) -> "ScanError":
        return cls(
            code=ErrorCode.SCAN_READ_ERROR,
            message=f"Can't read source file {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def dir_error(cls, path: str, reason: str) -> "ScanError":
        return cls(
            code=ErrorCode.SCAN_DIR_ERROR,
            message=f"Can't read directory {path}: {reason}",
            details={"path": path, "reason": reason},
        )

