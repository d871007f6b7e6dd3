"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config() (CLI options)
2. Environment variables (COVANNOT__SECTION__KEY)
3. Project YAML (.covannot/config.yaml)
4. Built-in defaults (this file)

Environment Variable Format:
    COVANNOT__<SECTION>__<KEY>=<VALUE>

Examples:
    COVANNOT__LOGGING__LEVEL=DEBUG
    COVANNOT__CHECK__FLAKY_POLICY=not-tested
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from covannot.annotations.models import FlakyPolicy

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration."""

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        COVANNOT__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="WARNING",
        description="Root log level. Diagnostics are always printed regardless of level.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class CheckConfig(BaseModel):
    """Annotation check configuration.

    Env vars:
        COVANNOT__CHECK__FLAKY_POLICY: not-tested, maybe-tested or tested
        COVANNOT__CHECK__SOURCE_EXTENSIONS: JSON list, e.g. '[".rs", ".c"]'
        COVANNOT__CHECK__TRACKED_ROOTS: JSON list of project-relative dirs
    """

    flaky_policy: FlakyPolicy = Field(
        default=FlakyPolicy.MAYBE_TESTED,
        description="How FLAKY TESTED lines are checked. maybe-tested never flags them.",
    )
    source_extensions: list[str] = Field(
        default_factory=lambda: [".rs"],
        description="Extensions of source files scanned for annotations.",
    )
    tracked_roots: list[str] = Field(
        default_factory=lambda: ["src", "tests"],
        description="Project-relative directories whose files are cross-checked. "
        "Annotations elsewhere are scanned but never checked against coverage.",
    )
    report_names: list[str] = Field(
        default_factory=lambda: ["cobertura.xml"],
        description="File names of Cobertura coverage reports, searched anywhere in the project.",
    )
    unreachable_token: str = Field(
        default="unreachable!(",
        description="Lines containing this token are expected never to run.",
    )

    @field_validator("source_extensions")
    @classmethod
    def validate_source_extensions(cls, v: list[str]) -> list[str]:
        if not v:
            raise ValueError("At least one source extension is required")
        return [ext if ext.startswith(".") else f".{ext}" for ext in v]

    @field_validator("tracked_roots", "report_names")
    @classmethod
    def validate_non_empty(cls, v: list[str]) -> list[str]:
        if not v:
            raise ValueError("List must not be empty")
        return v


class CovAnnotConfig(BaseModel):
    """Root configuration for coverage-annotations."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    check: CheckConfig = Field(default_factory=CheckConfig)
