"""coverage-annotations CLI - covannot command."""

import sys
from pathlib import Path

import click

from covannot import __version__
from covannot.annotations.models import FlakyPolicy
from covannot.config.loader import load_config
from covannot.core.errors import CovAnnotError
from covannot.core.logging import configure_logging, get_log_file_path
from covannot.core.progress import pluralize, status
from covannot.diagnostics import CheckResult
from covannot.runner import run_check


def _print_result(result: CheckResult) -> None:
    for diagnostic in result.diagnostics:
        click.echo(diagnostic.render(), err=True)

    warnings = len(result.warnings)
    suffix = f" ({pluralize(warnings, 'warning')})" if warnings else ""
    if result.passed:
        status(f"Coverage annotations are consistent{suffix}", style="success")
    else:
        failures = pluralize(len(result.failures), "inconsistency", "inconsistencies")
        status(f"{failures} found{suffix}", style="error")


@click.command()
@click.version_option(version=__version__, prog_name="covannot")
@click.argument(
    "path",
    default=".",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
)
@click.option(
    "--flaky-policy",
    type=click.Choice([p.value for p in FlakyPolicy]),
    default=None,
    help="How FLAKY TESTED lines are checked (default: maybe-tested, never flagged).",
)
@click.option(
    "--source-ext",
    "source_exts",
    multiple=True,
    help="Extension of annotated source files (repeatable, default: .rs).",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(
    ctx: click.Context,
    path: Path,
    flaky_policy: str | None,
    source_exts: tuple[str, ...],
    verbose: bool,
) -> None:
    """Check coverage annotations in source comments against coverage reports.

    PATH is the project root (default: current directory). Cobertura reports
    are searched anywhere under it; files under src/ and tests/ are checked.
    """
    configure_logging(level="DEBUG" if verbose else "WARNING")
    project_root = path.resolve()

    check_overrides: dict[str, object] = {}
    if flaky_policy:
        check_overrides["flaky_policy"] = flaky_policy
    if source_exts:
        check_overrides["source_extensions"] = list(source_exts)
    overrides: dict[str, dict[str, object]] = {}
    if check_overrides:
        overrides["check"] = check_overrides
    if verbose:
        overrides["logging"] = {"level": "DEBUG"}

    try:
        config = load_config(project_root, **overrides)
        configure_logging(config=config.logging)
        result = run_check(project_root, config.check)
    except CovAnnotError as e:
        message = str(e)
        if log_file := get_log_file_path():
            message += f"\nSee {log_file} for details."
        raise click.ClickException(message) from e

    _print_result(result)
    ctx.exit(result.exit_code)


def main() -> None:
    """Console script entry point; every failure, usage errors included, exits 1."""
    try:
        code = cli.main(standalone_mode=False)
    except click.ClickException as e:
        e.show()
        sys.exit(1)
    except click.Abort:
        click.echo("Aborted!", err=True)
        sys.exit(1)
    sys.exit(code if isinstance(code, int) else 0)


if __name__ == "__main__":
    main()
